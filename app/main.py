"""
Interactive front end for SupportBank

A line-based command loop in the terminal:

    > Import Transactions2014.csv
    > List All
    > List Jon A
    > Export ledger.json
    > Quit

Run with:  python app/main.py [--import FILE ...]

All the logic lives in supportbank.commands; this module only reads
lines, prints results and sets up logging.
"""

from pathlib import Path
from typing import Optional

import typer

from supportbank.audit import configure_logging
from supportbank.commands import HELP_TEXT, CommandProcessor, describe_import
from supportbank.config import get_settings, validate_all_settings
from supportbank.orchestrator import create_app_components


app = typer.Typer(
    add_completion=False,
    help="Import transaction files (CSV, JSON, XML) and query account balances.",
)


@app.command()
def main(
    import_files: Optional[list[Path]] = typer.Option(
        None,
        "--import",
        help="File to import before the prompt opens (repeatable).",
        dir_okay=False,
    ),
    prompt: str = typer.Option("> ", help="Prompt shown before each command."),
) -> None:
    """Start the interactive command loop."""
    status = validate_all_settings()
    failed = [name for name in ("ledger", "logging", "app") if not status.get(name)]
    if failed:
        for name in failed:
            typer.echo(f"Invalid {name} settings: {status[f'{name}_error']}", err=True)
        raise typer.Exit(code=1)

    settings = get_settings()
    configure_logging(settings.logging)

    bank = create_app_components(settings)
    processor = CommandProcessor(bank)

    for report in bank.import_files(import_files or []):
        typer.echo(describe_import(report))

    typer.echo(HELP_TEXT)
    while True:
        try:
            line = input(prompt)
        except (EOFError, KeyboardInterrupt):
            typer.echo()
            break

        if not line.strip():
            continue

        result = processor.process(line)
        if result.output:
            typer.echo(result.output)
        if result.should_quit:
            break


if __name__ == "__main__":
    app()
