"""
Interactive command processing.

Turns one line of user input into a call on SupportBank and the text
to show for it. Reading input and printing output is left to the
entry point, so every command can be exercised without a terminal.

Commands:
    Import [File]   imports the transactions in the file
    Export [File]   writes every transaction to the file as JSON
    Report [File]   writes every account's report to the file
    List All        prints every account and its balance
    List [Account]  prints every transaction of the account
    Quit            exits
"""

from pydantic import BaseModel

from supportbank.errors import ExportError
from supportbank.models.record import ImportReport, ImportStatus
from supportbank.orchestrator import SupportBank
from supportbank.reports import format_account_list, format_account_report


HELP_TEXT = """The available commands are:
Import [File]: Imports the transactions in the specified file
Export [File]: Writes all transactions to the specified file as JSON
Report [File]: Writes every account's report to the specified file
List All: Prints the name of every account and the balance
List [Account]: Prints a list of all transactions associated with the account
Quit: Exits the program."""


class CommandResult(BaseModel):
    """What a command produced: text to show, and whether to stop."""

    output: str = ""
    should_quit: bool = False


def describe_import(report: ImportReport) -> str:
    """Human summary of one import."""
    path = report.source_path
    if report.status == ImportStatus.UNSUPPORTED_FORMAT:
        return "Unsupported filetype."
    if report.status == ImportStatus.FILE_UNREADABLE:
        return f"The supplied file {path} couldn't be read: {report.error_message}"
    if report.status == ImportStatus.PARSE_FAILED:
        return f"The supplied file {path} couldn't be parsed: {report.error_message}"

    lines = [
        f"Invalid record {rejection.record_index} in {path} "
        f"({rejection.reason}), skipping."
        for rejection in report.rejections
    ]
    lines.append(
        f"Imported {report.applied_count} of {report.records_read} "
        f"transactions from {path}."
    )
    return "\n".join(lines)


class CommandProcessor:
    """Dispatches command lines to a SupportBank."""

    def __init__(self, bank: SupportBank):
        self._bank = bank

    def process(self, line: str) -> CommandResult:
        command, _, argument = line.strip().partition(" ")
        argument = argument.strip()

        if command == "Quit" and not argument:
            self._bank.audit_logger.log_command("Quit")
            return CommandResult(should_quit=True)
        if command == "Import" and argument:
            return self._import(argument)
        if command == "Export" and argument:
            return self._export(argument)
        if command == "Report" and argument:
            return self._report(argument)
        if command == "List" and argument:
            return self._list(argument)

        self._bank.audit_logger.log_command("Help", line)
        return CommandResult(output=HELP_TEXT)

    def _import(self, path: str) -> CommandResult:
        self._bank.audit_logger.log_command("Import", path)
        return CommandResult(output=describe_import(self._bank.import_file(path)))

    def _export(self, path: str) -> CommandResult:
        self._bank.audit_logger.log_command("Export", path)
        try:
            count = self._bank.export_file(path)
        except ExportError as e:
            return CommandResult(output=str(e))
        return CommandResult(output=f"Exported {count} transactions to {path}.")

    def _report(self, path: str) -> CommandResult:
        self._bank.audit_logger.log_command("Report", path)
        try:
            count = self._bank.write_report(path)
        except ExportError as e:
            return CommandResult(output=str(e))
        return CommandResult(output=f"Wrote {count} account reports to {path}.")

    def _list(self, name: str) -> CommandResult:
        self._bank.audit_logger.log_command("List", name)
        if name == "All":
            return CommandResult(output=format_account_list(self._bank.list_all_accounts()))

        if self._bank.get_account(name) is None:
            return CommandResult(output="The specified account doesn't exist")
        return CommandResult(output=format_account_report(
            self._bank.ledger,
            name,
            self._bank.report_date_format,
        ))
