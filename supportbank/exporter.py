"""
Ledger Export

DESIGN DECISION: There is exactly ONE canonical export shape: a JSON
array mirroring the flat transaction log, in ledger order:

    [
      {"Date": "2023-01-01", "FromAccount": "Alice", "ToAccount": "Bob",
       "Narrative": "rent", "Amount": "10.50"},
      ...
    ]

It is the same shape the JSON parser reads, so an exported ledger can
be imported again and reproduces the same balances. Account grouping
is not preserved; it is rebuilt from the transactions on import.

The per-account text report is a separate, explicit operation
(write_report). It is for people, not for re-import.
"""

import json
from pathlib import Path
from typing import Any, Union

from supportbank.errors import ExportError
from supportbank.models.ledger import Ledger, Transaction
from supportbank.reports import format_ledger_report


def transaction_to_dict(transaction: Transaction) -> dict[str, Any]:
    """Export shape of a single transaction."""
    return {
        "Date": transaction.date.isoformat(),
        "FromAccount": transaction.src_account,
        "ToAccount": transaction.dst_account,
        "Narrative": transaction.reason,
        "Amount": transaction.formatted_amount,
    }


class LedgerExporter:
    """Writes a Ledger to disk, as JSON or as a text report."""

    def __init__(
        self,
        encoding: str = "utf-8",
        indent: int = 2,
        report_date_format: str = "%d/%m/%Y",
    ):
        self._encoding = encoding
        self._indent = indent
        self._report_date_format = report_date_format

    def to_json(self, ledger: Ledger) -> str:
        """Serialize the full transaction log."""
        payload = [transaction_to_dict(t) for t in ledger.transactions]
        return json.dumps(payload, indent=self._indent or None, ensure_ascii=False)

    def to_report(self, ledger: Ledger) -> str:
        return format_ledger_report(ledger, self._report_date_format)

    def export_json(self, ledger: Ledger, path: Union[str, Path]) -> int:
        """
        Write the transaction log as JSON.

        Returns:
            Number of transactions written

        Raises:
            ExportError: If the file can't be written
        """
        self._write(path, self.to_json(ledger) + "\n")
        return len(ledger)

    def write_report(self, ledger: Ledger, path: Union[str, Path]) -> int:
        """
        Write every account's text report.

        Returns:
            Number of accounts written

        Raises:
            ExportError: If the file can't be written
        """
        self._write(path, self.to_report(ledger))
        return len(ledger.account_names)

    def _write(self, path: Union[str, Path], content: str) -> None:
        try:
            Path(path).write_text(content, encoding=self._encoding)
        except OSError as e:
            raise ExportError(str(path), f"{path} couldn't be written: {e}")
