"""
JSON record parser.

The file must be a JSON array of objects with the keys
Date, FromAccount, ToAccount, Amount, Narrative.

Date is any ISO 8601 date or datetime ("2014-01-01" or
"2014-01-01T00:00:00"); the time part is dropped. Amount may be a
string or a number. Numbers are read as Decimal so 10.10 stays "10.10"
rather than passing through a binary float.
"""

import json
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Iterator, Optional

from supportbank.models.record import CanonicalRecord, FileFormat
from supportbank.parsers.base import StructuralParseError, text_or_none


def parse_iso_date(value: Any) -> Optional[date]:
    """Parse an ISO date/datetime string, None if it isn't one."""
    if not isinstance(value, str):
        return None
    text = value.strip()
    # fromisoformat only reads a "Z" UTC suffix from Python 3.11
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


def _amount_text(value: Any) -> Optional[str]:
    # Booleans are ints in Python; keep them as text so they fail as non-numbers
    if isinstance(value, bool):
        return str(value).lower()
    return text_or_none(value)


class JsonRecordParser:
    """Read a JSON array as one CanonicalRecord per element."""

    file_format = FileFormat.JSON

    def parse(self, text: str, options: dict[str, Any]) -> Iterator[CanonicalRecord]:
        try:
            data = json.loads(text, parse_float=Decimal)
        except json.JSONDecodeError as e:
            raise StructuralParseError(self.file_format, f"Malformed JSON: {e}")

        if not isinstance(data, list):
            raise StructuralParseError(
                self.file_format,
                f"Expected a JSON array of transactions, got {type(data).__name__}",
            )

        for index, item in enumerate(data):
            if not isinstance(item, dict):
                raise StructuralParseError(
                    self.file_format,
                    f"Element {index} is {type(item).__name__}, expected an object",
                )
            raw_date = item.get("Date")
            yield CanonicalRecord(
                record_index=index,
                date=parse_iso_date(raw_date),
                raw_date=text_or_none(raw_date),
                from_account=text_or_none(item.get("FromAccount")),
                to_account=text_or_none(item.get("ToAccount")),
                amount=_amount_text(item.get("Amount")),
                reason=text_or_none(item.get("Narrative")) or "",
            )
