"""
CSV record parser.

Header-driven: the first row must name the columns
Date, From, To, Amount, Narrative (extra columns are ignored).
Dates are DD/MM/YYYY unless options["date_format"] says otherwise.
"""

import csv
import io
from datetime import date, datetime
from typing import Any, Iterator, Optional

from supportbank.models.record import CanonicalRecord, FileFormat
from supportbank.parsers.base import StructuralParseError, text_or_none


DEFAULT_DATE_FORMAT = "%d/%m/%Y"
REQUIRED_COLUMNS = ("Date", "From", "To", "Amount", "Narrative")


def parse_csv_date(value: Optional[str], date_format: str = DEFAULT_DATE_FORMAT) -> Optional[date]:
    """Parse a CSV date cell, None if it doesn't match `date_format`."""
    if value is None:
        return None
    try:
        return datetime.strptime(value.strip(), date_format).date()
    except ValueError:
        return None


class CsvRecordParser:
    """Read CSV text as one CanonicalRecord per data row."""

    file_format = FileFormat.CSV

    def parse(self, text: str, options: dict[str, Any]) -> Iterator[CanonicalRecord]:
        date_format = options.get("date_format", DEFAULT_DATE_FORMAT)

        reader = csv.DictReader(io.StringIO(text.lstrip("\ufeff"), newline=""))
        try:
            headers = reader.fieldnames
        except csv.Error as e:
            raise StructuralParseError(self.file_format, f"Malformed CSV header: {e}")

        if not headers:
            raise StructuralParseError(self.file_format, "CSV has no header row")
        missing = [column for column in REQUIRED_COLUMNS if column not in headers]
        if missing:
            raise StructuralParseError(
                self.file_format,
                "CSV header is missing columns: " + ", ".join(missing),
            )

        try:
            for index, row in enumerate(reader):
                raw_date = text_or_none(row.get("Date"))
                yield CanonicalRecord(
                    record_index=index,
                    date=parse_csv_date(raw_date, date_format),
                    raw_date=raw_date,
                    from_account=text_or_none(row.get("From")),
                    to_account=text_or_none(row.get("To")),
                    amount=text_or_none(row.get("Amount")),
                    reason=row.get("Narrative") or "",
                )
        except csv.Error as e:
            raise StructuralParseError(
                self.file_format,
                f"Malformed CSV at line {reader.line_num}: {e}",
            )
