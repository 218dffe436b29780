"""
Record parser protocol and parser selection.

Contract:
    RecordParser.parse() yields one CanonicalRecord per source record,
    in source order. It maps structure only: it never rejects a record
    for a bad date or a bad amount, that is the validator's job.

    A file that cannot be read as its format at all (broken syntax,
    wrong root shape, missing header) raises StructuralParseError and
    the whole file is abandoned.

Architecture: parsers take text, not paths. No file I/O and no ledger
imports, so the same parser can be fed from a file, a test string or a
network payload.
"""

from pathlib import PurePath
from typing import Any, Iterator, Optional, Protocol, Union, runtime_checkable

from supportbank.errors import SupportBankError
from supportbank.models.record import CanonicalRecord, FileFormat


class ParseError(SupportBankError):
    """Base exception for parser errors."""
    pass


class StructuralParseError(ParseError):
    """The input is not well-formed for its format; nothing can be imported."""

    def __init__(self, file_format: FileFormat, message: str):
        self.file_format = file_format
        super().__init__(message)


@runtime_checkable
class RecordParser(Protocol):
    """Protocol for turning file text into canonical records."""

    file_format: FileFormat

    def parse(self, text: str, options: dict[str, Any]) -> Iterator[CanonicalRecord]:
        """Yield one record per source entry, in order."""
        ...


def detect_format(path: Union[str, PurePath]) -> Optional[FileFormat]:
    """
    Pick the import format from the file suffix.

    Matching is case-sensitive: "ledger.CSV" is not a CSV file.
    Returns None for anything unrecognised.
    """
    suffix = PurePath(path).suffix
    for file_format in FileFormat:
        if suffix == file_format.suffix:
            return file_format
    return None


def get_parser(file_format: FileFormat) -> RecordParser:
    """Return the parser registered for `file_format`."""
    # Deferred imports: each parser module imports this one.
    from supportbank.parsers.csv_parser import CsvRecordParser
    from supportbank.parsers.json_parser import JsonRecordParser
    from supportbank.parsers.xml_parser import XmlRecordParser

    parsers: dict[FileFormat, RecordParser] = {
        FileFormat.CSV: CsvRecordParser(),
        FileFormat.JSON: JsonRecordParser(),
        FileFormat.XML: XmlRecordParser(),
    }
    return parsers[file_format]


def text_or_none(value: Any) -> Optional[str]:
    """Stringify a raw cell/attribute, keeping None as None."""
    if value is None:
        return None
    return str(value)
