"""Format parsers: CSV, JSON and XML into CanonicalRecords."""

from supportbank.parsers.base import (
    ParseError,
    RecordParser,
    StructuralParseError,
    detect_format,
    get_parser,
)
from supportbank.parsers.csv_parser import CsvRecordParser
from supportbank.parsers.json_parser import JsonRecordParser
from supportbank.parsers.xml_parser import XML_EPOCH, XmlRecordParser

__all__ = [
    "CsvRecordParser",
    "JsonRecordParser",
    "ParseError",
    "RecordParser",
    "StructuralParseError",
    "XML_EPOCH",
    "XmlRecordParser",
    "detect_format",
    "get_parser",
]
