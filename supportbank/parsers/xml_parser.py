"""
XML record parser.

Fixed schema:

    <TransactionList>
      <SupportTransaction Date="41528">
        <Description>Lunch</Description>
        <Value>12.50</Value>
        <Parties>
          <From>Sam N</From>
          <To>Todd</To>
        </Parties>
      </SupportTransaction>
    </TransactionList>

The Date attribute is NOT a date string: it is a whole number of days
counted from the epoch 1900-01-01 ("0" is 1900-01-01 itself). It is
converted with integer day arithmetic only.
"""

import xml.etree.ElementTree as ET
from datetime import date, timedelta
from typing import Any, Iterator, Optional

from supportbank.models.record import CanonicalRecord, FileFormat
from supportbank.parsers.base import StructuralParseError


XML_EPOCH = date(1900, 1, 1)
ROOT_TAG = "TransactionList"
RECORD_TAG = "SupportTransaction"


def day_offset_to_date(value: Optional[str], epoch: date = XML_EPOCH) -> Optional[date]:
    """Convert a day-offset attribute to a date, None if it isn't an integer."""
    if value is None:
        return None
    try:
        return epoch + timedelta(days=int(value.strip()))
    except (ValueError, OverflowError):
        return None


class XmlRecordParser:
    """Read a TransactionList document as one CanonicalRecord per SupportTransaction."""

    file_format = FileFormat.XML

    def parse(self, text: str, options: dict[str, Any]) -> Iterator[CanonicalRecord]:
        epoch = options.get("epoch", XML_EPOCH)

        try:
            root = ET.fromstring(text.lstrip("\ufeff"))
        except ET.ParseError as e:
            raise StructuralParseError(self.file_format, f"Malformed XML: {e}")

        if root.tag != ROOT_TAG:
            raise StructuralParseError(
                self.file_format,
                f"Expected <{ROOT_TAG}> root element, got <{root.tag}>",
            )

        for index, element in enumerate(root.findall(RECORD_TAG)):
            raw_date = element.get("Date")
            yield CanonicalRecord(
                record_index=index,
                date=day_offset_to_date(raw_date, epoch),
                raw_date=raw_date,
                from_account=element.findtext("Parties/From"),
                to_account=element.findtext("Parties/To"),
                amount=element.findtext("Value"),
                reason=element.findtext("Description") or "",
            )
