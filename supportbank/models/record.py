"""
Import Models for SupportBank

These models describe everything that flows through one file import:
1. The canonical record every parser converges to
2. The validation issues found on a record
3. The report handed back to the caller

DESIGN DECISION: A CanonicalRecord is deliberately lax. Parsers only map
structure; a record with an unreadable date or a nonsense amount is still
a valid CanonicalRecord. Judging it is the validator's job, so parsing
never has to decide what "wrong" means.
"""

from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


# Alias so the `date` field name below does not shadow the type.
CalendarDate = date


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# ENUMS
# =============================================================================

class FileFormat(str, Enum):
    """Import formats, keyed by their file suffix."""
    CSV = "csv"
    JSON = "json"
    XML = "xml"

    @property
    def suffix(self) -> str:
        return f".{self.value}"


class ImportStatus(str, Enum):
    """
    Outcome of importing one file.

    Only COMPLETED can have applied transactions. Every other status
    means the ledger was left exactly as it was.
    """
    COMPLETED = "completed"
    UNSUPPORTED_FORMAT = "unsupported_format"  # Reported skip, not fatal
    FILE_UNREADABLE = "file_unreadable"
    PARSE_FAILED = "parse_failed"


# =============================================================================
# CANONICAL RECORD
# =============================================================================

class CanonicalRecord(BaseModel):
    """
    The normalized shape produced by every format parser.

    `date` is None when the source date could not be read; `raw_date`
    keeps the original text for the rejection message.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    record_index: int = Field(
        ...,
        ge=0,
        description="Position of the record in its source file (0-based)"
    )
    date: Optional[CalendarDate] = Field(
        default=None,
        description="Calendar date, or None if the source date is invalid"
    )
    raw_date: Optional[str] = Field(
        default=None,
        description="Date exactly as it appeared in the source"
    )
    from_account: Optional[str] = None
    to_account: Optional[str] = None
    amount: Optional[str] = Field(
        default=None,
        description="Amount text as found in the source, not yet converted"
    )
    reason: str = ""

    def summary(self) -> dict[str, Any]:
        """Compact dict used in audit events and rejection reports."""
        return {
            "index": self.record_index,
            "date": self.date.isoformat() if self.date else self.raw_date,
            "from": self.from_account,
            "to": self.to_account,
            "amount": self.amount,
            "reason": self.reason,
        }


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found on a record."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'invalid_date', 'invalid_amount', 'non_positive_amount')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        default="error",
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )


class RecordRejection(BaseModel):
    """A record that was skipped during import, with the reasons."""

    record_index: int
    record: dict[str, Any] = Field(default_factory=dict)
    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def reason(self) -> str:
        return "; ".join(issue.message for issue in self.issues)

    @property
    def issue_types(self) -> list[str]:
        return [issue.issue_type for issue in self.issues]


# =============================================================================
# IMPORT REPORT
# =============================================================================

class ImportReport(BaseModel):
    """
    What happened when one file was imported.

    Returned to the caller instead of raising: file-level failures are
    described by `status` and `error_message`, record-level failures by
    `rejections`.
    """

    import_id: UUID = Field(
        default_factory=uuid4,
        description="Correlation ID shared by every audit event of this import"
    )
    source_path: str
    file_format: Optional[FileFormat] = None
    status: ImportStatus = ImportStatus.COMPLETED
    started_at: datetime = Field(default_factory=_utcnow)
    completed_at: Optional[datetime] = None

    records_read: int = Field(default=0, ge=0)
    transaction_ids: list[int] = Field(
        default_factory=list,
        description="IDs of the transactions this import appended to the ledger"
    )
    rejections: list[RecordRejection] = Field(default_factory=list)
    error_message: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status == ImportStatus.COMPLETED

    @property
    def applied_count(self) -> int:
        return len(self.transaction_ids)

    @property
    def rejected_count(self) -> int:
        return len(self.rejections)
