"""
Audit Models for SupportBank

Every import decision is logged for audit purposes:
1. Which parser was chosen for a file (or why none was)
2. Which records were rejected, and why
3. What was applied to the ledger
4. What was exported, and where

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    Every decision point of the import pipeline has its own event type.
    """
    # File selection
    IMPORT_STARTED = "import_started"
    FORMAT_DETECTED = "format_detected"
    FORMAT_UNSUPPORTED = "format_unsupported"
    FILE_UNREADABLE = "file_unreadable"
    PARSE_FAILED = "parse_failed"

    # Records
    RECORD_RECEIVED = "record_received"
    RECORD_REJECTED = "record_rejected"
    TRANSACTION_APPLIED = "transaction_applied"
    IMPORT_COMPLETED = "import_completed"

    # Output
    LEDGER_EXPORTED = "ledger_exported"
    REPORT_WRITTEN = "report_written"
    EXPORT_FAILED = "export_failed"

    # Interactive use
    COMMAND_RECEIVED = "command_received"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'file', 'record', 'transaction')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="Path, record index or transaction ID the event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., all events of one import)"
    )

    # Event details
    description: str = Field(
        ...,
        description="Human-readable description of what happened"
    )

    # Additional data (event-specific)
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    # User action tracking
    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user command?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.import_started(path, correlation_id)
        event = AuditEventBuilder.record_rejected(path, index, issues, record, correlation_id)
    """

    @staticmethod
    def import_started(
        path: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IMPORT_STARTED,
            severity=AuditSeverity.DEBUG,
            entity_type="file",
            entity_id=path,
            correlation_id=correlation_id,
            description=f"Importing file: {path}",
            is_user_action=True,
        )

    @staticmethod
    def format_detected(
        path: str,
        file_format: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FORMAT_DETECTED,
            entity_type="file",
            entity_id=path,
            correlation_id=correlation_id,
            description=f"Importing file {path} detected type {file_format}",
            details={
                "file_format": file_format,
            },
        )

    @staticmethod
    def format_unsupported(
        path: str,
        suffix: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FORMAT_UNSUPPORTED,
            severity=AuditSeverity.WARNING,
            entity_type="file",
            entity_id=path,
            correlation_id=correlation_id,
            description=f"Failed to import file {path}: unsupported type",
            details={
                "suffix": suffix,
            },
        )

    @staticmethod
    def file_unreadable(
        path: str,
        error_message: str,
        correlation_id: UUID,
        empty: bool = False,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FILE_UNREADABLE,
            # An empty import file is the one unrecoverable input we know of
            severity=AuditSeverity.CRITICAL if empty else AuditSeverity.ERROR,
            entity_type="file",
            entity_id=path,
            correlation_id=correlation_id,
            description=f"{path} couldn't be read",
            error_message=error_message,
            details={
                "empty": empty,
            },
        )

    @staticmethod
    def parse_failed(
        path: str,
        file_format: str,
        error_message: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PARSE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="file",
            entity_id=path,
            correlation_id=correlation_id,
            description=f"{path} is not valid {file_format}, import aborted",
            error_message=error_message,
            details={
                "file_format": file_format,
            },
        )

    @staticmethod
    def record_received(
        path: str,
        record_index: int,
        record: dict,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_RECEIVED,
            severity=AuditSeverity.DEBUG,
            entity_type="record",
            entity_id=f"{path}#{record_index}",
            correlation_id=correlation_id,
            description=f"Importing transaction {record_index} from {path}",
            details={
                "record": record,
            },
        )

    @staticmethod
    def record_rejected(
        path: str,
        record_index: int,
        issues: list[dict],
        record: dict,
        correlation_id: UUID
    ) -> AuditEvent:
        kinds = ", ".join(issue["type"] for issue in issues)
        return AuditEvent(
            event_type=AuditEventType.RECORD_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="record",
            entity_id=f"{path}#{record_index}",
            correlation_id=correlation_id,
            description=f"Invalid record {record_index} in {path} ({kinds}), skipping",
            details={
                "issues": issues,
                "record": record,
            },
        )

    @staticmethod
    def transaction_applied(
        transaction_id: int,
        src: str,
        dst: str,
        amount: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_APPLIED,
            severity=AuditSeverity.DEBUG,
            entity_type="transaction",
            entity_id=str(transaction_id),
            correlation_id=correlation_id,
            description=f"Applied {amount} from {src} to {dst}",
            details={
                "src": src,
                "dst": dst,
                "amount": amount,
            },
        )

    @staticmethod
    def import_completed(
        path: str,
        applied: int,
        rejected: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IMPORT_COMPLETED,
            entity_type="file",
            entity_id=path,
            correlation_id=correlation_id,
            description=f"Imported {path}: {applied} applied, {rejected} rejected",
            details={
                "applied": applied,
                "rejected": rejected,
            },
        )

    @staticmethod
    def ledger_exported(
        path: str,
        transaction_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_EXPORTED,
            entity_type="file",
            entity_id=path,
            description=f"Wrote {transaction_count} transactions to {path}",
            details={
                "transaction_count": transaction_count,
            },
            is_user_action=True,
        )

    @staticmethod
    def report_written(
        path: str,
        account_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REPORT_WRITTEN,
            entity_type="file",
            entity_id=path,
            description=f"Wrote {account_count} account reports to {path}",
            details={
                "account_count": account_count,
            },
            is_user_action=True,
        )

    @staticmethod
    def export_failed(
        path: str,
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPORT_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="file",
            entity_id=path,
            description=f"{path} couldn't be written",
            error_message=error_message,
        )

    @staticmethod
    def command_received(
        command: str,
        argument: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.COMMAND_RECEIVED,
            severity=AuditSeverity.DEBUG,
            entity_type="command",
            entity_id=command,
            description=f"{command} command received",
            details={
                "argument": argument,
            },
            is_user_action=True,
        )
