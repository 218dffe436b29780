"""
Data Models Package

This package contains the Pydantic models and the Ledger used across SupportBank.
All data flowing through the system must conform to these schemas.
"""

from supportbank.models.ledger import (
    Account,
    AccountBalance,
    Ledger,
    Transaction,
)
from supportbank.models.money import (
    AmountError,
    AmountParseError,
    NonPositiveAmountError,
    format_amount,
    parse_amount,
)
from supportbank.models.record import (
    CanonicalRecord,
    FileFormat,
    ImportReport,
    ImportStatus,
    RecordRejection,
    ValidationIssue,
)
from supportbank.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "Account",
    "AccountBalance",
    "Ledger",
    "Transaction",
    # Money
    "AmountError",
    "AmountParseError",
    "NonPositiveAmountError",
    "format_amount",
    "parse_amount",
    # Import models
    "CanonicalRecord",
    "FileFormat",
    "ImportReport",
    "ImportStatus",
    "RecordRejection",
    "ValidationIssue",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
