"""
Audit Logger

DESIGN DECISION: Every import decision in the system is logged.
This provides:
1. Complete traceability of what reached the ledger and what didn't
2. Debugging capability for badly formed source files
3. A per-import trail, tied together by a correlation ID

The audit logger:
- Is synchronous, like the rest of the pipeline
- Never raises: an event that can't be built or stored is reported on
  the local log and dropped, so an import never fails because of its
  audit trail
- Is never consulted for correctness: the ledger behaves the same
  whether or not anything is listening
"""

import logging
from pathlib import Path
from typing import Callable, Optional
from uuid import UUID, uuid4

import structlog
from pydantic import ValidationError

from supportbank.config import LoggingSettings, get_settings
from supportbank.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from supportbank.services.storage import AuditStorageInterface, StorageError


_PKG_LOGGER_NAME = "supportbank"
_CONFIGURED = False

# Silent until an entrypoint calls configure_logging().
logging.getLogger(_PKG_LOGGER_NAME).addHandler(logging.NullHandler())


def _configure_structlog(json_output: bool = True) -> None:
    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.processors.KeyValueRenderer(key_order=["timestamp", "level", "event"])
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


# Configure structlog for local logging
_configure_structlog()


def configure_logging(settings: Optional[LoggingSettings] = None) -> None:
    """
    Send the package's log lines to the configured debug log file.

    Intended to be called once by entrypoints (the interactive app).
    Library use without this call stays silent.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    settings = settings or get_settings().logging
    _configure_structlog(settings.json_output)

    logger = logging.getLogger(_PKG_LOGGER_NAME)
    logger.setLevel(settings.level)

    if settings.file:
        log_path = Path(settings.file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_path, encoding="utf-8")
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)

    # Keep ledger chatter off the terminal.
    logger.propagate = False

    _CONFIGURED = True


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An audit storage backend (for persistence), when one is configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger(f"{_PKG_LOGGER_NAME}.audit")

    @property
    def storage(self) -> Optional[AuditStorageInterface]:
        return self._storage

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity == AuditSeverity.CRITICAL:
            self._logger.critical("audit_event", **log_dict)
        elif event.severity == AuditSeverity.ERROR:
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return self._storage.append_event(event)
            except StorageError as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def log_built(self, build: Callable[..., AuditEvent], *args, **kwargs) -> bool:
        """
        Build an event with an AuditEventBuilder method and log it.

        An event that fails model validation is reported locally and
        dropped. Returns False in that case.
        """
        try:
            event = build(*args, **kwargs)
        except ValidationError as e:
            self._logger.error(
                "audit_event_invalid",
                builder=getattr(build, "__name__", repr(build)),
                error=str(e),
            )
            return False
        return self.log(event)

    def log_import_started(self, path: str, correlation_id: UUID) -> None:
        """Log the start of a file import."""
        self.log_built(AuditEventBuilder.import_started, path, correlation_id)

    def log_format_detected(
        self,
        path: str,
        file_format: str,
        correlation_id: UUID,
    ) -> None:
        """Log which parser was selected for a file."""
        self.log_built(AuditEventBuilder.format_detected, path, file_format, correlation_id)

    def log_format_unsupported(
        self,
        path: str,
        suffix: str,
        correlation_id: UUID,
    ) -> None:
        """Log a file skipped for its extension."""
        self.log_built(AuditEventBuilder.format_unsupported, path, suffix, correlation_id)

    def log_file_unreadable(
        self,
        path: str,
        error_message: str,
        correlation_id: UUID,
        empty: bool = False,
    ) -> None:
        """Log a file that could not be read."""
        self.log_built(
            AuditEventBuilder.file_unreadable,
            path=path,
            error_message=error_message,
            correlation_id=correlation_id,
            empty=empty,
        )

    def log_parse_failed(
        self,
        path: str,
        file_format: str,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        """Log a structural parse failure (whole file aborted)."""
        self.log_built(
            AuditEventBuilder.parse_failed,
            path=path,
            file_format=file_format,
            error_message=error_message,
            correlation_id=correlation_id,
        )

    def log_record_received(
        self,
        path: str,
        record_index: int,
        record: dict,
        correlation_id: UUID,
    ) -> None:
        self.log_built(
            AuditEventBuilder.record_received,
            path,
            record_index,
            record,
            correlation_id,
        )

    def log_record_rejected(
        self,
        path: str,
        record_index: int,
        issues: list[dict],
        record: dict,
        correlation_id: UUID,
    ) -> None:
        """Log a record skipped by validation."""
        self.log_built(
            AuditEventBuilder.record_rejected,
            path=path,
            record_index=record_index,
            issues=issues,
            record=record,
            correlation_id=correlation_id,
        )

    def log_transaction_applied(
        self,
        transaction_id: int,
        src: str,
        dst: str,
        amount: str,
        correlation_id: UUID,
    ) -> None:
        self.log_built(
            AuditEventBuilder.transaction_applied,
            transaction_id=transaction_id,
            src=src,
            dst=dst,
            amount=amount,
            correlation_id=correlation_id,
        )

    def log_import_completed(
        self,
        path: str,
        applied: int,
        rejected: int,
        correlation_id: UUID,
    ) -> None:
        """Log the summary of a finished import."""
        self.log_built(
            AuditEventBuilder.import_completed,
            path,
            applied,
            rejected,
            correlation_id,
        )

    def log_ledger_exported(self, path: str, transaction_count: int) -> None:
        self.log_built(AuditEventBuilder.ledger_exported, path, transaction_count)

    def log_report_written(self, path: str, account_count: int) -> None:
        self.log_built(AuditEventBuilder.report_written, path, account_count)

    def log_export_failed(self, path: str, error_message: str) -> None:
        """Log a failed export or report write."""
        self.log_built(AuditEventBuilder.export_failed, path, error_message)

    def log_command(self, command: str, argument: Optional[str] = None) -> None:
        self.log_built(AuditEventBuilder.command_received, command, argument)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (e.g., a file import).
    Pass it through all subsequent operations.
    """
    return uuid4()
