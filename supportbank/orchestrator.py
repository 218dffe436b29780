"""
Main Orchestrator for SupportBank

This module ties together all the components and defines the
end-to-end flows for:
1. Import (file -> parser -> canonical records -> validate -> ledger)
2. Export (ledger -> JSON transaction log, or text report)
3. Queries (account lookup, all balances, account history)

DESIGN DECISION: The orchestrator enforces the failure boundaries:
- A file that can't be read or parsed changes NOTHING in the ledger.
  Every record is parsed before the first one is applied.
- A bad record is skipped and reported; the rest of the file still
  imports.
- Every decision is audited.

File-level failures come back as an ImportReport status, never as an
exception, so one bad file in a batch doesn't stop the others.
"""

from datetime import datetime, timezone
from pathlib import Path, PurePath
from typing import Iterable, Optional, Union
from uuid import UUID

from supportbank.audit import AuditLogger, create_correlation_id
from supportbank.config import LedgerSettings, Settings, get_settings
from supportbank.errors import ExportError, FileUnreadableError
from supportbank.exporter import LedgerExporter
from supportbank.models.ledger import Account, AccountBalance, Ledger, Transaction
from supportbank.models.money import format_amount
from supportbank.models.record import (
    CanonicalRecord,
    ImportReport,
    ImportStatus,
    RecordRejection,
    ValidationIssue,
)
from supportbank.parsers import StructuralParseError, detect_format, get_parser
from supportbank.services.storage import JsonLinesAuditStorage
from supportbank.validation import RecordValidator


PathLike = Union[str, Path]


class ImportPipeline:
    """
    Orchestrates the import of one file into a ledger.

    Flow:
    1. Select  -> pick a parser from the file suffix
    2. Read    -> load the file text
    3. Parse   -> ALL canonical records, or abort the file
    4. Stage 1 -> reject records with a bad date or missing parties
    5. Resolve -> get-or-create both accounts
    6. Stage 2 -> reject records with a bad amount
    7. Apply   -> Ledger.pay
    """

    def __init__(
        self,
        ledger: Ledger,
        validator: Optional[RecordValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[LedgerSettings] = None,
    ):
        self._ledger = ledger
        self._settings = settings or get_settings().ledger
        self._validator = validator or RecordValidator(self._settings)
        self._audit_logger = audit_logger or AuditLogger()

    def _parser_options(self) -> dict:
        return {
            "date_format": self._settings.csv_date_format,
            "epoch": self._settings.xml_epoch,
        }

    def _read(self, path: PathLike) -> str:
        """
        Read the whole file.

        Raises:
            FileUnreadableError: I/O or decoding failure, or empty file
        """
        try:
            text = Path(path).read_text(encoding=self._settings.file_encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise FileUnreadableError(str(path), f"{path} couldn't be read: {e}")
        if not text.strip():
            raise FileUnreadableError(str(path), f"{path} is empty", empty=True)
        return text

    def _finish(
        self,
        report: ImportReport,
        status: ImportStatus,
        error_message: Optional[str] = None,
    ) -> ImportReport:
        return report.model_copy(update={
            "status": status,
            "error_message": error_message,
            "completed_at": datetime.now(timezone.utc),
        })

    def import_file(
        self,
        path: PathLike,
        correlation_id: Optional[UUID] = None,
    ) -> ImportReport:
        """
        Import one file into the ledger.

        Returns:
            ImportReport describing what was applied and what was skipped.
            Check `status` for file-level failures.
        """
        source = str(path)
        report = ImportReport(
            import_id=correlation_id or create_correlation_id(),
            source_path=source,
        )
        correlation_id = report.import_id

        self._audit_logger.log_import_started(source, correlation_id)

        file_format = detect_format(path)
        if file_format is None:
            self._audit_logger.log_format_unsupported(
                path=source,
                suffix=PurePath(path).suffix,
                correlation_id=correlation_id,
            )
            return self._finish(report, ImportStatus.UNSUPPORTED_FORMAT, "Unsupported filetype")

        report.file_format = file_format
        self._audit_logger.log_format_detected(source, file_format.value, correlation_id)

        try:
            text = self._read(path)
        except FileUnreadableError as e:
            self._audit_logger.log_file_unreadable(
                path=source,
                error_message=str(e),
                correlation_id=correlation_id,
                empty=e.empty,
            )
            return self._finish(report, ImportStatus.FILE_UNREADABLE, str(e))

        try:
            records = list(get_parser(file_format).parse(text, self._parser_options()))
        except StructuralParseError as e:
            self._audit_logger.log_parse_failed(
                path=source,
                file_format=file_format.value,
                error_message=str(e),
                correlation_id=correlation_id,
            )
            return self._finish(report, ImportStatus.PARSE_FAILED, str(e))

        report.records_read = len(records)
        for record in records:
            self._apply_record(record, report)

        self._audit_logger.log_import_completed(
            path=source,
            applied=report.applied_count,
            rejected=report.rejected_count,
            correlation_id=correlation_id,
        )
        return self._finish(report, ImportStatus.COMPLETED)

    def _apply_record(self, record: CanonicalRecord, report: ImportReport) -> None:
        """Validate one record and apply it, or reject it. Never raises for bad content."""
        self._audit_logger.log_record_received(
            path=report.source_path,
            record_index=record.record_index,
            record=record.summary(),
            correlation_id=report.import_id,
        )

        identity_valid, issues = self._validator.validate_identity(record)
        if not identity_valid:
            self._reject(record, issues, report)
            return

        self._ledger.get_or_create_account(record.from_account)
        self._ledger.get_or_create_account(record.to_account)

        amount, issues = self._validator.validate_amount(record)
        if amount is None:
            self._reject(record, issues, report)
            return

        transaction = self._ledger.pay(
            record.from_account,
            record.to_account,
            record.date,
            record.reason,
            amount,
        )
        report.transaction_ids.append(transaction.transaction_id)

        self._audit_logger.log_transaction_applied(
            transaction_id=transaction.transaction_id,
            src=transaction.src_account,
            dst=transaction.dst_account,
            amount=format_amount(transaction.amount),
            correlation_id=report.import_id,
        )

    def _reject(
        self,
        record: CanonicalRecord,
        issues: list[ValidationIssue],
        report: ImportReport,
    ) -> None:
        rejection = RecordRejection(
            record_index=record.record_index,
            record=record.summary(),
            issues=issues,
        )
        report.rejections.append(rejection)

        self._audit_logger.log_record_rejected(
            path=report.source_path,
            record_index=record.record_index,
            issues=[
                {"field": i.field, "type": i.issue_type, "message": i.message}
                for i in issues
            ],
            record=rejection.record,
            correlation_id=report.import_id,
        )


class SupportBank:
    """
    The ledger plus everything callers need to fill and read it.

    This is the surface the interactive command layer talks to. It never
    reads stdin or writes to the terminal.
    """

    def __init__(
        self,
        ledger: Optional[Ledger] = None,
        pipeline: Optional[ImportPipeline] = None,
        exporter: Optional[LedgerExporter] = None,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[LedgerSettings] = None,
    ):
        self._settings = settings or get_settings().ledger
        self._ledger = ledger or Ledger()
        self._audit_logger = audit_logger or AuditLogger()
        self._pipeline = pipeline or ImportPipeline(
            self._ledger,
            audit_logger=self._audit_logger,
            settings=self._settings,
        )
        self._exporter = exporter or LedgerExporter(
            encoding=self._settings.file_encoding,
            indent=self._settings.export_indent,
            report_date_format=self._settings.report_date_format,
        )

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    @property
    def audit_logger(self) -> AuditLogger:
        return self._audit_logger

    @property
    def report_date_format(self) -> str:
        return self._settings.report_date_format

    # -------------------------------------------------------------------------
    # Import / export
    # -------------------------------------------------------------------------

    def import_file(self, path: PathLike) -> ImportReport:
        return self._pipeline.import_file(path)

    def import_files(self, paths: Iterable[PathLike]) -> list[ImportReport]:
        """
        Import several files, one after another.

        A failing file doesn't undo or stop the others.
        """
        return [self._pipeline.import_file(path) for path in paths]

    def export_file(self, path: PathLike) -> int:
        """
        Write the transaction log as JSON.

        Returns:
            Number of transactions written

        Raises:
            ExportError: after auditing the failure
        """
        try:
            count = self._exporter.export_json(self._ledger, path)
        except ExportError as e:
            self._audit_logger.log_export_failed(str(path), str(e))
            raise
        self._audit_logger.log_ledger_exported(str(path), count)
        return count

    def write_report(self, path: PathLike) -> int:
        """
        Write every account's text report.

        Returns:
            Number of accounts written

        Raises:
            ExportError: after auditing the failure
        """
        try:
            count = self._exporter.write_report(self._ledger, path)
        except ExportError as e:
            self._audit_logger.log_export_failed(str(path), str(e))
            raise
        self._audit_logger.log_report_written(str(path), count)
        return count

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_account(self, name: str) -> Optional[Account]:
        return self._ledger.get_account(name)

    def list_all_accounts(self) -> list[AccountBalance]:
        return self._ledger.list_all_accounts()

    def account_history(self, name: str) -> list[Transaction]:
        return self._ledger.account_history(name)

    def balance(self, name: str) -> int:
        return self._ledger.balance(name)


def create_app_components(
    settings: Optional[Settings] = None,
) -> SupportBank:
    """
    Factory function to create a fully wired SupportBank.

    Uses a JSON-lines audit trail when SUPPORTBANK_LOG_AUDIT_FILE is set,
    otherwise logs locally only.
    """
    settings = settings or get_settings()
    logging_settings = settings.logging
    ledger_settings = settings.ledger

    storage = None
    if logging_settings.audit_file:
        storage = JsonLinesAuditStorage(
            logging_settings.audit_file,
            encoding=ledger_settings.file_encoding,
        )

    return SupportBank(
        audit_logger=AuditLogger(storage),
        settings=ledger_settings,
    )
