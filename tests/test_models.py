"""
Tests for SupportBank

Test strategy:
1. Unit tests for individual components (money, ledger, models)
2. Integration tests for the import flow (real files in tmp_path)
3. No terminal I/O in tests (commands return their output)
"""

import pytest
from datetime import date
from decimal import Decimal
from uuid import uuid4

from pydantic import ValidationError

from supportbank.config import LedgerSettings, LoggingSettings, validate_all_settings
from supportbank.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from supportbank.models.ledger import Account, Ledger, Transaction
from supportbank.models.money import (
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
from supportbank.validation import RecordValidator


class TestMoney:
    """Tests for amount parsing and formatting."""

    def test_parse_decimal_string(self):
        """Test a 2-decimal string becomes minor units."""
        assert parse_amount("10.50") == 1050

    def test_parse_whole_number(self):
        """Test integers and integer strings."""
        assert parse_amount("7") == 700
        assert parse_amount(7) == 700

    def test_parse_float_does_not_drift(self):
        """Test floats are read through their repr."""
        assert parse_amount(10.1) == 1010
        assert parse_amount(0.29) == 29

    def test_parse_decimal(self):
        """Test Decimal input."""
        assert parse_amount(Decimal("3.14")) == 314

    def test_parse_rounds_half_up(self):
        """Test more than two fractional digits are rounded."""
        assert parse_amount("1.005") == 101
        assert parse_amount("1.004") == 100

    def test_parse_strips_whitespace(self):
        """Test surrounding whitespace is ignored."""
        assert parse_amount("  4.20 ") == 420

    @pytest.mark.parametrize("value", ["abc", "", None, "NaN", "Infinity", "1,000", True])
    def test_not_a_number(self, value):
        """Test unparseable values raise AmountParseError."""
        with pytest.raises(AmountParseError):
            parse_amount(value)

    @pytest.mark.parametrize("value", ["0", "0.00", "-5", "-0.01", "0.001"])
    def test_non_positive(self, value):
        """Test zero and negative amounts raise NonPositiveAmountError."""
        with pytest.raises(NonPositiveAmountError):
            parse_amount(value)

    def test_zero_is_not_a_parse_error(self):
        """Test zero is a distinct failure from 'not a number'."""
        with pytest.raises(NonPositiveAmountError) as excinfo:
            parse_amount("0.00")
        assert not isinstance(excinfo.value, AmountParseError)
        assert excinfo.value.minor_units == 0

    def test_format_amount(self):
        """Test minor units render with two decimals."""
        assert format_amount(1050) == "10.50"
        assert format_amount(5) == "0.05"
        assert format_amount(0) == "0.00"
        assert format_amount(-1050) == "-10.50"
        assert format_amount(-5) == "-0.05"


class TestLedgerModels:
    """Tests for Transaction, Account and Ledger."""

    def test_transaction_is_frozen(self):
        """Test transactions can't be changed after creation."""
        transaction = Transaction(
            transaction_id=0,
            src_account="Alice",
            dst_account="Bob",
            date=date(2023, 1, 1),
            amount=100,
        )
        with pytest.raises(ValidationError):
            transaction.amount = 200

    def test_transaction_rejects_non_positive_amount(self):
        """Test zero amounts are rejected by the model."""
        with pytest.raises(ValidationError):
            Transaction(
                transaction_id=0,
                src_account="Alice",
                dst_account="Bob",
                date=date(2023, 1, 1),
                amount=0,
            )

    def test_account_starts_empty(self):
        """Test a new account has no transactions."""
        account = Account(name="Alice")
        assert account.transaction_ids == []

    def test_get_or_create_returns_same_account(self):
        """Test get-or-create keeps one account per name."""
        ledger = Ledger()
        first = ledger.get_or_create_account("Alice")
        second = ledger.get_or_create_account("Alice")
        assert first is second
        assert ledger.account_names == ["Alice"]

    def test_account_names_are_case_sensitive(self):
        """Test 'alice' and 'Alice' are different accounts."""
        ledger = Ledger()
        ledger.get_or_create_account("Alice")
        ledger.get_or_create_account("alice")
        assert ledger.account_names == ["Alice", "alice"]

    def test_pay_links_both_accounts(self):
        """Test pay appends one transaction referenced by both accounts."""
        ledger = Ledger()
        transaction = ledger.pay("Alice", "Bob", date(2023, 1, 1), "rent", 1050)

        assert transaction.transaction_id == 0
        assert ledger.get_account("Alice").transaction_ids == [0]
        assert ledger.get_account("Bob").transaction_ids == [0]
        assert len(ledger) == 1

    def test_history_resolves_ids_through_arena(self):
        """Test account history returns the arena's transactions by id."""
        ledger = Ledger()
        first = ledger.pay("Alice", "Bob", date(2023, 1, 1), "rent", 1050)
        ledger.pay("Carol", "Dave", date(2023, 1, 2), "lunch", 300)

        assert ledger.get_transaction(0) is first
        assert ledger.account_history("Bob") == [ledger.get_transaction(0)]

    def test_balance_is_derived(self):
        """Test balance = received - paid."""
        ledger = Ledger()
        ledger.pay("Alice", "Bob", date(2023, 1, 1), "rent", 1050)
        ledger.pay("Bob", "Carol", date(2023, 1, 2), "lunch", 300)
        ledger.pay("Carol", "Alice", date(2023, 1, 3), "refund", 50)

        assert ledger.balance("Alice") == -1000
        assert ledger.balance("Bob") == 750
        assert ledger.balance("Carol") == 250

    def test_balance_matches_history_sums(self):
        """Test every balance equals its dst sum minus its src sum."""
        ledger = Ledger()
        payments = [
            ("Alice", "Bob", 100),
            ("Bob", "Alice", 40),
            ("Carol", "Bob", 5),
            ("Alice", "Carol", 999),
        ]
        for src, dst, amount in payments:
            ledger.pay(src, dst, date(2023, 1, 1), "", amount)

        for name in ledger.account_names:
            received = sum(a for s, d, a in payments if d == name)
            paid = sum(a for s, d, a in payments if s == name)
            assert ledger.balance(name) == received - paid

    def test_conservation(self):
        """Test the sum of all balances is zero."""
        ledger = Ledger()
        ledger.pay("Alice", "Bob", date(2023, 1, 1), "", 123)
        ledger.pay("Bob", "Carol", date(2023, 1, 1), "", 77)
        ledger.pay("Dave", "Alice", date(2023, 1, 1), "", 1)
        assert ledger.total_balance() == 0

    def test_unknown_account(self):
        """Test queries on an unknown account."""
        ledger = Ledger()
        assert ledger.get_account("Nobody") is None
        assert ledger.account_history("Nobody") == []
        assert ledger.balance("Nobody") == 0

    def test_self_payment_is_recorded_once(self):
        """Test a self-payment appears once in history and nets to zero."""
        ledger = Ledger()
        ledger.pay("Alice", "Alice", date(2023, 1, 1), "", 500)
        assert ledger.get_account("Alice").transaction_ids == [0]
        assert ledger.balance("Alice") == 0

    def test_failed_pay_creates_nothing(self):
        """Test an invalid transaction leaves the ledger untouched."""
        ledger = Ledger()
        with pytest.raises(ValidationError):
            ledger.pay("Alice", "Bob", date(2023, 1, 1), "", -5)
        assert ledger.account_names == []
        assert len(ledger) == 0

    def test_history_is_application_order(self):
        """Test history follows import order, not date order."""
        ledger = Ledger()
        ledger.pay("Alice", "Bob", date(2023, 6, 1), "later", 1)
        ledger.pay("Bob", "Alice", date(2023, 1, 1), "earlier", 1)
        reasons = [t.reason for t in ledger.account_history("Alice")]
        assert reasons == ["later", "earlier"]

    def test_list_all_accounts_in_creation_order(self):
        """Test listing order and balances."""
        ledger = Ledger()
        ledger.pay("Bob", "Alice", date(2023, 1, 1), "", 250)
        listing = ledger.list_all_accounts()
        assert [(e.name, e.balance) for e in listing] == [("Bob", -250), ("Alice", 250)]
        assert listing[0].formatted_balance == "-2.50"


class TestRecordModels:
    """Tests for import-side models."""

    def test_canonical_record_strips_whitespace(self):
        """Test text fields are stripped."""
        record = CanonicalRecord(record_index=0, from_account="  Alice ", reason=" rent ")
        assert record.from_account == "Alice"
        assert record.reason == "rent"

    def test_canonical_record_allows_invalid_date(self):
        """Test a missing date is represented as None."""
        record = CanonicalRecord(record_index=3, raw_date="31/02/2023")
        assert record.date is None
        assert record.summary()["date"] == "31/02/2023"

    def test_file_format_suffix(self):
        """Test suffix property."""
        assert FileFormat.CSV.suffix == ".csv"
        assert FileFormat.XML.suffix == ".xml"

    def test_rejection_reason_joins_messages(self):
        """Test RecordRejection.reason."""
        rejection = RecordRejection(
            record_index=1,
            issues=[
                ValidationIssue(field="date", issue_type="invalid_date", message="Bad date"),
                ValidationIssue(field="from", issue_type="missing_account", message="No from"),
            ],
        )
        assert rejection.reason == "Bad date; No from"
        assert rejection.issue_types == ["invalid_date", "missing_account"]

    def test_import_report_counts(self):
        """Test ImportReport properties."""
        report = ImportReport(source_path="x.csv", transaction_ids=[0, 1])
        assert report.succeeded is True
        assert report.applied_count == 2
        assert report.rejected_count == 0

    def test_import_report_failure(self):
        """Test a failed report is not succeeded."""
        report = ImportReport(source_path="x.txt", status=ImportStatus.UNSUPPORTED_FORMAT)
        assert report.succeeded is False


class TestRecordValidator:
    """Tests for the two validation stages."""

    def _record(self, **overrides):
        fields = {
            "record_index": 0,
            "date": date(2023, 1, 1),
            "raw_date": "01/01/2023",
            "from_account": "Alice",
            "to_account": "Bob",
            "amount": "10.50",
            "reason": "rent",
        }
        fields.update(overrides)
        return CanonicalRecord(**fields)

    def test_valid_record(self):
        """Test a clean record passes both stages."""
        validator = RecordValidator(LedgerSettings())
        is_valid, issues = validator.validate_identity(self._record())
        amount, amount_issues = validator.validate_amount(self._record())
        assert is_valid is True
        assert issues == []
        assert amount == 1050
        assert amount_issues == []

    def test_identity_issues_are_collected(self):
        """Test every identity problem is reported, not just the first."""
        validator = RecordValidator(LedgerSettings())
        is_valid, issues = validator.validate_identity(
            self._record(date=None, raw_date="nope", to_account=None)
        )
        assert is_valid is False
        assert [i.issue_type for i in issues] == ["invalid_date", "missing_account"]

    def test_self_payment_setting(self):
        """Test allow_self_payments switches the self_payment check off."""
        record = self._record(to_account="Alice")
        strict, _ = RecordValidator(LedgerSettings()).validate_identity(record)
        lenient, issues = RecordValidator(
            LedgerSettings(allow_self_payments=True)
        ).validate_identity(record)
        assert strict is False
        assert lenient is True
        assert issues == []

    def test_amount_issue_types_differ(self):
        """Test 'not a number' and 'not positive' are distinct issue types."""
        validator = RecordValidator(LedgerSettings())
        _, bad = validator.validate_amount(self._record(amount="abc"))
        _, zero = validator.validate_amount(self._record(amount="0.00"))
        assert bad[0].issue_type == "invalid_amount"
        assert zero[0].issue_type == "non_positive_amount"


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.IMPORT_STARTED,
            description="Importing file",
        )
        assert event.event_type == AuditEventType.IMPORT_STARTED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEvent(
            event_type=AuditEventType.LEDGER_EXPORTED,
            description="Ledger exported",
            details={"transaction_count": 3},
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "ledger_exported"
        assert log_dict["details"]["transaction_count"] == 3

    def test_record_rejected_event(self):
        """Test AuditEventBuilder.record_rejected."""
        correlation_id = uuid4()
        event = AuditEventBuilder.record_rejected(
            path="t.csv",
            record_index=4,
            issues=[{"field": "amount", "type": "invalid_amount", "message": "x"}],
            record={"amount": "abc"},
            correlation_id=correlation_id,
        )
        assert event.event_type == AuditEventType.RECORD_REJECTED
        assert event.severity == AuditSeverity.WARNING
        assert event.entity_id == "t.csv#4"
        assert event.correlation_id == correlation_id
        assert "invalid_amount" in event.description

    def test_empty_file_is_critical(self):
        """Test an empty file is logged at the highest severity."""
        event = AuditEventBuilder.file_unreadable(
            path="empty.csv",
            error_message="empty",
            correlation_id=uuid4(),
            empty=True,
        )
        assert event.severity == AuditSeverity.CRITICAL

    def test_format_detected_event(self):
        """Test AuditEventBuilder.format_detected."""
        event = AuditEventBuilder.format_detected("t.xml", "xml", uuid4())
        assert event.details["file_format"] == "xml"
        assert event.severity == AuditSeverity.INFO


class TestSettings:
    """Tests for configuration classes."""

    def test_ledger_defaults(self):
        """Test defaults match the file formats."""
        settings = LedgerSettings()
        assert settings.csv_date_format == "%d/%m/%Y"
        assert settings.xml_epoch == date(1900, 1, 1)
        assert settings.allow_self_payments is False

    def test_env_override(self, monkeypatch):
        """Test SUPPORTBANK_ variables override defaults."""
        monkeypatch.setenv("SUPPORTBANK_ALLOW_SELF_PAYMENTS", "true")
        monkeypatch.setenv("SUPPORTBANK_EXPORT_INDENT", "4")
        settings = LedgerSettings()
        assert settings.allow_self_payments is True
        assert settings.export_indent == 4

    def test_log_level_is_normalised(self):
        """Test level names are upper-cased and checked."""
        assert LoggingSettings(level="info").level == "INFO"
        with pytest.raises(ValidationError):
            LoggingSettings(level="loud")

    def test_validate_all_settings(self):
        """Test the startup check reports every section."""
        results = validate_all_settings()
        assert results["ledger"] is True
        assert results["logging"] is True
        assert results["app"] is True


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
