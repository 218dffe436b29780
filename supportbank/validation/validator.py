"""
Two-Stage Record Validation

DESIGN DECISION: Validation happens in two distinct stages:

STAGE 1 - IDENTITY VALIDATION:
- The date must be a real calendar date
- Both party names must be present
- A record may not pay an account to itself (unless configured)

STAGE 2 - AMOUNT VALIDATION:
- The amount must be a number
- The amount must be greater than zero
- These are reported as DIFFERENT issue types

WHY TWO STAGES:
The import pipeline resolves (get-or-create) the two accounts between
the stages. A record with a good date but a bad amount still introduces
its account names into the ledger; a record with a bad date does not.

IMPORTANT: Validation NEVER silently fixes issues.
It reports them, and the pipeline skips the record.
"""

from typing import Optional

from supportbank.config import LedgerSettings, get_settings
from supportbank.models.money import (
    AmountParseError,
    NonPositiveAmountError,
    parse_amount,
)
from supportbank.models.record import (
    CanonicalRecord,
    ValidationIssue,
)


class RecordValidator:
    """
    Validates canonical records before they reach the ledger.

    Stage 1: identity (date, parties)
    Stage 2: amount
    """

    def __init__(
        self,
        settings: Optional[LedgerSettings] = None,
    ):
        """
        Initialize validator.

        Args:
            settings: Ledger settings. Defaults to the cached application settings.
        """
        self._settings = settings or get_settings().ledger

    def validate_identity(
        self,
        record: CanonicalRecord,
    ) -> tuple[bool, list[ValidationIssue]]:
        """
        Stage 1: identity validation.

        Returns: (is_valid, list_of_issues)
        """
        issues = []

        if record.date is None:
            issues.append(ValidationIssue(
                field="date",
                issue_type="invalid_date",
                message=f"Invalid date: {record.raw_date!r}",
            ))

        for field, name in (("from", record.from_account), ("to", record.to_account)):
            if not name:
                issues.append(ValidationIssue(
                    field=field,
                    issue_type="missing_account",
                    message=f"Missing '{field}' account name",
                ))

        if (
            record.from_account
            and record.from_account == record.to_account
            and not self._settings.allow_self_payments
        ):
            issues.append(ValidationIssue(
                field="to",
                issue_type="self_payment",
                message=f"{record.from_account} cannot pay themselves",
            ))

        is_valid = not any(issue.severity == "error" for issue in issues)

        return is_valid, issues

    def validate_amount(
        self,
        record: CanonicalRecord,
    ) -> tuple[Optional[int], list[ValidationIssue]]:
        """
        Stage 2: amount validation.

        Returns: (amount_in_minor_units or None, list_of_issues)
        """
        try:
            return parse_amount(record.amount), []
        except AmountParseError:
            return None, [ValidationIssue(
                field="amount",
                issue_type="invalid_amount",
                message=f"Amount is not a number: {record.amount!r}",
            )]
        except NonPositiveAmountError:
            return None, [ValidationIssue(
                field="amount",
                issue_type="non_positive_amount",
                message=f"Amount must be greater than zero: {record.amount!r}",
            )]
