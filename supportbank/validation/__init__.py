"""Record validation package."""

from supportbank.validation.validator import RecordValidator

__all__ = ["RecordValidator"]
