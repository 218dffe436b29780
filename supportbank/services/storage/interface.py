"""
Abstract Audit Storage Interface

DESIGN DECISION: We define an abstract interface for audit persistence.
This allows us to:
1. Keep the audit trail in memory for tests and short sessions
2. Append it to a JSON-lines file for long-running use
3. Add other backends later without touching the import pipeline

The ledger itself is NOT persisted through this interface: flat-file
import and export are the only ledger persistence.
"""

from abc import ABC, abstractmethod
from uuid import UUID

from supportbank.errors import SupportBankError
from supportbank.models.audit import AuditEvent


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Args:
            event: The audit event to log

        Returns:
            True if logged successfully

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events for a correlation ID (e.g., one file import).

        Args:
            correlation_id: The correlation identifier

        Returns:
            List of related events in chronological order
        """
        pass

    @abstractmethod
    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        """
        Get all events for a specific entity.

        Args:
            entity_type: Type of entity (e.g., 'file', 'record')
            entity_id: The entity's identifier

        Returns:
            List of events in chronological order
        """
        pass

    @abstractmethod
    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Args:
            limit: Maximum number of events to return

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(SupportBankError):
    """Base exception for storage operations."""
    pass
