"""
JSON-lines audit storage.

One AuditEvent per line, appended. Reading scans the whole file; the
audit trail of a personal ledger stays small enough for that.
"""

from pathlib import Path
from typing import Union
from uuid import UUID

import structlog
from pydantic import ValidationError

from supportbank.models.audit import AuditEvent
from supportbank.services.storage.interface import (
    AuditStorageInterface,
    StorageError,
)


class JsonLinesAuditStorage(AuditStorageInterface):
    """Audit trail kept in a JSON-lines file."""

    def __init__(self, path: Union[str, Path], encoding: str = "utf-8"):
        self._path = Path(path)
        self._encoding = encoding
        self._logger = structlog.get_logger(__name__)

    @property
    def path(self) -> Path:
        return self._path

    def append_event(self, event: AuditEvent) -> bool:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("a", encoding=self._encoding) as f:
                f.write(event.model_dump_json() + "\n")
            return True
        except OSError as e:
            raise StorageError(f"Failed to write audit event to {self._path}: {e}")

    def _read_events(self) -> list[AuditEvent]:
        """Read every event in the file, skipping lines that don't parse."""
        if not self._path.exists():
            return []

        try:
            lines = self._path.read_text(encoding=self._encoding).splitlines()
        except OSError as e:
            raise StorageError(f"Failed to read audit events from {self._path}: {e}")

        events = []
        for line_number, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            try:
                events.append(AuditEvent.model_validate_json(line))
            except ValidationError:
                self._logger.warning(
                    "audit_line_unreadable",
                    path=str(self._path),
                    line=line_number,
                )
        return events

    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        events = [e for e in self._read_events() if e.correlation_id == correlation_id]
        events.sort(key=lambda e: e.timestamp)
        return events

    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        events = [
            e for e in self._read_events()
            if e.entity_type == entity_type and e.entity_id == entity_id
        ]
        events.sort(key=lambda e: e.timestamp)
        return events

    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        events = self._read_events()
        # Sort newest first
        events.sort(key=lambda e: e.timestamp, reverse=True)
        return events[:limit]
