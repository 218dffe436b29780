"""Services package."""

from supportbank.services.storage import (
    AuditStorageInterface,
    InMemoryAuditStorage,
    JsonLinesAuditStorage,
    StorageError,
)

__all__ = [
    # Storage services
    "AuditStorageInterface",
    "InMemoryAuditStorage",
    "JsonLinesAuditStorage",
    "StorageError",
]
