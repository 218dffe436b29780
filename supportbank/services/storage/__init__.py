"""
Storage Services Package

Provides the abstract audit storage interface and its implementations:
in-memory (tests, short sessions) and JSON-lines file.
"""

from supportbank.services.storage.interface import (
    AuditStorageInterface,
    StorageError,
)
from supportbank.services.storage.jsonl import JsonLinesAuditStorage
from supportbank.services.storage.memory import InMemoryAuditStorage

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    # Exceptions
    "StorageError",
    # Implementations
    "InMemoryAuditStorage",
    "JsonLinesAuditStorage",
]
