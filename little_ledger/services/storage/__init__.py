"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
Currently implements JSON files as the backend, but designed to be swappable.
"""

from little_ledger.services.storage.interface import (
    AccountStorageInterface,
    AuditStorageInterface,
    DuplicateError,
    InconsistentAccountError,
    NotFoundError,
    ParseError,
    StorageError,
    StorageIOError,
)
from little_ledger.services.storage.json_file import (
    JsonFileAccountStorage,
    JsonLinesAuditStorage,
    load_account,
    save_account,
)

__all__ = [
    # Interfaces
    "AccountStorageInterface",
    "AuditStorageInterface",
    # Exceptions
    "DuplicateError",
    "InconsistentAccountError",
    "NotFoundError",
    "ParseError",
    "StorageError",
    "StorageIOError",
    # JSON implementation
    "JsonFileAccountStorage",
    "JsonLinesAuditStorage",
    "load_account",
    "save_account",
]
