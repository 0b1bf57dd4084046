"""Services package."""

from little_ledger.services.storage import (
    AccountStorageInterface,
    AuditStorageInterface,
    DuplicateError,
    InconsistentAccountError,
    JsonFileAccountStorage,
    JsonLinesAuditStorage,
    NotFoundError,
    ParseError,
    StorageError,
    StorageIOError,
    load_account,
    save_account,
)

__all__ = [
    "AccountStorageInterface",
    "AuditStorageInterface",
    "DuplicateError",
    "InconsistentAccountError",
    "JsonFileAccountStorage",
    "JsonLinesAuditStorage",
    "NotFoundError",
    "ParseError",
    "StorageError",
    "StorageIOError",
    "load_account",
    "save_account",
]
