"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Keep account files as JSON today and swap the backend later
2. Use a fake backend in tests
3. Keep the account model decoupled from where it lives

The interface is intentionally small. Accounts are saved and loaded
as whole snapshots; there is no partial update.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Union

from little_ledger.models.account import Account
from little_ledger.models.audit import AuditEvent


Location = Union[str, Path]


class AccountStorageInterface(ABC):
    """
    Abstract interface for account snapshot storage.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def save(self, account: Account, destination: Location) -> None:
        """
        Write the full account, replacing anything at destination.

        A failed save must leave a previously valid snapshot intact.

        Raises:
            InconsistentAccountError: If the account state is invalid
            StorageIOError: If the destination cannot be written
        """
        pass

    @abstractmethod
    def load(self, source: Location) -> Account:
        """
        Read an account snapshot.

        Raises:
            NotFoundError: If nothing exists at source
            StorageIOError: If source cannot be read
            ParseError: If the content is malformed
        """
        pass

    @abstractmethod
    def exists(self, location: Location) -> bool:
        """Check whether a snapshot exists at location."""
        pass

    @abstractmethod
    def delete(self, location: Location) -> None:
        """
        Remove the snapshot at location.

        Raises:
            NotFoundError: If nothing exists at location
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageIOError(StorageError):
    """Location could not be read or written."""
    pass


class NotFoundError(StorageIOError):
    """Nothing stored at the requested location."""
    pass


class DuplicateError(StorageError):
    """Attempted to create something that already exists."""
    pass


class ParseError(StorageError):
    """Stored content is malformed."""
    pass


class InconsistentAccountError(StorageError):
    """Account state breaks the balance chain and must not be written."""
    pass
