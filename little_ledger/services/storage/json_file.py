"""
JSON File Storage Implementation

DESIGN DECISION: One JSON file per account, holding the full snapshot:

    {"balance": 7000, "startBalance": 0,
     "transactions": [{"timestamp": ..., "income": ..., "expense": ..., "balance": ...}]}

Field names and integer cents are kept stable so existing files stay
readable.

Writes go to a temp file in the same directory, which is fsynced and
then renamed over the destination. The rename is atomic on POSIX and
Windows, so a crash mid-write leaves the old file untouched.

TRADEOFFS:
- The whole history is rewritten on every save (fine for personal use)
- No locking; one process at a time
"""

import json
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from little_ledger.models.account import Account
from little_ledger.models.audit import AuditEvent
from little_ledger.services.storage.interface import (
    AccountStorageInterface,
    AuditStorageInterface,
    InconsistentAccountError,
    Location,
    NotFoundError,
    ParseError,
    StorageIOError,
)


def atomic_write_text(path: Path, text: str) -> None:
    """
    Replace the file at path with text in one rename.

    Raises:
        StorageIOError: If any step fails (the temp file is removed)
    """
    path = Path(path)
    try:
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
        )
    except OSError as e:
        raise StorageIOError(f"Cannot write to {path.parent}: {e}") from e

    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except OSError as e:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise StorageIOError(f"Failed to write {path}: {e}") from e


def read_text(path: Path) -> str:
    """
    Read a whole file as UTF-8.

    Raises:
        NotFoundError: If the file is missing
        StorageIOError: If it cannot be read
        ParseError: If it is not valid UTF-8
    """
    try:
        return Path(path).read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise NotFoundError(f"No file at {path}") from e
    except UnicodeDecodeError as e:
        raise ParseError(f"{path} is not valid UTF-8: {e}") from e
    except OSError as e:
        raise StorageIOError(f"Failed to read {path}: {e}") from e


class JsonFileAccountStorage(AccountStorageInterface):
    """Stores each account as an indented JSON file."""

    def __init__(self, indent: int = 2):
        self._indent = indent

    def _account_to_json(self, account: Account) -> str:
        data = account.model_dump(mode="json", by_alias=True)
        return json.dumps(data, indent=self._indent) + "\n"

    def _json_to_account(self, text: str, source: Location) -> Account:
        try:
            return Account.model_validate_json(text)
        except ValidationError as e:
            raise ParseError(f"Malformed account file {source}: {e}") from e

    def _check_account(self, account: Account) -> None:
        # Fields can be changed outside deposit/withdraw; never write a
        # snapshot that load() would reject.
        try:
            Account.model_validate(account.model_dump())
        except ValidationError as e:
            raise InconsistentAccountError(f"Refusing to save invalid account: {e}") from e

    def save(self, account: Account, destination: Location) -> None:
        """Write the account snapshot atomically."""
        self._check_account(account)
        atomic_write_text(Path(destination), self._account_to_json(account))

    def load(self, source: Location) -> Account:
        """Read and validate an account snapshot."""
        return self._json_to_account(read_text(Path(source)), source)

    def exists(self, location: Location) -> bool:
        return Path(location).is_file()

    def delete(self, location: Location) -> None:
        try:
            Path(location).unlink()
        except FileNotFoundError as e:
            raise NotFoundError(f"No file at {location}") from e
        except OSError as e:
            raise StorageIOError(f"Failed to delete {location}: {e}") from e


class JsonLinesAuditStorage(AuditStorageInterface):
    """
    Audit log kept as one JSON object per line.

    Audit events are append-only.
    """

    def __init__(self, path: Location):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def append_event(self, event: AuditEvent) -> bool:
        """Append an audit event."""
        line = event.model_dump_json() + "\n"
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._path, "a", encoding="utf-8") as f:
                f.write(line)
            return True
        except OSError as e:
            raise StorageIOError(f"Failed to append audit event: {e}") from e

    def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        """Get recent events, newest first."""
        try:
            lines = read_text(self._path).splitlines()
        except NotFoundError:
            return []

        events = []
        for number, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            try:
                events.append(AuditEvent.model_validate_json(line))
            except ValidationError as e:
                raise ParseError(f"Malformed audit line {number} in {self._path}: {e}") from e

        events.sort(key=lambda e: e.timestamp, reverse=True)
        return events[:limit]


_default_storage = JsonFileAccountStorage()


def save_account(account: Account, destination: Location) -> None:
    """Save an account with the default JSON storage."""
    _default_storage.save(account, destination)


def load_account(source: Location) -> Account:
    """Load an account with the default JSON storage."""
    return _default_storage.load(source)
