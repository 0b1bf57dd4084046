"""
Workspace

A workspace is a directory that maps account names to account files and
remembers which account is active:

    <root>/config.json            {"activeAccount": "savings"}
    <root>/accounts/savings.json  account snapshot

DESIGN DECISION: The workspace root is always passed in. Nothing here
looks at the current working directory, so two workspaces can be used
side by side (and tests can point one at a temp dir).
"""

import re
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from little_ledger.models.account import Account
from little_ledger.models.money import Money
from little_ledger.models.workspace import WorkspaceConfig
from little_ledger.services.storage import (
    AccountStorageInterface,
    DuplicateError,
    JsonFileAccountStorage,
    NotFoundError,
    ParseError,
    StorageIOError,
)
from little_ledger.services.storage.json_file import atomic_write_text, read_text


CONFIG_FILENAME = "config.json"
ACCOUNTS_DIRNAME = "accounts"
ACCOUNT_SUFFIX = ".json"

_ACCOUNT_NAME = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]{0,63}$")


class InvalidAccountName(ValueError):
    """Account name cannot be used as a file name."""
    pass


class Workspace:
    """
    Resolves account names to files and tracks the active account.

    Account files are read and written through an AccountStorageInterface,
    JSON files by default.
    """

    def __init__(
        self,
        root: Union[str, Path],
        storage: Optional[AccountStorageInterface] = None,
    ):
        self._root = Path(root)
        self._storage = storage or JsonFileAccountStorage()

    @property
    def root(self) -> Path:
        return self._root

    @property
    def config_path(self) -> Path:
        return self._root / CONFIG_FILENAME

    @property
    def accounts_dir(self) -> Path:
        return self._root / ACCOUNTS_DIRNAME

    # -------------------------------------------------------------------------
    # Setup
    # -------------------------------------------------------------------------

    def init(self) -> None:
        """
        Create the workspace layout if it is missing.

        Safe to call on an existing workspace; nothing is overwritten.
        """
        try:
            self.accounts_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageIOError(f"Cannot create workspace at {self._root}: {e}") from e

        if not self.config_path.exists():
            self._write_config(WorkspaceConfig())

    def is_initialized(self) -> bool:
        return self.config_path.is_file() and self.accounts_dir.is_dir()

    # -------------------------------------------------------------------------
    # Config
    # -------------------------------------------------------------------------

    def _read_config(self) -> WorkspaceConfig:
        try:
            text = read_text(self.config_path)
        except NotFoundError:
            return WorkspaceConfig()
        try:
            return WorkspaceConfig.model_validate_json(text)
        except ValidationError as e:
            raise ParseError(f"Malformed workspace config {self.config_path}: {e}") from e

    def _write_config(self, config: WorkspaceConfig) -> None:
        text = config.model_dump_json(by_alias=True, indent=2) + "\n"
        atomic_write_text(self.config_path, text)

    @property
    def active_account(self) -> Optional[str]:
        """Name of the active account, or None."""
        return self._read_config().active_account

    def use(self, name: str) -> Optional[str]:
        """
        Make an existing account the active one.

        Returns:
            The previously active account name

        Raises:
            NotFoundError: If the account does not exist
        """
        if not self.has_account(name):
            raise NotFoundError(f"No account named {name!r}")

        config = self._read_config()
        previous = config.active_account
        self._write_config(config.model_copy(update={"active_account": name}))
        return previous

    # -------------------------------------------------------------------------
    # Accounts
    # -------------------------------------------------------------------------

    def account_path(self, name: str) -> Path:
        """
        Resolve an account name to its file.

        Raises:
            InvalidAccountName: If the name is not a safe file name
        """
        if not isinstance(name, str) or not _ACCOUNT_NAME.match(name):
            raise InvalidAccountName(
                f"Invalid account name {name!r}: use letters, digits, '.', '_' or '-'"
            )
        return self.accounts_dir / f"{name}{ACCOUNT_SUFFIX}"

    def has_account(self, name: str) -> bool:
        return self._storage.exists(self.account_path(name))

    def list_accounts(self) -> list[str]:
        """Names of all accounts, sorted."""
        if not self.accounts_dir.is_dir():
            return []
        return sorted(
            path.name[: -len(ACCOUNT_SUFFIX)]
            for path in self.accounts_dir.glob(f"*{ACCOUNT_SUFFIX}")
            if path.is_file() and _ACCOUNT_NAME.match(path.name[: -len(ACCOUNT_SUFFIX)])
        )

    def create_account(self, name: str, start_balance: Money = 0) -> Account:
        """
        Create and save a new account.

        Raises:
            DuplicateError: If an account with this name exists
        """
        path = self.account_path(name)
        if self._storage.exists(path):
            raise DuplicateError(f"Account {name!r} already exists")

        self.init()
        account = Account.create(start_balance)
        self._storage.save(account, path)
        return account

    def load_account(self, name: str) -> Account:
        return self._storage.load(self.account_path(name))

    def save_account(self, name: str, account: Account) -> None:
        self._storage.save(account, self.account_path(name))

    def delete_account(self, name: str) -> None:
        """
        Delete an account file.

        Clears the active pointer if it named this account.
        """
        self._storage.delete(self.account_path(name))

        config = self._read_config()
        if config.active_account == name:
            self._write_config(config.model_copy(update={"active_account": None}))
