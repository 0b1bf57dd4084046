"""
Ledger Service

This module ties the account model, the workspace and the audit log
together into the flows an outer program (CLI, UI) calls:

    create account -> deposit / withdraw -> read balance and history

Each flow is one load -> change -> save cycle. State lives only in the
account files between calls.

DESIGN DECISION: The service enforces the boundaries:
- Nothing is saved when validation fails
- Every change and every failure is audited
- Errors are raised as typed exceptions; printing and exit codes are
  the caller's job
"""

from typing import Optional

from pydantic import BaseModel

from little_ledger.audit import AuditLogger
from little_ledger.config import LedgerSettings, get_settings
from little_ledger.models.account import Account, Clock, system_clock
from little_ledger.models.money import InvalidAmount, Money, format_money
from little_ledger.models.transaction import Transaction
from little_ledger.services.storage import JsonLinesAuditStorage, StorageError
from little_ledger.workspace import Workspace


class NoActiveAccountError(Exception):
    """No account was named and none is active."""
    pass


class AccountSummary(BaseModel):
    """Snapshot of an account for display."""

    name: str
    balance: Money
    start_balance: Money
    total_income: Money
    total_expense: Money
    transaction_count: int


class LedgerService:
    """
    Runs ledger operations against a workspace.

    The clock is injected so transaction timestamps can be fixed in tests.
    """

    def __init__(
        self,
        workspace: Workspace,
        clock: Clock = system_clock,
        audit_logger: Optional[AuditLogger] = None,
        currency_symbol: str = "$",
    ):
        self._workspace = workspace
        self._clock = clock
        self._audit_logger = audit_logger
        self._currency_symbol = currency_symbol

    @property
    def workspace(self) -> Workspace:
        return self._workspace

    def format_amount(self, amount: Money, width: int = 0) -> str:
        """Render cents with the configured currency symbol."""
        return format_money(amount, symbol=self._currency_symbol, width=width)

    def _resolve(self, account: Optional[str]) -> str:
        if account is not None:
            return account
        active = self._workspace.active_account
        if active is None:
            raise NoActiveAccountError(
                "No account given and no active account set"
            )
        return active

    def _load(self, name: str) -> Account:
        try:
            loaded = self._workspace.load_account(name)
        except StorageError as e:
            if self._audit_logger:
                self._audit_logger.log_storage_error(
                    operation="load",
                    error_message=str(e),
                    account=name,
                    details={"error_type": type(e).__name__},
                )
            raise

        if self._audit_logger:
            self._audit_logger.log_account_loaded(
                account=name,
                path=str(self._workspace.account_path(name)),
                transaction_count=len(loaded.transactions),
            )
        return loaded

    def _save(self, name: str, account: Account) -> None:
        path = str(self._workspace.account_path(name))
        try:
            self._workspace.save_account(name, account)
        except StorageError as e:
            if self._audit_logger:
                self._audit_logger.log_storage_error(
                    operation="save",
                    error_message=str(e),
                    account=name,
                    details={"path": path},
                )
            raise

        if self._audit_logger:
            self._audit_logger.log_account_saved(
                account=name,
                path=path,
                balance=account.balance,
            )

    # -------------------------------------------------------------------------
    # Flows
    # -------------------------------------------------------------------------

    def create_account(
        self,
        name: str,
        start_balance: Money = 0,
        activate: bool = True,
    ) -> Account:
        """
        Create a new account, and make it active unless told otherwise.

        Raises:
            InvalidAccountName: If the name is unusable
            DuplicateError: If the account exists
        """
        account = self._workspace.create_account(name, start_balance)

        if self._audit_logger:
            self._audit_logger.log_account_created(name, start_balance)

        if activate:
            self.use(name)
        return account

    def deposit(self, amount: Money, account: Optional[str] = None) -> Money:
        """
        Deposit into an account (the active one by default).

        Returns:
            The new balance
        """
        name = self._resolve(account)
        loaded = self._load(name)

        try:
            balance = loaded.deposit(amount, clock=self._clock)
        except InvalidAmount as e:
            if self._audit_logger:
                self._audit_logger.log_amount_rejected(name, "deposit", amount, str(e))
            raise

        self._save(name, loaded)

        if self._audit_logger:
            self._audit_logger.log_deposit(name, amount, balance)
        return balance

    def withdraw(self, amount: Money, account: Optional[str] = None) -> Money:
        """
        Withdraw from an account (the active one by default).

        Overdraft is allowed.

        Returns:
            The new balance
        """
        name = self._resolve(account)
        loaded = self._load(name)

        try:
            balance = loaded.withdraw(amount, clock=self._clock)
        except InvalidAmount as e:
            if self._audit_logger:
                self._audit_logger.log_amount_rejected(name, "withdraw", amount, str(e))
            raise

        self._save(name, loaded)

        if self._audit_logger:
            self._audit_logger.log_withdrawal(name, amount, balance)
        return balance

    def balance(self, account: Optional[str] = None) -> Money:
        return self._load(self._resolve(account)).balance

    def history(self, account: Optional[str] = None) -> tuple[Transaction, ...]:
        return self._load(self._resolve(account)).history()

    def summary(self, account: Optional[str] = None) -> AccountSummary:
        name = self._resolve(account)
        loaded = self._load(name)
        return AccountSummary(
            name=name,
            balance=loaded.balance,
            start_balance=loaded.start_balance,
            total_income=loaded.total_income(),
            total_expense=loaded.total_expense(),
            transaction_count=len(loaded.transactions),
        )

    def use(self, name: str) -> None:
        """Make an existing account the active one."""
        previous = self._workspace.use(name)
        if self._audit_logger:
            self._audit_logger.log_active_account_changed(name, previous)

    def list_accounts(self) -> list[str]:
        return self._workspace.list_accounts()

    def delete_account(self, name: str) -> None:
        self._workspace.delete_account(name)
        if self._audit_logger:
            self._audit_logger.log_account_deleted(name)


def create_ledger_service(
    settings: Optional[LedgerSettings] = None,
    clock: Clock = system_clock,
) -> LedgerService:
    """
    Factory function to create a ledger service from settings.

    Args:
        settings: Ledger settings; loaded from the environment if None
        clock: Time source for new transactions

    Returns:
        A service bound to an initialized workspace
    """
    settings = settings or get_settings().ledger

    workspace = Workspace(settings.workspace_dir)
    workspace.init()

    audit_storage = None
    if settings.audit_log_enabled:
        audit_storage = JsonLinesAuditStorage(settings.audit_log_path)

    return LedgerService(
        workspace=workspace,
        clock=clock,
        audit_logger=AuditLogger(audit_storage),
        currency_symbol=settings.currency_symbol,
    )
