"""
Account Aggregate

An account owns its current balance, the balance it was opened with,
and the ordered history of transactions that moved it.

DESIGN DECISION: The only way to change an account is deposit() or
withdraw(). Each call appends exactly one Transaction and updates the
balance in the same step, so the history always explains the balance.

Wall-clock time is never read directly. Callers pass a Clock, which
keeps transaction timestamps deterministic in tests.
"""

import time
from typing import Callable

from pydantic import BaseModel, ConfigDict, Field, StrictInt, model_validator

from little_ledger.models.money import InvalidAmount, Money
from little_ledger.models.transaction import Transaction


Clock = Callable[[], int]


def system_clock() -> int:
    """Current unix time in whole seconds."""
    return int(time.time())


class FixedClock:
    """
    Deterministic clock.

    Returns `timestamp` on the first call and advances by `step`
    seconds after every call.
    """

    def __init__(self, timestamp: int, step: int = 0):
        self.timestamp = timestamp
        self.step = step

    def __call__(self) -> int:
        now = self.timestamp
        self.timestamp += self.step
        return now


def _require_amount(amount: Money) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidAmount(f"Amount must be integer cents, got {amount!r}")
    if amount < 0:
        raise InvalidAmount(f"Amount cannot be negative: {amount}")


class Account(BaseModel):
    """
    A single ledger account.

    Serialized field names match the on-disk schema:
    balance, startBalance, transactions.
    """
    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    balance: StrictInt = Field(
        ...,
        description="Current balance in cents"
    )
    start_balance: StrictInt = Field(
        ...,
        alias="startBalance",
        description="Balance the account was opened with, in cents"
    )
    transactions: list[Transaction] = Field(
        default_factory=list,
        description="Append-only history in chronological order"
    )

    @model_validator(mode='after')
    def validate_balance_chain(self) -> 'Account':
        """Every transaction must follow from its predecessor."""
        previous = self.start_balance
        for index, txn in enumerate(self.transactions):
            expected = previous + txn.income - txn.expense
            if txn.balance != expected:
                raise ValueError(
                    f"Transaction {index} balance {txn.balance} does not match "
                    f"expected {expected}"
                )
            previous = txn.balance

        if self.balance != previous:
            raise ValueError(
                f"Account balance {self.balance} does not match history ({previous})"
            )
        return self

    @classmethod
    def create(cls, start_balance: Money = 0) -> "Account":
        """Open an account with no history."""
        return cls(
            balance=start_balance,
            start_balance=start_balance,
            transactions=[],
        )

    def _record(self, income: Money, expense: Money, clock: Clock) -> Money:
        new_balance = self.balance + income - expense
        txn = Transaction.new(
            timestamp=clock(),
            income=income,
            expense=expense,
            balance=new_balance,
        )
        self.transactions.append(txn)
        self.balance = new_balance
        return new_balance

    def deposit(self, amount: Money, clock: Clock = system_clock) -> Money:
        """
        Add money to the account.

        Returns:
            The new balance

        Raises:
            InvalidAmount: If amount is negative (nothing is recorded)
        """
        _require_amount(amount)
        return self._record(amount, 0, clock)

    def withdraw(self, amount: Money, clock: Clock = system_clock) -> Money:
        """
        Take money out of the account.

        Overdraft is allowed: the balance may go negative.

        Raises:
            InvalidAmount: If amount is negative (nothing is recorded)
        """
        _require_amount(amount)
        return self._record(0, amount, clock)

    def history(self) -> tuple[Transaction, ...]:
        """Read-only view of the transactions, oldest first."""
        return tuple(self.transactions)

    def total_income(self) -> Money:
        return sum(txn.income for txn in self.transactions)

    def total_expense(self) -> Money:
        return sum(txn.expense for txn in self.transactions)
