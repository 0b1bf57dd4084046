"""
Transaction Model

A transaction is one deposit or withdrawal together with the balance
the account held right after it was applied.

CRITICAL: Transactions are immutable once created. Only the Account
aggregate creates them.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, StrictInt

from little_ledger.models.money import InvalidAmount, Money


class Transaction(BaseModel):
    """A single balance-affecting event."""
    model_config = ConfigDict(frozen=True)

    timestamp: StrictInt = Field(
        ...,
        description="When the transaction happened (unix seconds, UTC)"
    )
    income: StrictInt = Field(
        ...,
        ge=0,
        description="Amount added, in cents"
    )
    expense: StrictInt = Field(
        ...,
        ge=0,
        description="Amount removed, in cents"
    )
    balance: StrictInt = Field(
        ...,
        description="Account balance after this transaction, in cents"
    )

    @classmethod
    def new(
        cls,
        timestamp: int,
        income: Money,
        expense: Money,
        balance: Money,
    ) -> "Transaction":
        """
        Build a transaction.

        Raises:
            InvalidAmount: If income or expense is negative
        """
        if income < 0:
            raise InvalidAmount(f"Income cannot be negative: {income}")
        if expense < 0:
            raise InvalidAmount(f"Expense cannot be negative: {expense}")
        return cls(
            timestamp=timestamp,
            income=income,
            expense=expense,
            balance=balance,
        )

    @property
    def net(self) -> Money:
        """Signed effect on the balance."""
        return self.income - self.expense

    @property
    def occurred_at(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp, tz=timezone.utc)
