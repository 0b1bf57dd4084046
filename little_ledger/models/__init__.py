"""
Data Models Package

This package contains the ledger's value types and Pydantic models.
All data written to disk conforms to these schemas.
"""

from little_ledger.models.money import (
    InvalidAmount,
    Money,
    format_money,
    from_decimal,
    to_decimal,
)
from little_ledger.models.transaction import Transaction
from little_ledger.models.account import (
    Account,
    Clock,
    FixedClock,
    system_clock,
)
from little_ledger.models.workspace import WorkspaceConfig
from little_ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Money
    "InvalidAmount",
    "Money",
    "format_money",
    "from_decimal",
    "to_decimal",
    # Ledger models
    "Account",
    "Clock",
    "FixedClock",
    "Transaction",
    "system_clock",
    "WorkspaceConfig",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
