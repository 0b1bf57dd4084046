"""
Audit Models for Little Ledger

Every change to an account, and every failure along the way, is
recorded as an audit event. This gives:
1. A trail that explains how a balance came to be
2. Debugging information when a file fails to load or save
3. A record of rejected input

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Account lifecycle
    ACCOUNT_CREATED = "account_created"
    ACCOUNT_LOADED = "account_loaded"
    ACCOUNT_SAVED = "account_saved"
    ACCOUNT_DELETED = "account_deleted"
    ACTIVE_ACCOUNT_CHANGED = "active_account_changed"

    # Balance changes
    DEPOSIT_RECORDED = "deposit_recorded"
    WITHDRAWAL_RECORDED = "withdrawal_recorded"
    AMOUNT_REJECTED = "amount_rejected"

    # Failures
    STORAGE_ERROR = "storage_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant ledger action creates one of these.
    """

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    account: Optional[str] = Field(
        default=None,
        description="Name of the account the event relates to"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)

    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "account": self.account,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.deposit_recorded("savings", 1000, 5000)
    """

    @staticmethod
    def account_created(account: str, start_balance: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNT_CREATED,
            account=account,
            description=f"Account created: {account}",
            details={"start_balance": start_balance},
        )

    @staticmethod
    def account_loaded(account: str, path: str, transaction_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNT_LOADED,
            severity=AuditSeverity.DEBUG,
            account=account,
            description=f"Account loaded from {path}",
            details={"path": path, "transaction_count": transaction_count},
        )

    @staticmethod
    def account_saved(account: str, path: str, balance: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNT_SAVED,
            severity=AuditSeverity.DEBUG,
            account=account,
            description=f"Account saved to {path}",
            details={"path": path, "balance": balance},
        )

    @staticmethod
    def account_deleted(account: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNT_DELETED,
            severity=AuditSeverity.WARNING,
            account=account,
            description=f"Account deleted: {account}",
        )

    @staticmethod
    def active_account_changed(account: str, previous: Optional[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACTIVE_ACCOUNT_CHANGED,
            account=account,
            description=f"Active account set to {account}",
            details={"previous": previous},
        )

    @staticmethod
    def deposit_recorded(account: str, amount: int, balance: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DEPOSIT_RECORDED,
            account=account,
            description=f"Deposit of {amount} cents recorded",
            details={"amount": amount, "balance": balance},
        )

    @staticmethod
    def withdrawal_recorded(account: str, amount: int, balance: int) -> AuditEvent:
        severity = AuditSeverity.WARNING if balance < 0 else AuditSeverity.INFO
        return AuditEvent(
            event_type=AuditEventType.WITHDRAWAL_RECORDED,
            severity=severity,
            account=account,
            description=f"Withdrawal of {amount} cents recorded",
            details={"amount": amount, "balance": balance, "overdrawn": balance < 0},
        )

    @staticmethod
    def amount_rejected(account: str, operation: str, amount: Any, reason: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.AMOUNT_REJECTED,
            severity=AuditSeverity.WARNING,
            account=account,
            description=f"Rejected {operation} amount: {amount!r}",
            details={"operation": operation, "amount": repr(amount)},
            error_message=reason,
        )

    @staticmethod
    def storage_error(
        operation: str,
        error_message: str,
        account: Optional[str] = None,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_ERROR,
            severity=AuditSeverity.ERROR,
            account=account,
            description=f"Storage error during {operation}",
            details={"operation": operation, **(details or {})},
            error_message=error_message,
        )
