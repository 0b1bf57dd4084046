"""
Audit Logger

DESIGN DECISION: Every change to an account is logged.
This provides:
1. A trail explaining every balance
2. Debugging capability when files fail to load or save
3. A record of rejected input

The audit logger:
- Always writes to the structured local log
- Optionally appends to audit storage
- Never breaks the ledger operation if audit storage fails
"""

import logging
import sys
from typing import Optional

import structlog

from little_ledger.config import LoggingSettings
from little_ledger.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from little_ledger.services.storage import AuditStorageInterface


def configure_logging(settings: Optional[LoggingSettings] = None) -> None:
    """
    Configure stdlib logging and structlog.

    Call once at program start; the ledger itself never calls this.
    """
    settings = settings or LoggingSettings()

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=settings.level,
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if settings.json_output
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. Audit storage, if one is configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("little_ledger.audit")

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity == AuditSeverity.ERROR:
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return self._storage.append_event(event)
            except Exception as e:
                # Audit failures must not fail the ledger operation
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def log_account_created(self, account: str, start_balance: int) -> None:
        self.log(AuditEventBuilder.account_created(account, start_balance))

    def log_account_loaded(self, account: str, path: str, transaction_count: int) -> None:
        self.log(AuditEventBuilder.account_loaded(account, path, transaction_count))

    def log_account_saved(self, account: str, path: str, balance: int) -> None:
        self.log(AuditEventBuilder.account_saved(account, path, balance))

    def log_account_deleted(self, account: str) -> None:
        self.log(AuditEventBuilder.account_deleted(account))

    def log_active_account_changed(self, account: str, previous: Optional[str]) -> None:
        self.log(AuditEventBuilder.active_account_changed(account, previous))

    def log_deposit(self, account: str, amount: int, balance: int) -> None:
        self.log(AuditEventBuilder.deposit_recorded(account, amount, balance))

    def log_withdrawal(self, account: str, amount: int, balance: int) -> None:
        self.log(AuditEventBuilder.withdrawal_recorded(account, amount, balance))

    def log_amount_rejected(self, account: str, operation: str, amount, reason: str) -> None:
        """Log a deposit or withdrawal that failed validation."""
        self.log(AuditEventBuilder.amount_rejected(account, operation, amount, reason))

    def log_storage_error(
        self,
        operation: str,
        error_message: str,
        account: Optional[str] = None,
        details: Optional[dict] = None,
    ) -> None:
        """Log a failed load, save or delete."""
        self.log(AuditEventBuilder.storage_error(
            operation=operation,
            error_message=error_message,
            account=account,
            details=details,
        ))
