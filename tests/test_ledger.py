"""
Tests for the ledger service, audit logger and settings

Integration-style tests: every test runs against a real workspace in
tmp_path with a fixed clock, so timestamps are deterministic.
"""

from pathlib import Path

import pytest
import structlog
from pydantic import ValidationError

from little_ledger.audit import AuditLogger, configure_logging
from little_ledger.config import LedgerSettings, LoggingSettings, get_settings, validate_all_settings
from little_ledger.ledger import (
    AccountSummary,
    LedgerService,
    NoActiveAccountError,
    create_ledger_service,
)
from little_ledger.models.account import FixedClock
from little_ledger.models.audit import AuditEventBuilder, AuditEventType
from little_ledger.models.money import InvalidAmount, from_decimal
from little_ledger.models.transaction import Transaction
from little_ledger.services.storage import (
    AuditStorageInterface,
    DuplicateError,
    JsonLinesAuditStorage,
    NotFoundError,
    ParseError,
    StorageIOError,
)
from little_ledger.workspace import InvalidAccountName, Workspace


T0 = 1_700_000_000


@pytest.fixture
def audit_storage(tmp_path):
    return JsonLinesAuditStorage(tmp_path / "audit.jsonl")


@pytest.fixture
def workspace(tmp_path):
    ws = Workspace(tmp_path / "ledger")
    ws.init()
    return ws


@pytest.fixture
def service(workspace, audit_storage):
    return LedgerService(
        workspace=workspace,
        clock=FixedClock(T0, step=60),
        audit_logger=AuditLogger(audit_storage),
    )


def event_types(audit_storage):
    return {event.event_type for event in audit_storage.get_recent_events(limit=1000)}


class FailingAuditStorage(AuditStorageInterface):
    """Audit backend that always fails to write."""

    def append_event(self, event):
        raise StorageIOError("audit disk gone")

    def get_recent_events(self, limit=100):
        return []


class BrokenAuditStorage(FailingAuditStorage):
    """Audit backend that fails with an unexpected error."""

    def append_event(self, event):
        raise RuntimeError("serializer exploded")


class TestLedgerFlows:
    """Tests for the end-to-end ledger flows."""

    def test_create_account_activates(self, service, workspace):
        service.create_account("savings")
        assert workspace.active_account == "savings"
        assert service.list_accounts() == ["savings"]

    def test_create_account_without_activating(self, service, workspace):
        service.create_account("savings", activate=False)
        assert workspace.active_account is None

    def test_create_duplicate_account(self, service):
        service.create_account("savings")
        with pytest.raises(DuplicateError):
            service.create_account("savings")

    def test_create_account_with_bad_name(self, service):
        with pytest.raises(InvalidAccountName):
            service.create_account("../escape")

    def test_deposit_and_withdraw_active_account(self, service):
        """Test the 0 -> +100.00 -> -30.00 flow through the files."""
        service.create_account("savings")

        assert service.deposit(from_decimal("100.00")) == 10000
        assert service.withdraw(from_decimal("30.00")) == 7000

        assert service.balance() == 7000
        assert service.history() == (
            Transaction(timestamp=T0, income=10000, expense=0, balance=10000),
            Transaction(timestamp=T0 + 60, income=0, expense=3000, balance=7000),
        )

    def test_state_survives_new_service(self, service, workspace):
        service.create_account("savings", start_balance=500)
        service.deposit(250)

        fresh = LedgerService(workspace, clock=FixedClock(T0))
        assert fresh.balance() == 750
        assert len(fresh.history()) == 1

    def test_named_account_overrides_active(self, service):
        service.create_account("savings")
        service.create_account("checking", activate=False)

        service.deposit(100, account="checking")

        assert service.balance("checking") == 100
        assert service.balance() == 0

    def test_no_active_account(self, service):
        with pytest.raises(NoActiveAccountError):
            service.deposit(100)

    def test_unknown_account(self, service):
        with pytest.raises(NotFoundError):
            service.deposit(100, account="nobody")

    @pytest.mark.parametrize("operation", ["deposit", "withdraw"])
    def test_negative_amount_changes_nothing(self, service, workspace, operation):
        service.create_account("savings", start_balance=1000)
        path = workspace.account_path("savings")
        before = path.read_text(encoding="utf-8")

        with pytest.raises(InvalidAmount):
            getattr(service, operation)(-5)

        assert path.read_text(encoding="utf-8") == before
        assert service.balance() == 1000
        assert service.history() == ()

    def test_overdraft(self, service):
        service.create_account("savings")
        assert service.withdraw(2500) == -2500

    def test_summary(self, service):
        service.create_account("savings", start_balance=1000)
        service.deposit(500)
        service.withdraw(200)

        assert service.summary() == AccountSummary(
            name="savings",
            balance=1300,
            start_balance=1000,
            total_income=500,
            total_expense=200,
            transaction_count=2,
        )

    def test_format_amount_uses_currency_symbol(self, workspace):
        service = LedgerService(workspace, currency_symbol="€")
        assert service.format_amount(123450) == "€1,234.50"
        assert service.format_amount(-5, width=8) == "  -€0.05"

    def test_format_amount_defaults_to_dollars(self, service):
        assert service.format_amount(7000) == "$70.00"

    def test_use_and_delete(self, service, workspace):
        service.create_account("savings")
        service.create_account("checking")
        assert workspace.active_account == "checking"

        service.use("savings")
        assert workspace.active_account == "savings"

        service.delete_account("savings")
        assert service.list_accounts() == ["checking"]
        assert workspace.active_account is None

    def test_corrupt_account_file(self, service, workspace):
        service.create_account("savings")
        workspace.account_path("savings").write_text("not json", encoding="utf-8")

        with pytest.raises(ParseError):
            service.deposit(100)


class TestLedgerAudit:
    """Tests that ledger flows leave an audit trail."""

    def test_changes_are_audited(self, service, audit_storage):
        service.create_account("savings")
        service.deposit(100)
        service.withdraw(300)

        assert {
            AuditEventType.ACCOUNT_CREATED,
            AuditEventType.ACTIVE_ACCOUNT_CHANGED,
            AuditEventType.ACCOUNT_LOADED,
            AuditEventType.ACCOUNT_SAVED,
            AuditEventType.DEPOSIT_RECORDED,
            AuditEventType.WITHDRAWAL_RECORDED,
        } <= event_types(audit_storage)

    def test_rejected_amount_is_audited(self, service, audit_storage):
        service.create_account("savings")
        with pytest.raises(InvalidAmount):
            service.withdraw(-1)

        rejected = [
            e for e in audit_storage.get_recent_events()
            if e.event_type == AuditEventType.AMOUNT_REJECTED
        ]
        assert len(rejected) == 1
        assert rejected[0].account == "savings"
        assert rejected[0].details["operation"] == "withdraw"

    def test_load_failure_is_audited(self, service, workspace, audit_storage):
        service.create_account("savings")
        workspace.account_path("savings").write_text("{}", encoding="utf-8")

        with pytest.raises(ParseError):
            service.balance()

        errors = [
            e for e in audit_storage.get_recent_events()
            if e.event_type == AuditEventType.STORAGE_ERROR
        ]
        assert errors[0].details["operation"] == "load"
        assert errors[0].details["error_type"] == "ParseError"

    def test_service_works_without_audit_logger(self, workspace):
        service = LedgerService(workspace, clock=FixedClock(T0))
        service.create_account("savings")
        assert service.deposit(100) == 100


class TestAuditLogger:
    """Tests for the audit logger itself."""

    def test_log_without_storage(self):
        logger = AuditLogger()
        assert logger.log(AuditEventBuilder.account_created("savings", 0)) is True

    def test_log_to_storage(self, audit_storage):
        logger = AuditLogger(audit_storage)
        assert logger.log(AuditEventBuilder.account_deleted("savings")) is True
        assert len(audit_storage.get_recent_events()) == 1

    def test_storage_failure_does_not_raise(self):
        logger = AuditLogger(FailingAuditStorage())
        assert logger.log(AuditEventBuilder.account_created("savings", 0)) is False

    def test_unexpected_storage_error_does_not_raise(self):
        logger = AuditLogger(BrokenAuditStorage())
        assert logger.log(AuditEventBuilder.account_created("savings", 0)) is False

    def test_ledger_survives_unexpected_audit_error(self, workspace):
        service = LedgerService(
            workspace,
            clock=FixedClock(T0),
            audit_logger=AuditLogger(BrokenAuditStorage()),
        )
        service.create_account("savings")
        assert service.deposit(250) == 250
        assert service.balance() == 250

    def test_console_logging(self):
        configure_logging(LoggingSettings(level="DEBUG", json_output=False))
        try:
            assert AuditLogger().log(AuditEventBuilder.account_loaded("savings", "x", 0)) is True
        finally:
            structlog.reset_defaults()

    def test_ledger_keeps_working_when_audit_fails(self, workspace):
        service = LedgerService(
            workspace,
            clock=FixedClock(T0),
            audit_logger=AuditLogger(FailingAuditStorage()),
        )
        service.create_account("savings")
        assert service.deposit(100) == 100


class TestSettings:
    """Tests for configuration loading."""

    def test_defaults(self, monkeypatch):
        for var in ("LEDGER_WORKSPACE_DIR", "LEDGER_CURRENCY_SYMBOL", "LEDGER_AUDIT_LOG_ENABLED"):
            monkeypatch.delenv(var, raising=False)
        settings = LedgerSettings()
        assert settings.workspace_dir == Path.home() / ".little-ledger"
        assert settings.currency_symbol == "$"
        assert settings.audit_log_path == settings.workspace_dir / "audit.jsonl"

    def test_environment_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("LEDGER_WORKSPACE_DIR", str(tmp_path))
        monkeypatch.setenv("LEDGER_CURRENCY_SYMBOL", "€")
        settings = LedgerSettings()
        assert settings.workspace_dir == tmp_path
        assert settings.currency_symbol == "€"

    def test_workspace_dir_expands_home(self):
        settings = LedgerSettings(workspace_dir="~/books")
        assert settings.workspace_dir == Path.home() / "books"

    def test_log_level_normalized(self):
        assert LoggingSettings(level="debug").level == "DEBUG"

    def test_bad_log_level(self):
        with pytest.raises(ValidationError):
            LoggingSettings(level="loud")

    def test_validate_all_settings(self, monkeypatch):
        monkeypatch.setenv("LEDGER_LOG_LEVEL", "loud")
        get_settings.cache_clear()

        results = validate_all_settings()

        assert results["ledger"] is True
        assert results["logging"] is False
        assert "logging_error" in results

    def test_create_ledger_service(self, tmp_path):
        settings = LedgerSettings(workspace_dir=tmp_path / "books")
        service = create_ledger_service(settings, clock=FixedClock(T0))

        service.create_account("savings")
        service.deposit(100)

        assert service.workspace.is_initialized() is True
        assert settings.audit_log_path.is_file()

    def test_create_ledger_service_uses_currency_symbol(self, tmp_path):
        settings = LedgerSettings(workspace_dir=tmp_path / "books", currency_symbol="£")
        service = create_ledger_service(settings, clock=FixedClock(T0))
        assert service.format_amount(1999) == "£19.99"

    def test_create_ledger_service_without_audit_file(self, tmp_path):
        settings = LedgerSettings(workspace_dir=tmp_path / "books", audit_log_enabled=False)
        service = create_ledger_service(settings, clock=FixedClock(T0))

        service.create_account("savings")

        assert not settings.audit_log_path.exists()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
