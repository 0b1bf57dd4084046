"""
Configuration Management for Little Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here and handed to the
workspace explicitly. Nothing in the ledger reads the current working
directory or other process-wide state.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LedgerSettings(BaseSettings):
    """Where accounts live and how amounts are shown."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    workspace_dir: Path = Field(
        default=Path("~/.little-ledger"),
        validate_default=True,
        description="Directory holding config.json and the accounts folder"
    )
    currency_symbol: str = Field(
        default="$",
        min_length=1,
        max_length=4,
        description="Symbol used when formatting amounts"
    )
    audit_log_enabled: bool = Field(
        default=True,
        description="Append audit events to a file in the workspace"
    )
    audit_log_filename: str = Field(
        default="audit.jsonl",
        description="Audit log file name, relative to the workspace"
    )

    @field_validator('workspace_dir')
    @classmethod
    def expand_workspace_dir(cls, v: Path) -> Path:
        """Expand ~ so the path does not depend on the shell."""
        return v.expanduser()

    @property
    def audit_log_path(self) -> Path:
        return self.workspace_dir / self.audit_log_filename


class LoggingSettings(BaseSettings):
    """Structured logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    level: str = Field(
        default="INFO",
        description="Minimum log level"
    )
    json_output: bool = Field(
        default=True,
        description="Render log lines as JSON (console format otherwise)"
    )

    @field_validator('level')
    @classmethod
    def validate_level(cls, v: str) -> str:
        v = v.upper()
        if v not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return v


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def ledger(self) -> LedgerSettings:
        return LedgerSettings()

    @property
    def logging(self) -> LoggingSettings:
        return LoggingSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus
    {setting_name}_error entries for the failures.
    """
    results = {}

    settings = get_settings()

    for name in ("ledger", "logging"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
