"""
Configuration Management for SupportBank

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Parsers, the validator and the exporter read their knobs from these
classes so that a deployment can be tuned from the environment or a
.env file without touching code.
"""

from datetime import date
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LedgerSettings(BaseSettings):
    """Import, validation and export behaviour."""

    model_config = SettingsConfigDict(
        env_prefix="SUPPORTBANK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    file_encoding: str = Field(
        default="utf-8",
        description="Encoding used to read import files and write exports"
    )
    csv_date_format: str = Field(
        default="%d/%m/%Y",
        description="strptime format of the CSV Date column"
    )
    report_date_format: str = Field(
        default="%d/%m/%Y",
        description="strftime format used in text reports"
    )
    xml_epoch: date = Field(
        default=date(1900, 1, 1),
        description="Day zero for the XML Date attribute (integer day offset)"
    )
    allow_self_payments: bool = Field(
        default=False,
        description="Accept records whose From and To accounts are the same"
    )
    export_indent: int = Field(
        default=2,
        ge=0,
        le=8,
        description="Indentation of the JSON export"
    )


class LoggingSettings(BaseSettings):
    """Logging and audit trail configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SUPPORTBANK_LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    level: str = Field(
        default="DEBUG",
        description="Minimum level written to the log file"
    )
    file: Optional[str] = Field(
        default="logs/debug.log",
        description="Path of the debug log. Empty disables file logging."
    )
    audit_file: Optional[str] = Field(
        default=None,
        description="Optional JSON-lines file that keeps the audit trail"
    )
    json_output: bool = Field(
        default=True,
        description="Render log lines as JSON (otherwise key=value)"
    )

    @field_validator('level')
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Only accept standard logging level names."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Unsupported log level: {v}. Allowed: {sorted(allowed)}")
        return v.upper()


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )


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

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus a
    "<name>_error" entry for every section that failed.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in ("ledger", "logging", "app"):
        try:
            _ = getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
