"""
Configuration Management for Wallet Ledger

Settings come from environment variables (and an optional .env file),
parsed and validated by pydantic-settings.

DESIGN DECISION: The engine itself takes no configuration. Only two things
are configurable, and both have safe defaults:
- The reconciliation tolerance (LEDGER_DISCREPANCY_TOLERANCE)
- How logs are rendered (LOG_LEVEL, LOG_JSON)
A tolerance passed explicitly by the caller always wins over the setting.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_DISCREPANCY_TOLERANCE = 0.01

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class ReconciliationSettings(BaseSettings):
    """Physical vs Logical reconciliation configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        env_file=".env",
        extra="ignore"
    )

    discrepancy_tolerance: float = Field(
        default=DEFAULT_DISCREPANCY_TOLERANCE,
        ge=0.0,
        description="Largest |physical - logical| difference treated as rounding drift"
    )


class AppSettings(BaseSettings):
    """Logging configuration shared by every component."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    log_level: str = Field(
        default="INFO",
        description="Minimum level for structured logs"
    )
    log_json: bool = Field(
        default=True,
        description="Render logs as JSON (otherwise console format)"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Unknown log level: {v}")
        return level


class Settings(BaseSettings):
    """
    Entry point to every settings group.

    Groups are built on access, so a broken group only fails the code
    that actually reads it.
    """

    model_config = SettingsConfigDict(extra="ignore")

    @property
    def reconciliation(self) -> ReconciliationSettings:
        return ReconciliationSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Process-wide settings.

    Cached; tests that change the environment call
    get_settings.cache_clear() afterwards.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Load every settings group once and report which ones are valid.

    Failed groups also get a "<group>_error" entry with the message.
    """
    results = {}
    settings = get_settings()

    for group in ("reconciliation", "app"):
        try:
            getattr(settings, group)
            results[group] = True
        except Exception as e:
            results[group] = False
            results[f"{group}_error"] = str(e)

    return results
