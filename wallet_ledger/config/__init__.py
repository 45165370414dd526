"""Configuration package."""

from wallet_ledger.config.settings import (
    DEFAULT_DISCREPANCY_TOLERANCE,
    AppSettings,
    ReconciliationSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "DEFAULT_DISCREPANCY_TOLERANCE",
    "AppSettings",
    "ReconciliationSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
