"""Services package."""

from wallet_ledger.services.storage import (
    AuditSinkInterface,
    ConnectionError,
    InMemoryAuditSink,
    InMemoryLedgerSource,
    LedgerSourceInterface,
    StorageError,
)

__all__ = [
    # Storage services
    "AuditSinkInterface",
    "ConnectionError",
    "InMemoryAuditSink",
    "InMemoryLedgerSource",
    "LedgerSourceInterface",
    "StorageError",
]
