"""
Storage Services Package

Provides the read-only ledger source interface, the audit sink interface,
and in-memory implementations of both.
"""

from wallet_ledger.services.storage.interface import (
    AuditSinkInterface,
    ConnectionError,
    LedgerSourceInterface,
    StorageError,
)
from wallet_ledger.services.storage.memory import (
    InMemoryAuditSink,
    InMemoryLedgerSource,
)

__all__ = [
    # Interfaces
    "AuditSinkInterface",
    "LedgerSourceInterface",
    # Exceptions
    "ConnectionError",
    "StorageError",
    # In-memory implementation
    "InMemoryAuditSink",
    "InMemoryLedgerSource",
]
