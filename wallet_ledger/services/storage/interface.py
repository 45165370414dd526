"""
Abstract Storage Interface

DESIGN DECISION: Wallet Ledger never owns persistence. It READS a snapshot
of wallets and transaction records from whatever layer owns them, and it
never writes back. Defining the seam as an interface allows us to:
1. Plug in any database or sync layer
2. Use in-memory sources for testing
3. Keep replay logic decoupled from storage

The interface is intentionally tiny: two reads for the ledger, one append
for the audit trail.
"""

from abc import ABC, abstractmethod
from typing import Any, Mapping
from uuid import UUID

from wallet_ledger.models.audit import AuditEvent
from wallet_ledger.models.wallet import Wallet


class LedgerSourceInterface(ABC):
    """
    Abstract read-only source of wallets and transaction records.

    Implementations must return fresh collections on every call; callers
    treat them as an immutable snapshot for the duration of one report.
    """

    @abstractmethod
    def list_wallets(self) -> list[Wallet]:
        """
        Return every wallet known to the source.

        Raises:
            StorageError: If the source cannot be read
        """
        pass

    @abstractmethod
    def list_transaction_records(self) -> list[Mapping[str, Any]]:
        """
        Return every transaction record, in storage order, as raw mappings.

        Records are NOT validated here. Legacy shapes (single `wallet_id`,
        signed amounts, missing dates) are expected and handled at ingestion.

        Raises:
            StorageError: If the source cannot be read
        """
        pass


class AuditSinkInterface(ABC):
    """
    Abstract interface for audit event persistence.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events for a correlation ID (e.g., one report).

        Returns:
            List of related events in chronological order
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
