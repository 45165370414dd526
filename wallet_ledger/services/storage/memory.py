"""
In-Memory Storage

Snapshot-based implementations of the storage interfaces. Used by tests
and by callers that already hold their wallets and records in memory.
"""

from typing import Any, Iterable, Mapping
from uuid import UUID

from wallet_ledger.models.audit import AuditEvent
from wallet_ledger.models.wallet import Wallet
from wallet_ledger.services.storage.interface import (
    AuditSinkInterface,
    LedgerSourceInterface,
)


class InMemoryLedgerSource(LedgerSourceInterface):
    """
    Ledger source over in-memory collections.

    The inputs are copied on construction, so later changes to the
    caller's lists do not leak into reports built from this source.
    """

    def __init__(
        self,
        wallets: Iterable[Wallet] = (),
        transaction_records: Iterable[Mapping[str, Any]] = (),
    ):
        self._wallets = tuple(wallets)
        self._records = tuple(dict(record) for record in transaction_records)

    def list_wallets(self) -> list[Wallet]:
        return list(self._wallets)

    def list_transaction_records(self) -> list[Mapping[str, Any]]:
        return [dict(record) for record in self._records]


class InMemoryAuditSink(AuditSinkInterface):
    """Append-only audit sink kept in a list."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    @property
    def events(self) -> list[AuditEvent]:
        return list(self._events)

    def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        return [e for e in self._events if e.correlation_id == correlation_id]
