"""
Main Orchestrator for Wallet Ledger

This module ties together all the components and defines the end-to-end
flow for a report:
    source snapshot → ingest → reconstruct → project → reconcile

DESIGN DECISION: The orchestrator enforces the boundaries:
- The ledger source is only ever READ, once per report
- Bad records are skipped and audited, never fatal
- A discrepancy is a result to show the user, not an exception

This is the "glue" that keeps every computation pure while still leaving
an audit trail.
"""

from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Optional
from uuid import UUID

from wallet_ledger.audit import AuditLogger, create_correlation_id
from wallet_ledger.models.reports import DiscrepancyReport, IngestionResult, LedgerReport
from wallet_ledger.models.wallet import ALL_WALLETS, Wallet, WalletFilter, WalletType
from wallet_ledger.reconciliation import BalanceDiscrepancyDetector, DiscrepancyAnalyzer
from wallet_ledger.reconstruction import (
    balances_by_name,
    composition_from_balances,
    filter_balances,
    replay_balances,
)
from wallet_ledger.services.storage import (
    InMemoryAuditSink,
    InMemoryLedgerSource,
    LedgerSourceInterface,
    StorageError,
)
from wallet_ledger.validation import TransactionIngestor


class LedgerReportFlow:
    """
    Orchestrates report building over a ledger source.

    Flow:
    1. Snapshot → read wallets and raw records from the source
    2. Ingest → typed transactions, bad records skipped
    3. Reconstruct → one replay of the log as of the cutoff
    4. Project → Physical/Logical by name, composition by form
    5. Reconcile → Physical vs Logical totals
    """

    def __init__(
        self,
        source: LedgerSourceInterface,
        detector: Optional[BalanceDiscrepancyDetector] = None,
        ingestor: Optional[TransactionIngestor] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._source = source
        self._detector = detector or BalanceDiscrepancyDetector()
        self._ingestor = ingestor or TransactionIngestor()
        self._analyzer = DiscrepancyAnalyzer(self._detector)
        self._audit_logger = audit_logger

    def _read_wallets(self, correlation_id: UUID) -> list[Wallet]:
        try:
            return self._source.list_wallets()
        except StorageError as e:
            self._audit_source_error(e, correlation_id)
            raise

    def _read_records(self, correlation_id: UUID) -> list[Mapping[str, Any]]:
        try:
            return self._source.list_transaction_records()
        except StorageError as e:
            self._audit_source_error(e, correlation_id)
            raise

    def _audit_source_error(self, error: StorageError, correlation_id: UUID) -> None:
        if self._audit_logger:
            self._audit_logger.log_source_error(
                source=type(self._source).__name__,
                error_message=str(error),
                correlation_id=correlation_id,
            )

    def load_snapshot(
        self,
        correlation_id: Optional[UUID] = None,
    ) -> tuple[list[Wallet], IngestionResult]:
        """
        Read and ingest one snapshot of the ledger.

        Raises:
            StorageError: If the source cannot be read (after auditing it)
        """
        correlation_id = correlation_id or create_correlation_id()

        wallets = self._read_wallets(correlation_id)
        records = self._read_records(correlation_id)

        ingestion = self._ingestor.ingest(records)

        if self._audit_logger:
            if ingestion.has_skipped:
                self._audit_logger.log_skipped_records(
                    ingestion.issues, correlation_id=correlation_id
                )
            self._audit_logger.log_ingestion_completed(
                accepted=ingestion.accepted_count,
                skipped=ingestion.skipped_count,
                correlation_id=correlation_id,
            )

        return wallets, ingestion

    def build_report(
        self,
        cutoff: Optional[datetime] = None,
        wallet_filter: WalletFilter = ALL_WALLETS,
        correlation_id: Optional[UUID] = None,
    ) -> LedgerReport:
        """
        Build every balance view for `cutoff` and reconcile them.

        The log is replayed once; every view is projected from that map.
        Reconciliation always covers the whole ledger; the wallet filter
        only narrows the balance views.
        """
        correlation_id = correlation_id or create_correlation_id()

        wallets, ingestion = self.load_snapshot(correlation_id)

        all_balances, replayed = replay_balances(wallets, ingestion.transactions, cutoff)
        balances = filter_balances(all_balances, wallet_filter)
        discrepancy = self._detector.check_balances(wallets, all_balances)

        report = LedgerReport(
            generated_at=datetime.now(timezone.utc),
            cutoff=cutoff,
            wallet_filter=wallet_filter.display_text,
            balances=balances,
            physical_balances=balances_by_name(wallets, balances, WalletType.PHYSICAL),
            logical_balances=balances_by_name(wallets, balances, WalletType.LOGICAL),
            composition=composition_from_balances(wallets, balances),
            discrepancy=discrepancy,
            skipped_records=ingestion.issues,
        )

        if self._audit_logger:
            self._audit_logger.log_balances_reconstructed(
                cutoff=cutoff,
                wallet_count=len(report.balances),
                replayed=replayed,
                correlation_id=correlation_id,
            )
            self._audit_logger.log_reconciliation(discrepancy, correlation_id)

        return report

    def check_live_discrepancy(
        self,
        correlation_id: Optional[UUID] = None,
    ) -> DiscrepancyReport:
        """
        Reconcile the live wallet balances (no replay).

        Raises:
            StorageError: If the source cannot be read (after auditing it)
        """
        correlation_id = correlation_id or create_correlation_id()

        wallets = self._read_wallets(correlation_id)
        report = self._detector.check_wallets(wallets)

        if self._audit_logger:
            self._audit_logger.log_reconciliation(report, correlation_id)

        return report

    def find_first_discrepancy(
        self,
        correlation_id: Optional[UUID] = None,
    ) -> Optional[str]:
        """ID of the transaction that first put the ledger out of balance."""
        wallets, ingestion = self.load_snapshot(correlation_id)
        return self._analyzer.find_first_discrepancy_transaction(
            ingestion.transactions, wallets
        )


def create_report_flow(
    wallets: Iterable[Wallet],
    transaction_records: Iterable[Mapping[str, Any]],
    tolerance: Optional[float] = None,
    audit: bool = True,
) -> tuple[LedgerReportFlow, Optional[InMemoryAuditSink]]:
    """
    Factory function to build a report flow over in-memory data.

    Args:
        wallets: Wallet snapshot
        transaction_records: Raw transaction records
        tolerance: Discrepancy tolerance (None = configured default)
        audit: Whether to keep audit events in an in-memory sink

    Returns:
        (report_flow, audit_sink_or_None)
    """
    source = InMemoryLedgerSource(wallets, transaction_records)
    sink = InMemoryAuditSink() if audit else None

    flow = LedgerReportFlow(
        source=source,
        detector=BalanceDiscrepancyDetector(tolerance),
        audit_logger=AuditLogger(sink) if sink is not None else None,
    )
    return flow, sink
