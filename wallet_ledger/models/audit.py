"""
Audit Models for Wallet Ledger

Every report the ledger builds leaves a trail:
1. Which records were skipped during ingestion, and why
2. What cutoff the balances were reconstructed at
3. Whether the Physical and Logical views agreed

DESIGN DECISION: A discrepancy is NOT an error. It is the intended output of
reconciliation, so it is recorded as a WARNING event, never raised.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Ingestion
    TRANSACTION_SKIPPED = "transaction_skipped"
    INGESTION_COMPLETED = "ingestion_completed"

    # Reconstruction
    BALANCES_RECONSTRUCTED = "balances_reconstructed"

    # Reconciliation
    LEDGER_BALANCED = "ledger_balanced"
    DISCREPANCY_DETECTED = "discrepancy_detected"

    # Ledger source
    SOURCE_READ_FAILED = "source_read_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    One entry of the audit trail.

    Everything needed to render the event travels with it.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'transaction', 'ledger')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., all events in one report)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Flat, JSON-safe view of the event for structlog.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Factory for the events the ledger emits.

    Usage:
        event = AuditEventBuilder.transaction_skipped("tx-1", issues, correlation_id)
        event = AuditEventBuilder.discrepancy_detected(1000.0, 950.0, 50.0, 0.01, correlation_id)
    """

    @staticmethod
    def transaction_skipped(
        transaction_id: Optional[str],
        issues: list[dict],
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_SKIPPED,
            severity=AuditSeverity.WARNING,
            entity_type="transaction",
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description=f"Transaction skipped: {transaction_id or 'unknown id'}",
            details={
                "issues": issues,
            },
        )

    @staticmethod
    def ingestion_completed(
        accepted: int,
        skipped: int,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INGESTION_COMPLETED,
            entity_type="ledger",
            correlation_id=correlation_id,
            description=f"Ingested {accepted} transactions ({skipped} skipped)",
            details={
                "accepted": accepted,
                "skipped": skipped,
            },
        )

    @staticmethod
    def balances_reconstructed(
        cutoff: Optional[datetime],
        wallet_count: int,
        replayed: int,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        as_of = cutoff.isoformat() if cutoff else "all time"
        return AuditEvent(
            event_type=AuditEventType.BALANCES_RECONSTRUCTED,
            entity_type="ledger",
            correlation_id=correlation_id,
            description=f"Reconstructed {wallet_count} wallet balances as of {as_of}",
            details={
                "cutoff": cutoff.isoformat() if cutoff else None,
                "wallet_count": wallet_count,
                "transactions_replayed": replayed,
            },
        )

    @staticmethod
    def ledger_balanced(
        physical_total: float,
        logical_total: float,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_BALANCED,
            entity_type="ledger",
            correlation_id=correlation_id,
            description="Physical and Logical totals agree",
            details={
                "physical_total": physical_total,
                "logical_total": logical_total,
            },
        )

    @staticmethod
    def discrepancy_detected(
        physical_total: float,
        logical_total: float,
        amount: float,
        tolerance: float,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DISCREPANCY_DETECTED,
            severity=AuditSeverity.WARNING,
            entity_type="ledger",
            correlation_id=correlation_id,
            description=f"Physical and Logical totals differ by {amount:+.2f}",
            details={
                "physical_total": physical_total,
                "logical_total": logical_total,
                "discrepancy_amount": amount,
                "tolerance": tolerance,
            },
        )

    @staticmethod
    def source_read_failed(
        source: str,
        error_message: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SOURCE_READ_FAILED,
            severity=AuditSeverity.ERROR,
            description=f"Could not read ledger source: {source}",
            error_message=error_message,
            details={
                "source": source,
            },
            correlation_id=correlation_id,
        )
