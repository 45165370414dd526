"""
Audit Logger

DESIGN DECISION: The reconstruction engine never fails because of one bad
historical record. Instead, anomalies are reported here:
1. Records skipped at ingestion
2. The cutoff each report was built for
3. Discrepancies between the Physical and Logical views

The audit logger:
- Is synchronous, like the engine it serves
- Gracefully handles failures (a broken sink never breaks a report)
- Supports correlation IDs to trace all events of one report
"""

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

import structlog

from wallet_ledger.config import AppSettings, get_settings
from wallet_ledger.models.audit import AuditEvent, AuditEventBuilder
from wallet_ledger.models.reports import DiscrepancyReport, ValidationIssue
from wallet_ledger.services.storage import AuditSinkInterface


def configure_logging(app_settings: Optional[AppSettings] = None) -> None:
    """
    Configure structlog for local logging.

    Called once at import with the current settings; call again after
    changing LOG_LEVEL / LOG_JSON to apply them.
    """
    app_settings = app_settings or get_settings().app

    renderer = (
        structlog.processors.JSONRenderer()
        if app_settings.log_json
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    logging.getLogger("wallet_ledger").setLevel(app_settings.log_level)


configure_logging()


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An optional audit sink (for persistence and user visibility)
    """

    def __init__(
        self,
        sink: Optional[AuditSinkInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            sink: Backend that persists events.
                  If None, only logs locally.
        """
        self._sink = sink
        self._logger = structlog.get_logger("wallet_ledger.audit")

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to the sink if available.

        Returns True if the sink write succeeded (or no sink configured).
        """
        log_dict = event.to_log_dict()

        if event.severity.value in ("error", "critical"):
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        elif event.severity.value == "debug":
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._sink is not None:
            try:
                return self._sink.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_sink_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def log_skipped_records(
        self,
        issues: list[ValidationIssue],
        correlation_id: UUID,
    ) -> None:
        """Log one event per skipped record, grouping its issues."""
        by_record: dict[int, list[ValidationIssue]] = {}
        for issue in issues:
            by_record.setdefault(issue.record_index, []).append(issue)

        for record_issues in by_record.values():
            event = AuditEventBuilder.transaction_skipped(
                transaction_id=record_issues[0].transaction_id,
                issues=[
                    {"field": i.field, "type": i.issue_type, "message": i.message}
                    for i in record_issues
                ],
                correlation_id=correlation_id,
            )
            self.log(event)

    def log_ingestion_completed(
        self,
        accepted: int,
        skipped: int,
        correlation_id: UUID,
    ) -> None:
        """Log ingestion summary."""
        event = AuditEventBuilder.ingestion_completed(
            accepted=accepted,
            skipped=skipped,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_balances_reconstructed(
        self,
        cutoff: Optional[datetime],
        wallet_count: int,
        replayed: int,
        correlation_id: UUID,
    ) -> None:
        """Log reconstruction completion."""
        event = AuditEventBuilder.balances_reconstructed(
            cutoff=cutoff,
            wallet_count=wallet_count,
            replayed=replayed,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_reconciliation(
        self,
        report: DiscrepancyReport,
        correlation_id: UUID,
    ) -> None:
        """Log the outcome of a Physical vs Logical check."""
        if report.has_discrepancy:
            event = AuditEventBuilder.discrepancy_detected(
                physical_total=report.physical_total,
                logical_total=report.logical_total,
                amount=report.amount,
                tolerance=report.tolerance,
                correlation_id=correlation_id,
            )
        else:
            event = AuditEventBuilder.ledger_balanced(
                physical_total=report.physical_total,
                logical_total=report.logical_total,
                correlation_id=correlation_id,
            )
        self.log(event)

    def log_source_error(
        self,
        source: str,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        """Log a failure to read the ledger source."""
        event = AuditEventBuilder.source_read_failed(
            source=source,
            error_message=error_message,
            correlation_id=correlation_id,
        )
        self.log(event)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new report and pass it through
    all subsequent operations.
    """
    return uuid4()
