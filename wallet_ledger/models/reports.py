"""
Result Models for Wallet Ledger

Everything the ledger computes is returned as one of these models.
They are freshly built on every call and never mutated afterwards.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from wallet_ledger.models.transaction import Transaction
from wallet_ledger.models.wallet import PhysicalForm


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single problem found while ingesting a record."""

    record_index: int = Field(
        ...,
        ge=0,
        description="Position of the record in the input"
    )
    transaction_id: Optional[str] = Field(
        default=None,
        description="ID of the record, if it had one"
    )
    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'unknown_type', 'invalid_value')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        default="error",
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )


class IngestionResult(BaseModel):
    """
    Outcome of turning raw records into typed transactions.

    Skipped records never stop ingestion; they are listed in `issues`.
    """

    transactions: list[Transaction] = Field(default_factory=list)
    issues: list[ValidationIssue] = Field(default_factory=list)
    skipped_count: int = Field(default=0, ge=0)

    @property
    def accepted_count(self) -> int:
        return len(self.transactions)

    @property
    def has_skipped(self) -> bool:
        return self.skipped_count > 0


# =============================================================================
# RECONCILIATION MODELS
# =============================================================================

class DiscrepancyReport(BaseModel):
    """
    Result of comparing Physical and Logical totals.

    `amount` is signed: positive means Physical exceeds Logical.
    """
    model_config = ConfigDict(frozen=True)

    physical_total: float
    logical_total: float
    amount: float
    tolerance: float = Field(..., ge=0)
    has_discrepancy: bool


class TransactionWithBalances(BaseModel):
    """A transaction with the Physical/Logical totals right after it."""
    model_config = ConfigDict(frozen=True)

    transaction: Transaction
    physical_balance_after: float
    logical_balance_after: float
    is_first_discrepancy: bool = False


# =============================================================================
# SUMMARY MODELS
# =============================================================================

class PeriodSummary(BaseModel):
    """Activity of one wallet over a set of transactions."""
    model_config = ConfigDict(frozen=True)

    income: float = Field(..., description="Income plus incoming transfers")
    expenses: float = Field(..., description="Expenses plus outgoing transfers")
    net_change: float
    transaction_count: int = Field(..., ge=0)
    transfers_in: float
    transfers_out: float
    income_transaction_count: int = Field(..., ge=0)
    expense_transaction_count: int = Field(..., ge=0)
    incoming_transfer_count: int = Field(..., ge=0)
    outgoing_transfer_count: int = Field(..., ge=0)


class DailySummary(BaseModel):
    """Compact summary used for day headers."""
    model_config = ConfigDict(frozen=True)

    transaction_count: int = Field(..., ge=0)
    net_amount: float


# =============================================================================
# REPORT MODEL
# =============================================================================

class LedgerReport(BaseModel):
    """
    Everything a report screen needs for one cutoff.

    Maps omit zero entries; consumers must treat a missing key as zero
    and must not rely on key order.
    """

    generated_at: datetime
    cutoff: Optional[datetime] = None
    wallet_filter: str = Field(
        default="All Wallets",
        description="Display text of the wallet filter used"
    )

    balances: dict[str, float] = Field(default_factory=dict)
    physical_balances: dict[str, float] = Field(default_factory=dict)
    logical_balances: dict[str, float] = Field(default_factory=dict)
    composition: dict[PhysicalForm, float] = Field(default_factory=dict)

    discrepancy: DiscrepancyReport
    skipped_records: list[ValidationIssue] = Field(default_factory=list)
