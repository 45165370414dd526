"""Physical vs Logical reconciliation package."""

from wallet_ledger.reconciliation.analyzer import DiscrepancyAnalyzer
from wallet_ledger.reconciliation.detector import (
    BalanceDiscrepancyDetector,
    InvalidToleranceError,
    discrepancy_amount,
    has_discrepancy,
    total_logical,
    total_logical_from_balances,
    total_physical,
    total_physical_from_balances,
)

__all__ = [
    "BalanceDiscrepancyDetector",
    "DiscrepancyAnalyzer",
    "InvalidToleranceError",
    "discrepancy_amount",
    "has_discrepancy",
    "total_logical",
    "total_logical_from_balances",
    "total_physical",
    "total_physical_from_balances",
]
