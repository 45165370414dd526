"""
Ledger Reconciliation Detector

The fundamental business rule: the sum of Physical wallet balances must
equal the sum of Logical wallet balances. Nothing enforces this when money
is recorded, so it can only be checked after the fact, here.

DESIGN DECISION: The tolerance only absorbs floating-point drift from long
additive folds. It is always explicit: a module-level default (0.01), a
per-detector value, and a per-call argument, in increasing priority.
A negative tolerance is a bug in the calling code and fails loudly.
"""

import math
from typing import Iterable, Mapping, Optional

from wallet_ledger.config import DEFAULT_DISCREPANCY_TOLERANCE, get_settings
from wallet_ledger.models.reports import DiscrepancyReport
from wallet_ledger.models.wallet import Wallet, WalletType


class InvalidToleranceError(ValueError):
    """Tolerance must be a finite, non-negative number."""
    pass


def _validate_tolerance(tolerance: float) -> float:
    if math.isnan(tolerance) or tolerance < 0:
        raise InvalidToleranceError(
            f"Tolerance must be non-negative, got {tolerance!r}"
        )
    return tolerance


def _live_total(wallets: Iterable[Wallet], wallet_type: WalletType) -> float:
    return math.fsum(w.balance for w in wallets if w.wallet_type == wallet_type)


def _reconstructed_total(
    wallets: Iterable[Wallet],
    balances: Mapping[str, float],
    wallet_type: WalletType,
) -> float:
    ids = {w.id for w in wallets if w.wallet_type == wallet_type}
    return math.fsum(balances.get(wallet_id, 0.0) for wallet_id in ids)


def total_physical(wallets: Iterable[Wallet]) -> float:
    """Sum of the live balances of all Physical wallets."""
    return _live_total(wallets, WalletType.PHYSICAL)


def total_logical(wallets: Iterable[Wallet]) -> float:
    """Sum of the live balances of all Logical wallets."""
    return _live_total(wallets, WalletType.LOGICAL)


def total_physical_from_balances(
    wallets: Iterable[Wallet],
    balances: Mapping[str, float],
) -> float:
    """Sum of reconstructed balances of Physical wallets (missing ids count as 0)."""
    return _reconstructed_total(wallets, balances, WalletType.PHYSICAL)


def total_logical_from_balances(
    wallets: Iterable[Wallet],
    balances: Mapping[str, float],
) -> float:
    """Sum of reconstructed balances of Logical wallets (missing ids count as 0)."""
    return _reconstructed_total(wallets, balances, WalletType.LOGICAL)


def discrepancy_amount(physical_total: float, logical_total: float) -> float:
    """Positive if Physical exceeds Logical, negative if Logical exceeds Physical."""
    return physical_total - logical_total


def has_discrepancy(
    physical_total: float,
    logical_total: float,
    tolerance: float = DEFAULT_DISCREPANCY_TOLERANCE,
) -> bool:
    """
    True if the totals differ by more than `tolerance`.

    Raises:
        InvalidToleranceError: If tolerance is negative or NaN
    """
    _validate_tolerance(tolerance)
    return abs(discrepancy_amount(physical_total, logical_total)) > tolerance


class BalanceDiscrepancyDetector:
    """
    Reconciliation with a bound tolerance.

    If no tolerance is given, the configured
    `LEDGER_DISCREPANCY_TOLERANCE` is used.
    """

    def __init__(self, tolerance: Optional[float] = None):
        if tolerance is None:
            tolerance = get_settings().reconciliation.discrepancy_tolerance
        self._tolerance = _validate_tolerance(tolerance)

    @property
    def tolerance(self) -> float:
        return self._tolerance

    def has_discrepancy(
        self,
        physical_total: float,
        logical_total: float,
        tolerance: Optional[float] = None,
    ) -> bool:
        return has_discrepancy(
            physical_total,
            logical_total,
            self._tolerance if tolerance is None else tolerance,
        )

    def check(
        self,
        physical_total: float,
        logical_total: float,
        tolerance: Optional[float] = None,
    ) -> DiscrepancyReport:
        """Compare two totals and describe the result."""
        tolerance = self._tolerance if tolerance is None else tolerance
        return DiscrepancyReport(
            physical_total=physical_total,
            logical_total=logical_total,
            amount=discrepancy_amount(physical_total, logical_total),
            tolerance=tolerance,
            has_discrepancy=has_discrepancy(physical_total, logical_total, tolerance),
        )

    def check_wallets(self, wallets: Iterable[Wallet]) -> DiscrepancyReport:
        """Reconcile the live balances held on the wallets."""
        wallets = tuple(wallets)
        return self.check(total_physical(wallets), total_logical(wallets))

    def check_balances(
        self,
        wallets: Iterable[Wallet],
        balances: Mapping[str, float],
    ) -> DiscrepancyReport:
        """Reconcile a reconstructed balance map."""
        wallets = tuple(wallets)
        return self.check(
            total_physical_from_balances(wallets, balances),
            total_logical_from_balances(wallets, balances),
        )
