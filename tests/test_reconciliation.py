"""
Tests for Physical vs Logical reconciliation and discrepancy analysis.
"""

import pytest
from datetime import datetime, timezone

from pydantic import ValidationError

from wallet_ledger.models import (
    ExpenseTransaction,
    IncomeTransaction,
    TransferTransaction,
    Wallet,
    WalletType,
)
from wallet_ledger.reconciliation import (
    BalanceDiscrepancyDetector,
    DiscrepancyAnalyzer,
    InvalidToleranceError,
    discrepancy_amount,
    has_discrepancy,
    total_logical,
    total_logical_from_balances,
    total_physical,
    total_physical_from_balances,
)
from wallet_ledger.reconstruction import reconstruct_balances


def day(n: int) -> datetime:
    return datetime(2025, 10, n, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def wallets():
    return [
        Wallet(id="p1", name="Bank", balance=600.0),
        Wallet(id="p2", name="Cash", balance=400.0),
        Wallet(id="l1", name="Rent", wallet_type=WalletType.LOGICAL, balance=700.0),
        Wallet(id="l2", name="Food", wallet_type=WalletType.LOGICAL, balance=250.0),
    ]


class TestHasDiscrepancy:
    """Tests for the tolerance comparison."""

    def test_difference_beyond_tolerance(self):
        """1000 vs 950 at 0.01 is a discrepancy of +50."""
        assert has_discrepancy(1000.0, 950.0, 0.01) is True
        assert discrepancy_amount(1000.0, 950.0) == 50.0

    def test_difference_within_tolerance(self):
        """1000 vs 1000.005 at 0.01 is not a discrepancy."""
        assert has_discrepancy(1000.0, 1000.005, 0.01) is False

    def test_default_tolerance(self):
        """Test the default tolerance is one cent."""
        assert has_discrepancy(10.0, 10.009) is False
        assert has_discrepancy(10.0, 10.02) is True

    def test_difference_equal_to_tolerance_is_balanced(self):
        """Test the comparison is strictly greater-than."""
        assert has_discrepancy(2.0, 1.5, 0.5) is False

    def test_symmetry(self):
        """Test swapping totals flips the sign, not the verdict."""
        assert discrepancy_amount(950.0, 1000.0) == -50.0
        assert has_discrepancy(950.0, 1000.0) == has_discrepancy(1000.0, 950.0)

    def test_zero_tolerance(self):
        """Test zero tolerance flags any difference."""
        assert has_discrepancy(1.0, 1.0, 0.0) is False
        assert has_discrepancy(1.0, 1.0 + 1e-12, 0.0) is True

    def test_negative_tolerance_raises(self):
        """Test a negative tolerance is rejected."""
        with pytest.raises(InvalidToleranceError):
            has_discrepancy(1.0, 1.0, -0.01)

    def test_nan_tolerance_raises(self):
        """Test a NaN tolerance is rejected."""
        with pytest.raises(InvalidToleranceError):
            has_discrepancy(1.0, 1.0, float("nan"))

    def test_invalid_tolerance_is_value_error(self):
        """Test callers can catch the error as ValueError."""
        assert issubclass(InvalidToleranceError, ValueError)


class TestTotals:
    """Tests for live and reconstructed totals."""

    def test_live_totals(self, wallets):
        """Test totals read the balance held on each wallet."""
        assert total_physical(wallets) == 1000.0
        assert total_logical(wallets) == 950.0

    def test_live_totals_accept_generators(self, wallets):
        """Test totals work on one-shot iterables."""
        assert total_physical(w for w in wallets) == 1000.0

    def test_reconstructed_totals(self, wallets):
        """Test totals over a reconstructed map, missing ids counting as zero."""
        balances = {"p1": 120.0, "l2": 80.0, "orphan": 999.0}
        assert total_physical_from_balances(wallets, balances) == 120.0
        assert total_logical_from_balances(wallets, balances) == 80.0

    def test_reconstructed_totals_count_each_wallet_once(self):
        """Test a duplicated wallet in the universe is not double counted."""
        bank = Wallet(id="p1", name="Bank")
        assert total_physical_from_balances([bank, bank], {"p1": 10.0}) == 10.0

    def test_float_drift_is_absorbed(self):
        """Test repeated 0.1 credits still reconcile against 1.0."""
        wallets = [
            Wallet(id="p", name="Bank"),
            Wallet(id="l", name="Goal", wallet_type=WalletType.LOGICAL),
        ]
        transactions = [
            IncomeTransaction(id=f"t{i}", amount=0.1, affected_wallet_ids=["p"], timestamp=day(1))
            for i in range(10)
        ]
        transactions.append(
            IncomeTransaction(id="goal", amount=1.0, affected_wallet_ids=["l"], timestamp=day(2))
        )
        balances = reconstruct_balances(wallets, transactions)
        physical = total_physical_from_balances(wallets, balances)
        logical = total_logical_from_balances(wallets, balances)
        assert has_discrepancy(physical, logical) is False


class TestBalanceDiscrepancyDetector:
    """Tests for the detector and its configured tolerance."""

    def test_check_wallets(self, wallets):
        """Test a live check reports the signed amount."""
        report = BalanceDiscrepancyDetector(0.01).check_wallets(wallets)
        assert report.physical_total == 1000.0
        assert report.logical_total == 950.0
        assert report.amount == 50.0
        assert report.has_discrepancy is True
        assert report.tolerance == 0.01

    def test_check_balances_balanced(self, wallets):
        """Test a reconstructed map that reconciles."""
        report = BalanceDiscrepancyDetector().check_balances(
            wallets, {"p1": 100.0, "l1": 60.0, "l2": 40.0}
        )
        assert report.has_discrepancy is False
        assert report.amount == 0.0

    def test_per_call_tolerance_wins(self):
        """Test the per-call tolerance overrides the detector's own."""
        detector = BalanceDiscrepancyDetector(0.01)
        assert detector.has_discrepancy(100.0, 99.0) is True
        assert detector.has_discrepancy(100.0, 99.0, tolerance=5.0) is False
        assert detector.check(100.0, 99.0, tolerance=5.0).tolerance == 5.0

    def test_negative_tolerance_rejected_at_construction(self):
        """Test a detector cannot be built with a negative tolerance."""
        with pytest.raises(InvalidToleranceError):
            BalanceDiscrepancyDetector(-1.0)

    def test_default_from_settings(self):
        """Test the detector falls back to the default tolerance."""
        assert BalanceDiscrepancyDetector().tolerance == 0.01

    def test_tolerance_from_environment(self, monkeypatch):
        """Test LEDGER_DISCREPANCY_TOLERANCE configures the detector."""
        monkeypatch.setenv("LEDGER_DISCREPANCY_TOLERANCE", "5")
        detector = BalanceDiscrepancyDetector()
        assert detector.tolerance == 5.0
        assert detector.has_discrepancy(100.0, 97.0) is False

    def test_negative_tolerance_in_environment_rejected(self, monkeypatch):
        """Test a negative configured tolerance fails validation."""
        monkeypatch.setenv("LEDGER_DISCREPANCY_TOLERANCE", "-1")
        with pytest.raises(ValidationError):
            BalanceDiscrepancyDetector()


class TestDiscrepancyAnalyzer:
    """Tests for locating the first out-of-balance transaction."""

    @pytest.fixture
    def ledger(self):
        wallets = [
            Wallet(id="p", name="Bank"),
            Wallet(id="l", name="Goal", wallet_type=WalletType.LOGICAL),
        ]
        transactions = [
            IncomeTransaction(id="t4", amount=10.0, affected_wallet_ids=["p"], timestamp=day(4)),
            IncomeTransaction(id="t1", amount=100.0, affected_wallet_ids=["p", "l"], timestamp=day(1)),
            IncomeTransaction(id="t2", amount=50.0, affected_wallet_ids=["p"], timestamp=day(2)),
            IncomeTransaction(id="t3", amount=50.0, affected_wallet_ids=["l"], timestamp=day(3)),
        ]
        return wallets, transactions

    def test_first_discrepancy(self, ledger):
        """Test the earliest breaking transaction is found by time, not input order."""
        wallets, transactions = ledger
        analyzer = DiscrepancyAnalyzer(BalanceDiscrepancyDetector(0.01))
        assert analyzer.find_first_discrepancy_transaction(transactions, wallets) == "t2"

    def test_balanced_ledger(self):
        """Test None when every step reconciles."""
        wallets = [
            Wallet(id="p", name="Bank"),
            Wallet(id="l", name="Goal", wallet_type=WalletType.LOGICAL),
        ]
        transactions = [
            IncomeTransaction(id="t1", amount=100.0, affected_wallet_ids=["p", "l"], timestamp=day(1)),
            ExpenseTransaction(id="t2", amount=30.0, affected_wallet_ids=["p", "l"], timestamp=day(2)),
        ]
        assert DiscrepancyAnalyzer().find_first_discrepancy_transaction(transactions, wallets) is None

    def test_undated_transactions_ignored(self):
        """Test undated transactions cannot be blamed."""
        wallets = [Wallet(id="p", name="Bank")]
        transactions = [
            IncomeTransaction(id="undated", amount=5.0, affected_wallet_ids=["p"]),
        ]
        assert DiscrepancyAnalyzer().find_first_discrepancy_transaction(transactions, wallets) is None

    def test_running_balances_newest_first(self, ledger):
        """Test running totals are listed newest first with one flag."""
        wallets, transactions = ledger
        steps = DiscrepancyAnalyzer().calculate_running_balances(transactions, wallets)

        assert [s.transaction.id for s in steps] == ["t4", "t3", "t2", "t1"]
        assert [s.physical_balance_after for s in steps] == [160.0, 150.0, 150.0, 100.0]
        assert [s.logical_balance_after for s in steps] == [150.0, 150.0, 100.0, 100.0]
        assert [s.is_first_discrepancy for s in steps] == [False, False, True, False]

    def test_internal_transfer_keeps_balance(self):
        """Test a Physical-to-Physical transfer never breaks the balance."""
        wallets = [
            Wallet(id="p1", name="Bank"),
            Wallet(id="p2", name="Cash"),
            Wallet(id="l", name="Goal", wallet_type=WalletType.LOGICAL),
        ]
        transactions = [
            IncomeTransaction(id="t1", amount=100.0, affected_wallet_ids=["p1", "l"], timestamp=day(1)),
            TransferTransaction(
                id="t2",
                amount=40.0,
                source_wallet_id="p1",
                destination_wallet_id="p2",
                timestamp=day(2),
            ),
        ]
        assert DiscrepancyAnalyzer().find_first_discrepancy_transaction(transactions, wallets) is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
