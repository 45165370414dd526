"""
Tests for Physical/Logical extraction and portfolio composition.
"""

import pytest
from datetime import datetime, timezone

from wallet_ledger.models import (
    ExpenseTransaction,
    IncomeTransaction,
    PhysicalForm,
    SpecificWallet,
    TransferTransaction,
    Wallet,
    WalletType,
)
from wallet_ledger.reconstruction import (
    balances_by_name,
    composition_from_balances,
    reconstruct_logical_wallet_balances,
    reconstruct_physical_wallet_balances,
    reconstruct_portfolio_composition,
)


T0 = datetime(2025, 10, 1, tzinfo=timezone.utc)
T1 = datetime(2025, 10, 2, tzinfo=timezone.utc)
CUTOFF = datetime(2025, 10, 31, tzinfo=timezone.utc)


@pytest.fixture
def wallets():
    return [
        Wallet(id="bank", name="Bank", physical_form=PhysicalForm.FIAT_CURRENCY),
        Wallet(id="gold", name="Gold Bar", physical_form=PhysicalForm.PRECIOUS_METALS),
        Wallet(id="btc", name="Cold Wallet", physical_form=PhysicalForm.CRYPTOCURRENCY),
        Wallet(id="food", name="Food Budget", wallet_type=WalletType.LOGICAL),
        Wallet(id="fun", name="Fun Budget", wallet_type=WalletType.LOGICAL),
    ]


@pytest.fixture
def transactions():
    return [
        IncomeTransaction(id="t1", amount=1000.0, affected_wallet_ids=["bank", "food"], timestamp=T0),
        IncomeTransaction(id="t2", amount=300.0, affected_wallet_ids=["gold", "fun"], timestamp=T0),
        ExpenseTransaction(id="t3", amount=100.0, affected_wallet_ids=["btc", "fun"], timestamp=T1),
        ExpenseTransaction(id="t4", amount=250.0, affected_wallet_ids=["bank", "food"], timestamp=T1),
    ]


class TestPhysicalLogicalExtraction:
    """Tests for the name-keyed extractors."""

    def test_physical_balances_by_name(self, wallets, transactions):
        """Test only Physical wallets are returned, keyed by name."""
        result = reconstruct_physical_wallet_balances(wallets, transactions, CUTOFF)
        assert result == {"Bank": 750.0, "Gold Bar": 300.0, "Cold Wallet": -100.0}

    def test_logical_balances_by_name(self, wallets, transactions):
        """Test only Logical wallets are returned, keyed by name."""
        result = reconstruct_logical_wallet_balances(wallets, transactions, CUTOFF)
        assert result == {"Food Budget": 750.0, "Fun Budget": 200.0}

    def test_logical_negative_balance_preserved(self, wallets):
        """Test an over-spent budget keeps its negative balance."""
        transactions = [
            ExpenseTransaction(id="t1", amount=40.0, affected_wallet_ids=["fun"], timestamp=T0),
        ]
        result = reconstruct_logical_wallet_balances(wallets, transactions, CUTOFF)
        assert result == {"Fun Budget": -40.0}

    def test_type_restriction(self, wallets, transactions):
        """Test extractors never emit a wallet of the other type."""
        physical_names = {w.name for w in wallets if w.is_physical}
        logical_names = {w.name for w in wallets if w.is_logical}
        assert set(reconstruct_physical_wallet_balances(wallets, transactions)) <= physical_names
        assert set(reconstruct_logical_wallet_balances(wallets, transactions)) <= logical_names

    def test_unknown_wallet_ids_not_projected(self, wallets):
        """Test ids missing from the universe have no name, so are not shown."""
        transactions = [
            IncomeTransaction(id="t1", amount=5.0, affected_wallet_ids=["ghost"], timestamp=T0),
        ]
        assert reconstruct_physical_wallet_balances(wallets, transactions) == {}

    def test_name_collision_last_wins(self):
        """Test two wallets with one name collapse to the later one."""
        wallets = [
            Wallet(id="a", name="Cash"),
            Wallet(id="b", name="Cash"),
        ]
        transactions = [
            IncomeTransaction(id="t1", amount=1.0, affected_wallet_ids=["a"], timestamp=T0),
            IncomeTransaction(id="t2", amount=2.0, affected_wallet_ids=["b"], timestamp=T0),
        ]
        assert reconstruct_physical_wallet_balances(wallets, transactions) == {"Cash": 2.0}

    def test_wallet_filter(self, wallets, transactions):
        """Test the wallet filter narrows the extractor."""
        result = reconstruct_physical_wallet_balances(
            wallets,
            transactions,
            CUTOFF,
            SpecificWallet(wallet_id="gold", wallet_name="Gold Bar"),
        )
        assert result == {"Gold Bar": 300.0}


class TestPortfolioComposition:
    """Tests for grouping Physical balances by form."""

    def test_composition_groups_by_form(self, wallets, transactions):
        """Test sums per form, dropping the negative crypto group."""
        result = reconstruct_portfolio_composition(wallets, transactions, CUTOFF)
        assert result == {
            PhysicalForm.FIAT_CURRENCY: 750.0,
            PhysicalForm.PRECIOUS_METALS: 300.0,
        }

    def test_composition_sums_within_group(self):
        """Test several wallets of one form are summed, net of negatives."""
        wallets = [
            Wallet(id="a", name="Bank A"),
            Wallet(id="b", name="Bank B"),
        ]
        transactions = [
            IncomeTransaction(id="t1", amount=100.0, affected_wallet_ids=["a"], timestamp=T0),
            ExpenseTransaction(id="t2", amount=30.0, affected_wallet_ids=["b"], timestamp=T0),
        ]
        result = reconstruct_portfolio_composition(wallets, transactions)
        assert result == {PhysicalForm.FIAT_CURRENCY: 70.0}

    def test_composition_omits_zero_group(self):
        """Test a group netting to zero is omitted."""
        wallets = [Wallet(id="a", name="A"), Wallet(id="b", name="B")]
        transactions = [
            IncomeTransaction(id="t1", amount=50.0, affected_wallet_ids=["a"], timestamp=T0),
            ExpenseTransaction(id="t2", amount=50.0, affected_wallet_ids=["b"], timestamp=T0),
        ]
        assert reconstruct_portfolio_composition(wallets, transactions) == {}

    def test_composition_ignores_logical_wallets(self, wallets):
        """Test Logical balances never enter the composition."""
        transactions = [
            IncomeTransaction(id="t1", amount=10.0, affected_wallet_ids=["food"], timestamp=T0),
        ]
        assert reconstruct_portfolio_composition(wallets, transactions) == {}

    def test_transfer_between_forms(self, wallets):
        """Test buying gold from the bank moves value between groups."""
        transactions = [
            IncomeTransaction(id="t1", amount=500.0, affected_wallet_ids=["bank"], timestamp=T0),
            TransferTransaction(
                id="t2",
                amount=200.0,
                source_wallet_id="bank",
                destination_wallet_id="gold",
                timestamp=T1,
            ),
        ]
        result = reconstruct_portfolio_composition(wallets, transactions, CUTOFF)
        assert result == {
            PhysicalForm.FIAT_CURRENCY: 300.0,
            PhysicalForm.PRECIOUS_METALS: 200.0,
        }


class TestProjectionsFromMap:
    """Tests for projecting an already reconstructed map."""

    def test_by_name_from_map(self, wallets):
        """Test re-keying a map without replaying."""
        balances = {"bank": 10.0, "fun": -5.0, "ghost": 1.0}
        assert balances_by_name(wallets, balances, WalletType.PHYSICAL) == {"Bank": 10.0}
        assert balances_by_name(wallets, balances, WalletType.LOGICAL) == {"Fun Budget": -5.0}

    def test_composition_from_map(self, wallets):
        """Test grouping a map by form, dropping non-positive groups."""
        balances = {"bank": 10.0, "gold": 4.0, "btc": -2.0, "food": 99.0}
        assert composition_from_balances(wallets, balances) == {
            PhysicalForm.FIAT_CURRENCY: 10.0,
            PhysicalForm.PRECIOUS_METALS: 4.0,
        }



if __name__ == "__main__":
    pytest.main([__file__, "-v"])
