"""
Discrepancy Analyzer

Finds WHERE the Physical and Logical views started to disagree. It replays
the log one transaction at a time (same ordering rules as the replay
engine) and compares the two totals after each step.
"""

from typing import Iterable, Optional

from wallet_ledger.models.reports import TransactionWithBalances
from wallet_ledger.models.transaction import Transaction
from wallet_ledger.models.wallet import Wallet
from wallet_ledger.reconciliation.detector import (
    BalanceDiscrepancyDetector,
    total_logical_from_balances,
    total_physical_from_balances,
)
from wallet_ledger.reconstruction.replay import (
    apply_transaction,
    dated_transactions_until,
)


class DiscrepancyAnalyzer:
    """
    Step-by-step reconciliation over the transaction log.

    Undated transactions are skipped, exactly as in reconstruction.
    """

    def __init__(self, detector: Optional[BalanceDiscrepancyDetector] = None):
        self._detector = detector or BalanceDiscrepancyDetector()

    def find_first_discrepancy_transaction(
        self,
        transactions: Iterable[Transaction],
        wallets: Iterable[Wallet],
    ) -> Optional[str]:
        """
        ID of the first transaction after which the totals diverge.

        Returns None if the ledger never goes out of balance.
        """
        for step in self._replay(transactions, wallets):
            if step.is_first_discrepancy:
                return step.transaction.id
        return None

    def calculate_running_balances(
        self,
        transactions: Iterable[Transaction],
        wallets: Iterable[Wallet],
    ) -> list[TransactionWithBalances]:
        """
        Physical and Logical totals after every transaction, newest first.

        Only the first transaction that breaks the balance is flagged.
        """
        steps = list(self._replay(transactions, wallets))
        steps.reverse()
        return steps

    def _replay(
        self,
        transactions: Iterable[Transaction],
        wallets: Iterable[Wallet],
    ) -> Iterable[TransactionWithBalances]:
        wallets = tuple(wallets)
        balances: dict[str, float] = {}
        found = False

        for transaction in dated_transactions_until(transactions):
            if not apply_transaction(balances, transaction):
                continue

            physical_total = total_physical_from_balances(wallets, balances)
            logical_total = total_logical_from_balances(wallets, balances)

            is_first = not found and self._detector.has_discrepancy(
                physical_total, logical_total
            )
            found = found or is_first

            yield TransactionWithBalances(
                transaction=transaction,
                physical_balance_after=physical_total,
                logical_balance_after=logical_total,
                is_first_discrepancy=is_first,
            )
