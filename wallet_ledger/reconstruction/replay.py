"""
Chronological Replay Engine

DESIGN DECISION: Historical balances are never stored. They are rebuilt on
demand by replaying the transaction log from zero:

1. Drop undated transactions (they cannot be placed on the timeline)
2. Drop transactions after the cutoff (the cutoff itself is included)
3. Stable-sort by timestamp, so ties keep their input order
4. Start every wallet at 0
5. Fold: Income credits, Expense debits, Transfer moves
6. Keep only wallets whose final balance is non-zero

The replay is deterministic for a fixed input, never mutates the caller's
collections, and never raises because of one bad record.
"""

from datetime import datetime, timezone
from typing import Iterable, Mapping, Optional

import structlog

from wallet_ledger.models.transaction import (
    ExpenseTransaction,
    IncomeTransaction,
    Transaction,
    TransferTransaction,
)
from wallet_ledger.models.wallet import ALL_WALLETS, Wallet, WalletFilter


logger = structlog.get_logger(__name__)


def as_utc(moment: Optional[datetime]) -> Optional[datetime]:
    """Naive datetimes are taken as UTC, matching the transaction models."""
    if moment is not None and moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def dated_transactions_until(
    transactions: Iterable[Transaction],
    cutoff: Optional[datetime] = None,
) -> list[Transaction]:
    """
    Transactions to replay for `cutoff`, oldest first.

    Anything without a usable datetime timestamp is dropped here.
    Returns a new list; ties in timestamp keep their input order.
    """
    cutoff = as_utc(cutoff)

    relevant = []
    for transaction in transactions:
        raw = getattr(transaction, "timestamp", None)
        if not isinstance(raw, datetime):
            continue
        timestamp = as_utc(raw)
        if cutoff is not None and timestamp > cutoff:
            continue
        relevant.append((timestamp, transaction))

    relevant.sort(key=lambda pair: pair[0])
    return [transaction for _, transaction in relevant]


def apply_transaction(balances: dict[str, float], transaction: Transaction) -> bool:
    """
    Fold one transaction into a running balance map, in place.

    Returns False (and changes nothing) for an unrecognized transaction.
    """
    if isinstance(transaction, IncomeTransaction):
        for wallet_id in transaction.affected_wallet_ids:
            balances[wallet_id] = balances.get(wallet_id, 0.0) + transaction.amount
    elif isinstance(transaction, ExpenseTransaction):
        for wallet_id in transaction.affected_wallet_ids:
            balances[wallet_id] = balances.get(wallet_id, 0.0) - transaction.amount
    elif isinstance(transaction, TransferTransaction):
        source = transaction.source_wallet_id
        destination = transaction.destination_wallet_id
        balances[source] = balances.get(source, 0.0) - transaction.amount
        balances[destination] = balances.get(destination, 0.0) + transaction.amount
    else:
        logger.debug(
            "unrecognized_transaction_ignored",
            transaction_id=getattr(transaction, "id", None),
            transaction_type=type(transaction).__name__,
        )
        return False

    return True


def replay_balances(
    wallets: Iterable[Wallet],
    transactions: Iterable[Transaction],
    cutoff: Optional[datetime] = None,
) -> tuple[dict[str, float], int]:
    """
    One full replay of the log as of `cutoff`.

    Returns:
        (wallet id -> non-zero balance, number of transactions folded)
    """
    balances = {wallet.id: 0.0 for wallet in wallets}

    replayed = 0
    for transaction in dated_transactions_until(transactions, cutoff):
        if apply_transaction(balances, transaction):
            replayed += 1

    logger.debug(
        "balances_replayed",
        cutoff=cutoff.isoformat() if cutoff else None,
        transactions_replayed=replayed,
    )

    non_zero = {
        wallet_id: balance
        for wallet_id, balance in balances.items()
        if balance != 0.0
    }
    return non_zero, replayed


def filter_balances(
    balances: Mapping[str, float],
    wallet_filter: WalletFilter = ALL_WALLETS,
) -> dict[str, float]:
    """Copy of `balances` restricted to the wallets the filter selects."""
    return {
        wallet_id: balance
        for wallet_id, balance in balances.items()
        if wallet_filter.matches(wallet_id)
    }


def reconstruct_balances(
    wallets: Iterable[Wallet],
    transactions: Iterable[Transaction],
    cutoff: Optional[datetime] = None,
    wallet_filter: WalletFilter = ALL_WALLETS,
) -> dict[str, float]:
    """
    Reconstruct every wallet's balance as of `cutoff`.

    Args:
        wallets: The wallet universe (only used to seed balances at 0)
        transactions: The transaction log, in any order
        cutoff: Inclusive upper bound; None replays all dated history
        wallet_filter: Restrict the result to one wallet

    Returns:
        wallet id -> balance, omitting wallets whose balance is exactly 0.
        Ids of wallets missing from `wallets` (e.g. deleted ones) are kept.
    """
    balances, _ = replay_balances(wallets, transactions, cutoff)
    return filter_balances(balances, wallet_filter)
