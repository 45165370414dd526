"""
Per-wallet Transaction Summaries

Classifies transactions relative to ONE wallet:
- Income/Expense count for a wallet when it is in the affected-wallet set
- A Transfer is incoming for its destination and outgoing for its source
"""

from enum import Enum
from typing import Iterable, Optional

from wallet_ledger.models.reports import DailySummary, PeriodSummary
from wallet_ledger.models.transaction import (
    ExpenseTransaction,
    IncomeTransaction,
    Transaction,
    TransferTransaction,
)


class TransferDirection(str, Enum):
    """Direction of a transfer relative to a specific wallet."""
    INCOMING = "incoming"
    OUTGOING = "outgoing"


def transfer_direction(
    transaction: Transaction,
    wallet_id: str,
) -> Optional[TransferDirection]:
    """None if the transaction is not a transfer touching `wallet_id`."""
    if not isinstance(transaction, TransferTransaction):
        return None
    if transaction.source_wallet_id == wallet_id:
        return TransferDirection.OUTGOING
    if transaction.destination_wallet_id == wallet_id:
        return TransferDirection.INCOMING
    return None


def effective_amount(transaction: Transaction, wallet_id: str) -> float:
    """
    Signed effect of `transaction` on `wallet_id`.

    Positive when the wallet gains money, negative when it loses it,
    0.0 when the wallet is not involved.
    """
    if isinstance(transaction, IncomeTransaction):
        return transaction.amount if wallet_id in transaction.affected_wallet_ids else 0.0
    if isinstance(transaction, ExpenseTransaction):
        return -transaction.amount if wallet_id in transaction.affected_wallet_ids else 0.0

    direction = transfer_direction(transaction, wallet_id)
    if direction == TransferDirection.INCOMING:
        return transaction.amount
    if direction == TransferDirection.OUTGOING:
        return -transaction.amount
    return 0.0


def summarize_period(
    transactions: Iterable[Transaction],
    wallet_id: str,
) -> PeriodSummary:
    """Income, expenses and transfer breakdown of one wallet."""
    transactions = tuple(transactions)

    income = expenses = transfers_in = transfers_out = 0.0
    income_count = expense_count = incoming_count = outgoing_count = 0

    for transaction in transactions:
        if isinstance(transaction, IncomeTransaction):
            if wallet_id in transaction.affected_wallet_ids:
                income += transaction.amount
                income_count += 1
        elif isinstance(transaction, ExpenseTransaction):
            if wallet_id in transaction.affected_wallet_ids:
                expenses += transaction.amount
                expense_count += 1
        else:
            direction = transfer_direction(transaction, wallet_id)
            if direction == TransferDirection.INCOMING:
                transfers_in += transaction.amount
                incoming_count += 1
            elif direction == TransferDirection.OUTGOING:
                transfers_out += transaction.amount
                outgoing_count += 1

    income += transfers_in
    expenses += transfers_out

    return PeriodSummary(
        income=income,
        expenses=expenses,
        net_change=income - expenses,
        transaction_count=len(transactions),
        transfers_in=transfers_in,
        transfers_out=transfers_out,
        income_transaction_count=income_count,
        expense_transaction_count=expense_count,
        incoming_transfer_count=incoming_count,
        outgoing_transfer_count=outgoing_count,
    )


def summarize_day(
    transactions: Iterable[Transaction],
    wallet_id: str,
) -> DailySummary:
    transactions = tuple(transactions)
    return DailySummary(
        transaction_count=len(transactions),
        net_amount=sum(effective_amount(t, wallet_id) for t in transactions),
    )
