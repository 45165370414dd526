"""Historical balance reconstruction package."""

from wallet_ledger.reconstruction.projections import (
    balances_by_name,
    composition_from_balances,
    reconstruct_logical_wallet_balances,
    reconstruct_physical_wallet_balances,
    reconstruct_portfolio_composition,
)
from wallet_ledger.reconstruction.replay import (
    apply_transaction,
    dated_transactions_until,
    filter_balances,
    reconstruct_balances,
    replay_balances,
)
from wallet_ledger.reconstruction.summary import (
    TransferDirection,
    effective_amount,
    summarize_day,
    summarize_period,
    transfer_direction,
)

__all__ = [
    "TransferDirection",
    "apply_transaction",
    "balances_by_name",
    "composition_from_balances",
    "dated_transactions_until",
    "effective_amount",
    "filter_balances",
    "reconstruct_balances",
    "reconstruct_logical_wallet_balances",
    "reconstruct_physical_wallet_balances",
    "reconstruct_portfolio_composition",
    "replay_balances",
    "summarize_day",
    "summarize_period",
    "transfer_direction",
]
