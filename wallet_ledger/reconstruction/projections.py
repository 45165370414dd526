"""
Balance Projections

Thin views over the replay engine's output, shaped for report screens:
- Physical wallet balances keyed by display name
- Logical wallet balances keyed by display name
- Physical balances grouped by asset class (portfolio composition)

Names are a display projection, not an identity: two wallets with the
same name collide and the later one (in wallet order) wins.
"""

from collections import defaultdict
from datetime import datetime
from typing import Iterable, Mapping, Optional

from wallet_ledger.models.transaction import Transaction
from wallet_ledger.models.wallet import (
    ALL_WALLETS,
    PhysicalForm,
    Wallet,
    WalletFilter,
    WalletType,
)
from wallet_ledger.reconstruction.replay import reconstruct_balances


def balances_by_name(
    wallets: Iterable[Wallet],
    balances: Mapping[str, float],
    wallet_type: WalletType,
) -> dict[str, float]:
    """Re-key an already reconstructed map by display name, for one wallet type."""
    by_name = {}
    for wallet in {w.id: w for w in wallets}.values():
        if wallet.wallet_type == wallet_type and wallet.id in balances:
            by_name[wallet.name] = balances[wallet.id]
    return by_name


def composition_from_balances(
    wallets: Iterable[Wallet],
    balances: Mapping[str, float],
) -> dict[PhysicalForm, float]:
    """Group an already reconstructed map by physical form, positive groups only."""
    composition: dict[PhysicalForm, float] = defaultdict(float)
    for wallet in {w.id: w for w in wallets}.values():
        if wallet.is_physical and wallet.id in balances:
            composition[wallet.physical_form] += balances[wallet.id]

    return {form: total for form, total in composition.items() if total > 0.0}


def _balances_by_name(
    wallets: Iterable[Wallet],
    transactions: Iterable[Transaction],
    cutoff: Optional[datetime],
    wallet_filter: WalletFilter,
    wallet_type: WalletType,
) -> dict[str, float]:
    wallets = tuple(wallets)
    balances = reconstruct_balances(wallets, transactions, cutoff, wallet_filter)
    return balances_by_name(wallets, balances, wallet_type)


def reconstruct_physical_wallet_balances(
    wallets: Iterable[Wallet],
    transactions: Iterable[Transaction],
    cutoff: Optional[datetime] = None,
    wallet_filter: WalletFilter = ALL_WALLETS,
) -> dict[str, float]:
    """Physical wallet name -> reconstructed balance (zero balances omitted)."""
    return _balances_by_name(
        wallets, transactions, cutoff, wallet_filter, WalletType.PHYSICAL
    )


def reconstruct_logical_wallet_balances(
    wallets: Iterable[Wallet],
    transactions: Iterable[Transaction],
    cutoff: Optional[datetime] = None,
    wallet_filter: WalletFilter = ALL_WALLETS,
) -> dict[str, float]:
    """
    Logical wallet name -> reconstructed balance.

    Negative balances (an over-spent budget) are kept as they are.
    """
    return _balances_by_name(
        wallets, transactions, cutoff, wallet_filter, WalletType.LOGICAL
    )


def reconstruct_portfolio_composition(
    wallets: Iterable[Wallet],
    transactions: Iterable[Transaction],
    cutoff: Optional[datetime] = None,
    wallet_filter: WalletFilter = ALL_WALLETS,
) -> dict[PhysicalForm, float]:
    """
    Physical form -> summed Physical balance as of `cutoff`.

    Groups whose sum is zero or negative are left out; a composition chart
    can only show positive shares.
    """
    wallets = tuple(wallets)
    balances = reconstruct_balances(wallets, transactions, cutoff, wallet_filter)
    return composition_from_balances(wallets, balances)
