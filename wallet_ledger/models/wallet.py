"""
Wallet Models for Wallet Ledger

Every unit of money is tracked twice:
1. Physical wallets say WHERE the money sits (bank, cash, gold, crypto...)
2. Logical wallets say WHY it is held (budget, goal, emergency fund...)

DESIGN DECISION: The live `balance` on a Wallet belongs to the surrounding
application. The reconstruction engine never reads or writes it; computed
balances are returned as plain maps so the two can never be confused.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class WalletType(str, Enum):
    """
    The two parallel accounting views.

    A wallet's type is fixed at creation and never changes.
    """
    PHYSICAL = "Physical"
    LOGICAL = "Logical"


class PhysicalForm(str, Enum):
    """
    Asset class of a Physical wallet.

    Only meaningful when the wallet type is PHYSICAL. Used to group
    reconstructed balances into a portfolio composition.
    """
    FIAT_CURRENCY = "fiat_currency"
    CRYPTOCURRENCY = "cryptocurrency"
    PRECIOUS_METALS = "precious_metals"
    STOCKS = "stocks"
    ETFS = "etfs"
    BONDS = "bonds"
    MUTUAL_FUNDS = "mutual_funds"
    REAL_ESTATE = "real_estate"
    COMMODITIES = "commodities"
    CASH_EQUIVALENT = "cash_equivalent"
    OTHER = "other"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @classmethod
    def default_for_currency(cls, currency: str) -> "PhysicalForm":
        """Pick a sensible form for a currency code (used for legacy wallets)."""
        code = currency.strip().upper()
        if code in _CRYPTO_CODES:
            return cls.CRYPTOCURRENCY
        if code in _METAL_CODES:
            return cls.PRECIOUS_METALS
        return cls.FIAT_CURRENCY


_DISPLAY_NAMES = {
    PhysicalForm.FIAT_CURRENCY: "Fiat Currency",
    PhysicalForm.CRYPTOCURRENCY: "Cryptocurrency",
    PhysicalForm.PRECIOUS_METALS: "Precious Metals",
    PhysicalForm.STOCKS: "Stocks",
    PhysicalForm.ETFS: "ETFs",
    PhysicalForm.BONDS: "Bonds",
    PhysicalForm.MUTUAL_FUNDS: "Mutual Funds",
    PhysicalForm.REAL_ESTATE: "Real Estate",
    PhysicalForm.COMMODITIES: "Commodities",
    PhysicalForm.CASH_EQUIVALENT: "Cash Equivalent",
    PhysicalForm.OTHER: "Other",
}

_CRYPTO_CODES = frozenset({"BTC", "ETH", "ADA", "DOT", "SOL", "MATIC"})
_METAL_CODES = frozenset({"GOLD", "SILVER", "PLATINUM", "PALLADIUM"})

# Groups for UI organization
INVESTMENT_FORMS = frozenset({
    PhysicalForm.STOCKS,
    PhysicalForm.ETFS,
    PhysicalForm.BONDS,
    PhysicalForm.MUTUAL_FUNDS,
})
ALTERNATIVE_INVESTMENTS = frozenset({
    PhysicalForm.PRECIOUS_METALS,
    PhysicalForm.REAL_ESTATE,
    PhysicalForm.COMMODITIES,
})
CASH_FORMS = frozenset({PhysicalForm.FIAT_CURRENCY, PhysicalForm.CASH_EQUIVALENT})
DIGITAL_ASSETS = frozenset({PhysicalForm.CRYPTOCURRENCY})


# =============================================================================
# WALLET MODEL
# =============================================================================

class Wallet(BaseModel):
    """
    A wallet as supplied by the persistence layer.

    Frozen: the engine treats every wallet as a read-only snapshot.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Opaque wallet identifier"
    )
    name: str = Field(
        default="",
        max_length=200,
        description="Display name (not unique)"
    )
    wallet_type: WalletType = Field(
        default=WalletType.PHYSICAL,
        description="Physical or Logical (immutable after creation)"
    )
    physical_form: PhysicalForm = Field(
        default=PhysicalForm.FIAT_CURRENCY,
        description="Asset class; only meaningful for Physical wallets"
    )
    balance: float = Field(
        default=0.0,
        description="Live balance maintained by the application"
    )
    created_at: Optional[datetime] = None

    @field_validator('created_at')
    @classmethod
    def assume_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @property
    def is_physical(self) -> bool:
        return self.wallet_type == WalletType.PHYSICAL

    @property
    def is_logical(self) -> bool:
        return self.wallet_type == WalletType.LOGICAL


# =============================================================================
# WALLET FILTER
# =============================================================================

class AllWallets(BaseModel):
    """No wallet restriction (the default)."""
    model_config = ConfigDict(frozen=True)

    @property
    def display_text(self) -> str:
        return "All Wallets"

    def matches(self, wallet_id: str) -> bool:
        return True


class SpecificWallet(BaseModel):
    """Restrict results to a single wallet."""
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    wallet_id: str = Field(..., min_length=1)
    wallet_name: str = Field(..., min_length=1)

    @property
    def display_text(self) -> str:
        return self.wallet_name

    def matches(self, wallet_id: str) -> bool:
        return wallet_id == self.wallet_id


WalletFilter = AllWallets | SpecificWallet

ALL_WALLETS = AllWallets()
