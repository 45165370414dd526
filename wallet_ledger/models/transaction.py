"""
Transaction Models for Wallet Ledger

A transaction is a closed tagged union over three kinds of event:
- Income: credits every wallet in its affected-wallet set
- Expense: debits every wallet in its affected-wallet set
- Transfer: moves money from one source wallet to one destination wallet

DESIGN DECISION: Each variant only carries the fields that are legal for it.
An Income can never have a destination, and a Transfer can never have an
affected-wallet set. Pydantic picks the variant from the `type` tag.

Legacy records that name a single `wallet_id` instead of an affected-wallet
set are normalized HERE, when the model is built. The replay fold never
sees the legacy shape.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    field_validator,
    model_validator,
)


class TransactionType(str, Enum):
    """Kinds of transaction. The sign of the amount is implied by the kind."""
    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"


class _TransactionBase(BaseModel):
    """Fields shared by every transaction variant."""
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Unique transaction ID"
    )
    amount: float = Field(
        ...,
        ge=0,
        allow_inf_nan=False,
        description="Non-negative magnitude; direction comes from the type"
    )
    timestamp: Optional[datetime] = Field(
        default=None,
        description="When the transaction happened (None for legacy/corrupt data)"
    )
    title: str = Field(default="", max_length=500)
    tags: tuple[str, ...] = Field(default_factory=tuple)

    @field_validator('timestamp')
    @classmethod
    def assume_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Naive timestamps are taken as UTC so every timestamp is comparable."""
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @property
    def is_dated(self) -> bool:
        return self.timestamp is not None


class _AffectedWalletsTransaction(_TransactionBase):
    """Base for Income and Expense: one event, several wallets."""

    affected_wallet_ids: tuple[str, ...] = Field(
        ...,
        min_length=1,
        description="Wallets credited/debited together by this event"
    )

    @model_validator(mode='before')
    @classmethod
    def normalize_legacy_wallet_id(cls, data: Any) -> Any:
        """Turn a legacy single `wallet_id` into a one-element affected set."""
        if isinstance(data, dict) and not data.get("affected_wallet_ids"):
            wallet_id = data.get("wallet_id")
            if wallet_id:
                data = {**data, "affected_wallet_ids": (wallet_id,)}
        return data

    @field_validator('affected_wallet_ids')
    @classmethod
    def drop_blank_and_duplicate_ids(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        seen: dict[str, None] = {}
        for wallet_id in v:
            wallet_id = wallet_id.strip()
            if wallet_id:
                seen.setdefault(wallet_id, None)
        if not seen:
            raise ValueError("At least one affected wallet is required")
        return tuple(seen)

    @property
    def wallet_ids(self) -> tuple[str, ...]:
        return self.affected_wallet_ids


class IncomeTransaction(_AffectedWalletsTransaction):
    type: Literal[TransactionType.INCOME] = TransactionType.INCOME


class ExpenseTransaction(_AffectedWalletsTransaction):
    type: Literal[TransactionType.EXPENSE] = TransactionType.EXPENSE


class TransferTransaction(_TransactionBase):
    """Moves `amount` from the source wallet to the destination wallet."""

    type: Literal[TransactionType.TRANSFER] = TransactionType.TRANSFER
    source_wallet_id: str = Field(..., min_length=1)
    destination_wallet_id: str = Field(..., min_length=1)

    @model_validator(mode='after')
    def validate_distinct_wallets(self) -> 'TransferTransaction':
        if self.source_wallet_id == self.destination_wallet_id:
            raise ValueError("Transfer source and destination must differ")
        return self

    @property
    def wallet_ids(self) -> tuple[str, ...]:
        return (self.source_wallet_id, self.destination_wallet_id)


Transaction = Annotated[
    Union[IncomeTransaction, ExpenseTransaction, TransferTransaction],
    Field(discriminator="type"),
]

transaction_adapter: TypeAdapter[Transaction] = TypeAdapter(Transaction)


def parse_transaction(data: Any) -> Transaction:
    """
    Build the right transaction variant from a mapping.

    Raises pydantic.ValidationError if the record is malformed.
    """
    return transaction_adapter.validate_python(data)
