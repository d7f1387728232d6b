"""Domain model entities for ledgerkit.

These are pure data classes representing business concepts, independent of
database schema. Relations loaded by the store (an account's currency, a
product's category, a transaction's details) are carried as optional nested
entities; they are ``None`` when the store did not load them.
"""

import enum
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional


class AccountType(str, enum.Enum):
    """Whether an account belongs to the tenant or to someone they trade with."""

    OWN = "OWN"
    COUNTERPARTY = "COUNTERPARTY"


@dataclass(frozen=True)
class Tenant:
    """Owning principal; all other entities except currencies are scoped by it."""

    id: int
    name: str
    created_at: datetime


@dataclass(frozen=True)
class Currency:
    """Currency with its minor-unit scale."""

    id: int
    name: str
    code: str
    symbol: str
    fractional_part_name: str
    part_fraction: int

    def to_display(self, amount: int) -> Decimal:
        """Convert an amount in minor units into display units."""
        return Decimal(amount) / Decimal(self.part_fraction)


@dataclass(frozen=True)
class Account:
    """Own or counterparty account domain entity."""

    id: int
    tenant_id: int
    name: str
    type: AccountType
    currency_id: int
    description: Optional[str]
    currency: Optional[Currency] = None


@dataclass(frozen=True)
class MeasureUnit:
    """Unit a product is counted or sized in (kg, piece, hour...)."""

    id: int
    tenant_id: int
    name: str


@dataclass(frozen=True)
class Category:
    """Category domain entity with hierarchical structure."""

    id: int
    tenant_id: int
    name: str
    parent_id: Optional[int]


@dataclass(frozen=True)
class Product:
    """Product or service domain entity."""

    id: int
    tenant_id: int
    name: str
    category_id: Optional[int]
    unit_id: Optional[int] = None
    piece_size_unit_id: Optional[int] = None
    category: Optional[Category] = None
    unit: Optional[MeasureUnit] = None
    piece_size_unit: Optional[MeasureUnit] = None


@dataclass(frozen=True)
class TransactionDetail:
    """One line item of a transaction."""

    id: int
    transaction_id: int
    product_id: int
    quantity: Decimal
    price_per_unit: Decimal
    tenant_id: int
    product: Optional[Product] = None


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity."""

    id: int
    tenant_id: int
    name: str
    description: Optional[str]
    amount: int
    date: datetime
    account_id: int
    counterparty_id: int
    account: Optional[Account] = None
    counterparty: Optional[Account] = None
    details: tuple[TransactionDetail, ...] = ()


@dataclass(frozen=True)
class DetailInput:
    """A detail line as supplied when creating a transaction."""

    product_id: int
    quantity: Decimal
    price_per_unit: Decimal
