"""Data-transfer shapes returned to callers.

DTOs are plain dataclasses. ``to_dict()`` drops every key whose value is
``None`` so optional fields are absent from the external shape rather than
null.
"""

from dataclasses import dataclass, field, fields
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from ledgerkit.domain.entities import Account, Currency, MeasureUnit


def _compact(value: Any) -> Any:
    if isinstance(value, _DTO):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [_compact(item) for item in value]
    return value


class _DTO:
    def to_dict(self) -> dict[str, Any]:
        result = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            result[f.name] = _compact(value)
        return result


@dataclass
class SelectItem(_DTO):
    """Minimal projection used to populate choice lists."""

    id: int
    label: str


@dataclass
class CurrencyDTO(_DTO):
    id: int
    name: str
    code: str
    symbol: str
    fractional_part_name: str
    part_fraction: int

    @classmethod
    def from_entity(cls, currency: Currency) -> "CurrencyDTO":
        return cls(
            id=currency.id,
            name=currency.name,
            code=currency.code,
            symbol=currency.symbol,
            fractional_part_name=currency.fractional_part_name,
            part_fraction=currency.part_fraction,
        )


@dataclass
class AccountDTO(_DTO):
    id: int
    name: str
    type: str
    tenant_id: int
    currency: Optional[CurrencyDTO] = None
    description: Optional[str] = None

    @classmethod
    def from_entity(cls, account: Account) -> "AccountDTO":
        return cls(
            id=account.id,
            name=account.name,
            type=account.type.value,
            tenant_id=account.tenant_id,
            currency=CurrencyDTO.from_entity(account.currency) if account.currency else None,
            description=account.description or None,
        )


@dataclass
class MeasureUnitDTO(_DTO):
    id: int
    name: str

    @classmethod
    def from_entity(cls, unit: Optional[MeasureUnit]) -> Optional["MeasureUnitDTO"]:
        if unit is None:
            return None
        return cls(id=unit.id, name=unit.name)


@dataclass
class CategoryDTO(_DTO):
    """Category with its breadcrumb path resolved."""

    id: int
    name: str
    category_path: str
    parent_id: Optional[int] = None


@dataclass
class ProductDTO(_DTO):
    id: int
    name: str
    category_id: Optional[int] = None
    category: Optional[CategoryDTO] = None
    unit: Optional[MeasureUnitDTO] = None
    piece_size_unit: Optional[MeasureUnitDTO] = None


@dataclass
class TransactionDetailDTO(_DTO):
    id: int
    transaction_id: int
    product_id: int
    quantity: Decimal
    price_per_unit: Decimal
    product: ProductDTO
    category_path: Optional[str] = None


@dataclass
class TransactionDTO(_DTO):
    id: int
    name: str
    amount: int
    date: datetime
    account_id: int
    counterparty_id: int
    account: Optional[AccountDTO] = None
    counterparty: Optional[AccountDTO] = None
    description: Optional[str] = None
    details: list[TransactionDetailDTO] = field(default_factory=list)
