"""Normalisation of raw transaction filters into a store predicate.

Filters arrive loosely typed (query-string values, single strings where a
list is expected, empty strings for "not set"). ``TransactionFilters``
accepts them as-is and ``normalize`` turns them into a ``TransactionQuery``:
a frozen, comparable value the store translates into SQL and the
post-filter re-applies to individual details.

Malformed optional values never raise; they switch the corresponding filter
off.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from ledgerkit.domain.entities import Product, TransactionDetail
from ledgerkit.utils.amount_parser import parse_int_or_none
from ledgerkit.utils.date_parser import parse_timestamp

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransactionQuery:
    """Normalised, tenant-scoped transaction predicate.

    A transaction matches when every set scalar bound holds and, if
    ``category_ids`` and/or ``product_names`` are set, at least one of its
    details satisfies all detail constraints at once.
    """

    tenant_id: int
    account_id: Optional[int] = None
    counterparty_id: Optional[int] = None
    category_ids: tuple[int, ...] = ()
    product_names: tuple[str, ...] = ()
    search_text: Optional[str] = None
    min_amount: Optional[int] = None
    max_amount: Optional[int] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @property
    def has_detail_filters(self) -> bool:
        return bool(self.category_ids or self.product_names)

    def matches_product(self, product: Optional[Product]) -> bool:
        """Return True if a detail's product satisfies every detail constraint."""
        if not self.has_detail_filters:
            return True
        if product is None:
            return False
        if self.category_ids and product.category_id not in self.category_ids:
            return False
        if self.product_names and product.name not in self.product_names:
            return False
        return True

    def filter_details(self, details: tuple[TransactionDetail, ...]) -> tuple[TransactionDetail, ...]:
        """Keep the details that satisfy the detail constraints."""
        if not self.has_detail_filters:
            return details
        return tuple(detail for detail in details if self.matches_product(detail.product))


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    return [value]


def _normalize_category_ids(value: Any) -> tuple[int, ...]:
    ids: list[int] = []
    for raw in _as_list(value):
        parsed = parse_int_or_none(raw)
        if parsed is None:
            logger.debug("Ignoring non-numeric category id %r", raw)
            continue
        if parsed not in ids:
            ids.append(parsed)
    return tuple(ids)


def _normalize_product_names(value: Any) -> tuple[str, ...]:
    names: list[str] = []
    for raw in _as_list(value):
        name = (raw if isinstance(raw, str) else str(raw)).strip()
        if name and name not in names:
            names.append(name)
    return tuple(names)


def _normalize_timestamp(value: Any, bound: str) -> Optional[datetime]:
    if value is None or value == "":
        return None
    try:
        return parse_timestamp(value)
    except ValueError:
        logger.debug("Ignoring unparsable %s %r", bound, value)
        return None


def _normalize_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass
class TransactionFilters:
    """Raw transaction filters as supplied by a caller."""

    account_id: Any = None
    counterparty_id: Any = None
    category_ids: Any = None
    product_names: Any = None
    search_text: Any = None
    min_amount: Any = None
    max_amount: Any = None
    start_date: Any = None
    end_date: Any = None

    def normalize(self, tenant_id: int) -> TransactionQuery:
        """Build the tenant-scoped predicate for these filters."""
        return TransactionQuery(
            tenant_id=tenant_id,
            account_id=parse_int_or_none(self.account_id),
            counterparty_id=parse_int_or_none(self.counterparty_id),
            category_ids=_normalize_category_ids(self.category_ids),
            product_names=_normalize_product_names(self.product_names),
            search_text=_normalize_text(self.search_text),
            min_amount=parse_int_or_none(self.min_amount),
            max_amount=parse_int_or_none(self.max_amount),
            start_date=_normalize_timestamp(self.start_date, "start date"),
            end_date=_normalize_timestamp(self.end_date, "end date"),
        )


def build_transaction_query(tenant_id: int, **filters: Any) -> TransactionQuery:
    """Normalise keyword filters (see ``TransactionFilters``) for a tenant."""
    return TransactionFilters(**filters).normalize(tenant_id)
