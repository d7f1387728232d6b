"""Shaping of fetched transactions into transaction DTOs."""

from typing import Iterable, Optional

from ledgerkit.domain.category_tree import CategoryTree
from ledgerkit.domain.dto import (
    AccountDTO,
    CategoryDTO,
    MeasureUnitDTO,
    ProductDTO,
    TransactionDetailDTO,
    TransactionDTO,
)
from ledgerkit.domain.entities import Account, Transaction, TransactionDetail


def build_category_path_cache(
    transactions: Iterable[Transaction], tree: CategoryTree
) -> dict[int, CategoryDTO]:
    """Resolve each distinct category referenced by the details exactly once.

    The returned mapping is meant to live for one request only.
    """
    cache: dict[int, CategoryDTO] = {}
    for txn in transactions:
        for detail in txn.details:
            product = detail.product
            if product is None or product.category is None:
                continue
            category = product.category
            if category.id in cache:
                continue
            cache[category.id] = CategoryDTO(
                id=category.id,
                name=category.name,
                parent_id=category.parent_id,
                category_path=tree.compute_path(category.id) or category.name,
            )
    return cache


def _detail_to_dto(detail: TransactionDetail, categories: dict[int, CategoryDTO]) -> TransactionDetailDTO:
    product = detail.product
    category: Optional[CategoryDTO] = None
    if product is not None and product.category_id is not None:
        category = categories.get(product.category_id)

    product_dto = ProductDTO(
        id=detail.product_id,
        name=product.name if product is not None else "",
        category_id=product.category_id if product is not None else None,
        category=category,
        unit=MeasureUnitDTO.from_entity(product.unit) if product is not None else None,
        piece_size_unit=MeasureUnitDTO.from_entity(product.piece_size_unit) if product is not None else None,
    )
    return TransactionDetailDTO(
        id=detail.id,
        transaction_id=detail.transaction_id,
        product_id=detail.product_id,
        quantity=detail.quantity,
        price_per_unit=detail.price_per_unit,
        product=product_dto,
        category_path=category.category_path if category is not None else None,
    )


def _account_dto(account: Optional[Account]) -> Optional[AccountDTO]:
    return AccountDTO.from_entity(account) if account is not None else None


def assemble_transactions(transactions: list[Transaction], tree: CategoryTree) -> list[TransactionDTO]:
    """Turn fetched transactions into DTOs, preserving their order."""
    categories = build_category_path_cache(transactions, tree)

    result = []
    for txn in transactions:
        result.append(
            TransactionDTO(
                id=txn.id,
                name=txn.name,
                description=txn.description or None,
                amount=txn.amount,
                date=txn.date,
                account_id=txn.account_id,
                counterparty_id=txn.counterparty_id,
                account=_account_dto(txn.account),
                counterparty=_account_dto(txn.counterparty),
                details=[_detail_to_dto(detail, categories) for detail in txn.details],
            )
        )
    return result
