"""Mapper functions to convert SQLAlchemy models into domain entities.

Nested relations are only mapped when the caller asks for them, so a plain
lookup never triggers lazy loads of the whole graph.
"""

from decimal import Decimal

from ledgerkit.domain import entities as domain
from ledgerkit.database.models import (
    Tenant as ORMTenant,
    Currency as ORMCurrency,
    Account as ORMAccount,
    MeasureUnit as ORMMeasureUnit,
    Category as ORMCategory,
    Product as ORMProduct,
    Transaction as ORMTransaction,
    TransactionDetail as ORMTransactionDetail,
)


def tenant_to_domain(orm_tenant: ORMTenant) -> domain.Tenant:
    """Convert SQLAlchemy Tenant model to domain Tenant entity."""
    return domain.Tenant(id=orm_tenant.id, name=orm_tenant.name, created_at=orm_tenant.created_at)


def currency_to_domain(orm_currency: ORMCurrency) -> domain.Currency:
    """Convert SQLAlchemy Currency model to domain Currency entity."""
    return domain.Currency(
        id=orm_currency.id,
        name=orm_currency.name,
        code=orm_currency.code,
        symbol=orm_currency.symbol,
        fractional_part_name=orm_currency.fractional_part_name,
        part_fraction=orm_currency.part_fraction,
    )


def account_to_domain(orm_account: ORMAccount, with_currency: bool = True) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        tenant_id=orm_account.tenant_id,
        name=orm_account.name,
        type=orm_account.type,
        currency_id=orm_account.currency_id,
        description=orm_account.description,
        currency=currency_to_domain(orm_account.currency) if with_currency else None,
    )


def measure_unit_to_domain(orm_unit: ORMMeasureUnit) -> domain.MeasureUnit:
    """Convert SQLAlchemy MeasureUnit model to domain MeasureUnit entity."""
    return domain.MeasureUnit(id=orm_unit.id, tenant_id=orm_unit.tenant_id, name=orm_unit.name)


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        tenant_id=orm_category.tenant_id,
        name=orm_category.name,
        parent_id=orm_category.parent_id,
    )


def product_to_domain(orm_product: ORMProduct, with_relations: bool = False) -> domain.Product:
    """Convert SQLAlchemy Product model to domain Product entity."""
    category = unit = piece_size_unit = None
    if with_relations:
        if orm_product.category is not None:
            category = category_to_domain(orm_product.category)
        if orm_product.unit is not None:
            unit = measure_unit_to_domain(orm_product.unit)
        if orm_product.piece_size_unit is not None:
            piece_size_unit = measure_unit_to_domain(orm_product.piece_size_unit)
    return domain.Product(
        id=orm_product.id,
        tenant_id=orm_product.tenant_id,
        name=orm_product.name,
        category_id=orm_product.category_id,
        unit_id=orm_product.unit_id,
        piece_size_unit_id=orm_product.piece_size_unit_id,
        category=category,
        unit=unit,
        piece_size_unit=piece_size_unit,
    )


def transaction_detail_to_domain(
    orm_detail: ORMTransactionDetail, with_product: bool = False
) -> domain.TransactionDetail:
    """Convert SQLAlchemy TransactionDetail model to domain TransactionDetail entity."""
    return domain.TransactionDetail(
        id=orm_detail.id,
        transaction_id=orm_detail.transaction_id,
        product_id=orm_detail.product_id,
        quantity=Decimal(orm_detail.quantity),
        price_per_unit=Decimal(orm_detail.price_per_unit),
        tenant_id=orm_detail.tenant_id,
        product=product_to_domain(orm_detail.product, with_relations=True) if with_product else None,
    )


def transaction_to_domain(orm_transaction: ORMTransaction, with_graph: bool = False) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity.

    With ``with_graph`` the accounts (with currencies) and the details (with
    product, category and units) are mapped as well.
    """
    account = counterparty = None
    details: tuple[domain.TransactionDetail, ...] = ()
    if with_graph:
        account = account_to_domain(orm_transaction.account)
        counterparty = account_to_domain(orm_transaction.counterparty)
        details = tuple(
            transaction_detail_to_domain(detail, with_product=True)
            for detail in orm_transaction.details
        )
    return domain.Transaction(
        id=orm_transaction.id,
        tenant_id=orm_transaction.tenant_id,
        name=orm_transaction.name,
        description=orm_transaction.description,
        amount=orm_transaction.amount,
        date=orm_transaction.date,
        account_id=orm_transaction.account_id,
        counterparty_id=orm_transaction.counterparty_id,
        account=account,
        counterparty=counterparty,
        details=details,
    )
