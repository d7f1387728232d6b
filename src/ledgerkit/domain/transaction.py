"""Transaction domain service."""

import logging
from dataclasses import replace
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Sequence, Union

from ledgerkit.database.base import Database
from ledgerkit.domain.assembler import assemble_transactions
from ledgerkit.domain.category_tree import CategoryTree
from ledgerkit.domain.dto import TransactionDTO
from ledgerkit.domain.entities import DetailInput, Transaction as TransactionEntity, TransactionDetail
from ledgerkit.domain import errors
from ledgerkit.domain.errors import BadRequestError, NotFoundError
from ledgerkit.domain.transaction_query import TransactionFilters, TransactionQuery
from ledgerkit.utils.date_parser import parse_timestamp

logger = logging.getLogger(__name__)

AMOUNT_TOLERANCE = Decimal("0.01")


def _as_decimal(value: Any, field_name: str) -> Decimal:
    try:
        return value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise BadRequestError(f"Detail {field_name} '{value}' is not a number")


def _coerce_detail(raw: Union[DetailInput, dict]) -> DetailInput:
    if isinstance(raw, DetailInput):
        return replace(
            raw,
            quantity=_as_decimal(raw.quantity, "quantity"),
            price_per_unit=_as_decimal(raw.price_per_unit, "price_per_unit"),
        )
    try:
        product_id = int(raw["product_id"])
    except (KeyError, TypeError, ValueError):
        raise BadRequestError(f"Detail {raw!r} has no valid product_id")
    return DetailInput(
        product_id=product_id,
        quantity=_as_decimal(raw.get("quantity"), "quantity"),
        price_per_unit=_as_decimal(raw.get("price_per_unit"), "price_per_unit"),
    )


def calculate_details_total(details: Sequence[DetailInput]) -> Decimal:
    """Sum quantity * price_per_unit over all details."""
    return sum((d.quantity * d.price_per_unit for d in details), Decimal("0"))


class TransactionService:
    """Service for creating and querying transactions."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def _owned_account_exists(self, tenant_id: int, account_id: int) -> bool:
        account = self.db.get_account(account_id)
        return account is not None and account.tenant_id == tenant_id

    def create_transaction(
        self,
        tenant_id: int,
        name: str,
        amount: int,
        date: Union[datetime, str],
        account_id: int,
        counterparty_id: int,
        details: Sequence[Union[DetailInput, dict]],
        description: Optional[str] = None,
    ) -> TransactionEntity:
        """Create a transaction together with its details.

        Args:
            tenant_id: Owning tenant
            name: Transaction name
            amount: Declared total in minor units
            date: Transaction timestamp (datetime or parseable string)
            account_id: The tenant's own account
            counterparty_id: The counterparty account
            details: Line items (``DetailInput`` or dicts with product_id,
                quantity and price_per_unit)
            description: Optional description

        Returns:
            The created transaction (details are not loaded)

        Raises:
            BadRequestError: On invalid input or when details do not add up to amount
            NotFoundError: If an account or product is missing or not the tenant's
        """
        if not name or not name.strip():
            raise BadRequestError("Transaction name must not be empty")
        if amount is None or amount <= 0:
            raise BadRequestError("Transaction amount must be positive")
        if not details:
            raise BadRequestError("A transaction needs at least one detail")

        lines = [_coerce_detail(raw) for raw in details]
        for line in lines:
            if line.quantity <= 0 or line.price_per_unit <= 0:
                raise BadRequestError("Detail quantity and price per unit must be positive")

        calculated = calculate_details_total(lines)
        if abs(calculated - Decimal(amount)) > AMOUNT_TOLERANCE:
            raise BadRequestError(errors.amount_mismatch(amount, calculated))

        if not (
            self._owned_account_exists(tenant_id, account_id)
            and self._owned_account_exists(tenant_id, counterparty_id)
        ):
            raise NotFoundError(errors.accounts_not_owned())

        for line in lines:
            product = self.db.get_product(line.product_id)
            if product is None or product.tenant_id != tenant_id:
                raise NotFoundError(errors.product_not_found(line.product_id))

        try:
            timestamp = parse_timestamp(date)
        except ValueError as e:
            raise BadRequestError(f"Invalid transaction date: {e}")

        with self.db.atomic():
            transaction_id = self.db.create_transaction(
                tenant_id=tenant_id,
                name=name.strip(),
                amount=amount,
                date=timestamp,
                account_id=account_id,
                counterparty_id=counterparty_id,
                description=description or None,
            )
            self.db.create_transaction_details(tenant_id, transaction_id, lines)

        logger.info(
            "Tenant %s created transaction %s with %d details", tenant_id, transaction_id, len(lines)
        )
        return self.db.get_transaction(transaction_id)

    def get_transaction(self, tenant_id: int, transaction_id: int) -> TransactionEntity:
        """Get a bare transaction owned by the tenant.

        Raises:
            NotFoundError: If it does not exist or belongs to another tenant
        """
        transaction = self.db.get_transaction(transaction_id)
        if transaction is None or transaction.tenant_id != tenant_id:
            raise NotFoundError(f"Transaction {transaction_id} not found")
        return transaction

    def list_details(self, tenant_id: int, transaction_id: int) -> list[TransactionDetail]:
        """List the details of a transaction owned by the tenant."""
        self.get_transaction(tenant_id, transaction_id)
        return self.db.list_transaction_details(transaction_id)

    def find_transactions(
        self, tenant_id: int, filters: Union[TransactionFilters, TransactionQuery, None] = None
    ) -> list[TransactionEntity]:
        """Fetch matching transactions with details narrowed to the detail filters.

        Transactions that keep no detail after narrowing are dropped.
        """
        if isinstance(filters, TransactionQuery):
            query = replace(filters, tenant_id=tenant_id)
        else:
            query = (filters or TransactionFilters()).normalize(tenant_id)

        fetched = self.db.find_transactions(query)
        if not query.has_detail_filters:
            return fetched

        narrowed = []
        for txn in fetched:
            details = query.filter_details(txn.details)
            if details:
                narrowed.append(replace(txn, details=details))
        logger.debug(
            "Post-filter kept %d of %d transactions for tenant %s",
            len(narrowed),
            len(fetched),
            tenant_id,
        )
        return narrowed

    def query_transactions(
        self, tenant_id: int, filters: Union[TransactionFilters, TransactionQuery, None] = None
    ) -> list[TransactionDTO]:
        """Query transactions and shape them into DTOs, newest first."""
        transactions = self.find_transactions(tenant_id, filters)
        tree = CategoryTree(self.db.list_categories(tenant_id))
        return assemble_transactions(transactions, tree)
