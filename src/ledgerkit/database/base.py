"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import datetime
from typing import Optional, Sequence

# Import entities directly to avoid circular import through domain/__init__.py
from ledgerkit.domain.entities import (
    Account,
    AccountType,
    Category,
    Currency,
    DetailInput,
    MeasureUnit,
    Product,
    Tenant,
    Transaction,
    TransactionDetail,
)
from ledgerkit.domain.transaction_query import TransactionQuery


class Database(ABC):
    """Abstract database interface for ledgerkit.

    Every write commits on its own unless it runs inside ``atomic()``, in
    which case the whole block commits or rolls back together.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def atomic(self) -> AbstractContextManager[None]:
        """Run the enclosed operations as one all-or-nothing unit.

        Nested blocks join the outermost one. Any exception rolls back every
        write made since the outermost block was entered and is re-raised.
        An exception caught between a nested block and the outermost one
        still dooms the unit: the outermost block rolls back and raises
        RuntimeError instead of committing.
        """
        pass

    # Tenant operations
    @abstractmethod
    def create_tenant(self, name: str) -> int:
        """Create a tenant. Returns tenant ID."""
        pass

    @abstractmethod
    def get_tenant(self, tenant_id: int) -> Optional[Tenant]:
        """Get tenant by ID."""
        pass

    # Currency operations
    @abstractmethod
    def create_currency(
        self, code: str, name: str, symbol: str, fractional_part_name: str, part_fraction: int
    ) -> int:
        """Create a currency. Returns currency ID."""
        pass

    @abstractmethod
    def get_currency_by_code(self, code: str) -> Optional[Currency]:
        """Get currency by ISO code."""
        pass

    @abstractmethod
    def list_currencies(self) -> list[Currency]:
        """List all currencies ordered by code."""
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self,
        tenant_id: int,
        name: str,
        account_type: AccountType,
        currency_id: int,
        description: Optional[str] = None,
    ) -> int:
        """Create an account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account (with currency) by ID."""
        pass

    @abstractmethod
    def list_accounts(self, tenant_id: int, account_type: Optional[AccountType] = None) -> list[Account]:
        """List a tenant's accounts ordered by name, optionally of one type."""
        pass

    # Measure unit operations
    @abstractmethod
    def create_measure_unit(self, tenant_id: int, name: str) -> int:
        """Create a measure unit. Returns unit ID."""
        pass

    @abstractmethod
    def get_measure_unit_by_name(self, tenant_id: int, name: str) -> Optional[MeasureUnit]:
        """Get a tenant's measure unit by name."""
        pass

    # Category operations
    @abstractmethod
    def create_category(self, tenant_id: int, name: str, parent_id: Optional[int] = None) -> int:
        """Create a category. Returns category ID."""
        pass

    @abstractmethod
    def get_category(self, category_id: int) -> Optional[Category]:
        """Get category by ID (regardless of tenant)."""
        pass

    @abstractmethod
    def list_categories(self, tenant_id: int) -> list[Category]:
        """List all categories of a tenant ordered by ID."""
        pass

    @abstractmethod
    def update_category(self, category_id: int, name: str, parent_id: Optional[int]) -> None:
        """Rename and/or reparent a category."""
        pass

    @abstractmethod
    def delete_category(self, category_id: int) -> None:
        """Delete a single category row."""
        pass

    @abstractmethod
    def category_has_products(self, category_id: int) -> bool:
        """Check whether any product references the category directly."""
        pass

    # Product operations
    @abstractmethod
    def create_product(
        self,
        tenant_id: int,
        name: str,
        category_id: Optional[int] = None,
        unit_id: Optional[int] = None,
        piece_size_unit_id: Optional[int] = None,
    ) -> int:
        """Create a product. Returns product ID."""
        pass

    @abstractmethod
    def get_product(self, product_id: int) -> Optional[Product]:
        """Get product by ID (regardless of tenant)."""
        pass

    @abstractmethod
    def list_products(self, tenant_id: int) -> list[Product]:
        """List a tenant's products ordered by name."""
        pass

    @abstractmethod
    def list_products_in_category(self, tenant_id: int, category_id: Optional[int]) -> list[Product]:
        """List a tenant's products in a category (None for uncategorized), ordered by name."""
        pass

    @abstractmethod
    def list_products_not_in_category(self, tenant_id: int, category_id: Optional[int]) -> list[Product]:
        """List a tenant's products outside a category (None: all categorized), ordered by name."""
        pass

    @abstractmethod
    def update_product_category(self, product_id: int, category_id: Optional[int]) -> None:
        """Set a product's category."""
        pass

    @abstractmethod
    def reassign_products(
        self, tenant_id: int, source_category_id: int, target_category_id: Optional[int]
    ) -> int:
        """Move every product of a tenant from one category to another. Returns the count moved."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        tenant_id: int,
        name: str,
        amount: int,
        date: datetime,
        account_id: int,
        counterparty_id: int,
        description: Optional[str] = None,
    ) -> int:
        """Create a transaction row. Returns transaction ID."""
        pass

    @abstractmethod
    def create_transaction_details(
        self, tenant_id: int, transaction_id: int, details: Sequence[DetailInput]
    ) -> None:
        """Bulk-create detail rows for a transaction."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get a bare transaction by ID."""
        pass

    @abstractmethod
    def list_transaction_details(self, transaction_id: int) -> list[TransactionDetail]:
        """List the details of a transaction ordered by ID."""
        pass

    @abstractmethod
    def find_transactions(self, query: TransactionQuery) -> list[Transaction]:
        """Find transactions matching a normalised query.

        Returns transactions ordered by date descending with accounts,
        currencies and details -> product -> category/units loaded. Details
        are not narrowed here; a transaction qualifies when some detail
        satisfies the detail constraints.
        """
        pass
