"""Shared pytest fixtures for ledgerkit tests."""

import os
import tempfile
from decimal import Decimal

import pytest

from ledgerkit.database.factories import create_sqlite_database
from ledgerkit.domain.account import AccountService
from ledgerkit.domain.category import CategoryService
from ledgerkit.domain.entities import AccountType
from ledgerkit.domain.product import ProductService
from ledgerkit.domain.tenant import TenantService
from ledgerkit.domain.transaction import TransactionService
from ledgerkit.logging_config import reset_logging


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # CLI tests point --db-path at the same file
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture(autouse=True)
def _reset_logging():
    """Drop the handler the CLI installs so tests stay independent."""
    yield
    reset_logging()


@pytest.fixture
def tenant_service(temp_db):
    return TenantService(temp_db)


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def category_service(temp_db):
    """Create a CategoryService with a temporary database."""
    return CategoryService(temp_db)


@pytest.fixture
def product_service(temp_db):
    """Create a ProductService with a temporary database."""
    return ProductService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def tenant_id(tenant_service):
    """Create the tenant most tests act for."""
    return tenant_service.create_tenant("Household")


@pytest.fixture
def other_tenant_id(tenant_service):
    """Create a second tenant for isolation checks."""
    return tenant_service.create_tenant("Neighbour")


@pytest.fixture
def sample_currency(account_service):
    """Create a currency with cents."""
    account_service.create_currency(
        code="USD", name="US Dollar", symbol="$", fractional_part_name="cent", part_fraction=100
    )
    return "USD"


@pytest.fixture
def sample_accounts(account_service, tenant_id, sample_currency):
    """Create an own account and a counterparty for the main tenant."""
    own_id = account_service.create_account(
        tenant_id=tenant_id, name="Wallet", account_type=AccountType.OWN, currency_code=sample_currency
    )
    shop_id = account_service.create_account(
        tenant_id=tenant_id,
        name="Corner Shop",
        account_type=AccountType.COUNTERPARTY,
        currency_code=sample_currency,
    )
    return {"own": own_id, "shop": shop_id}


@pytest.fixture
def sample_categories(category_service, tenant_id):
    """Build Food > Dairy > Cheese plus a separate Household root."""
    food = category_service.create_category(tenant_id, "Food")
    dairy = category_service.create_category(tenant_id, "Dairy", parent_id=food)
    cheese = category_service.create_category(tenant_id, "Cheese", parent_id=dairy)
    household = category_service.create_category(tenant_id, "Household")
    return {"food": food, "dairy": dairy, "cheese": cheese, "household": household}


@pytest.fixture
def sample_products(product_service, tenant_id, sample_categories):
    """Create products spread over the sample categories."""
    return {
        "milk": product_service.create_product(
            tenant_id, "Milk", category_id=sample_categories["dairy"], unit="l"
        ),
        "brie": product_service.create_product(
            tenant_id, "Brie", category_id=sample_categories["cheese"], unit="kg"
        ),
        "soap": product_service.create_product(
            tenant_id, "Soap", category_id=sample_categories["household"]
        ),
        "gift": product_service.create_product(tenant_id, "Gift"),
    }


@pytest.fixture
def sample_transaction(transaction_service, tenant_id, sample_accounts, sample_products):
    """Record a groceries transaction with two details (2 x 40 + 1 x 20 = 100)."""
    return transaction_service.create_transaction(
        tenant_id=tenant_id,
        name="Groceries",
        amount=100,
        date="2024-03-10T12:00:00",
        account_id=sample_accounts["own"],
        counterparty_id=sample_accounts["shop"],
        details=[
            {"product_id": sample_products["milk"], "quantity": 2, "price_per_unit": 40},
            {"product_id": sample_products["soap"], "quantity": 1, "price_per_unit": Decimal("20")},
        ],
    )


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
