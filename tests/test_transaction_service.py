"""Tests for recording and querying transactions."""

from datetime import datetime
from decimal import Decimal

import pytest

from ledgerkit.domain.entities import AccountType, DetailInput
from ledgerkit.domain.errors import BadRequestError, NotFoundError
from ledgerkit.domain.transaction import calculate_details_total
from ledgerkit.domain.transaction_query import TransactionFilters


def _create(transaction_service, tenant_id, accounts, details, amount=100, **kwargs):
    return transaction_service.create_transaction(
        tenant_id=tenant_id,
        name=kwargs.pop("name", "Shopping"),
        amount=amount,
        date=kwargs.pop("date", "2024-03-01"),
        account_id=accounts["own"],
        counterparty_id=accounts["shop"],
        details=details,
        **kwargs,
    )


class TestCreateTransaction:
    def test_details_must_add_up(
        self, transaction_service, temp_db, tenant_id, sample_accounts, sample_products
    ):
        details = [
            DetailInput(product_id=sample_products["milk"], quantity=Decimal("2"), price_per_unit=Decimal("40")),
            DetailInput(product_id=sample_products["soap"], quantity=Decimal("1"), price_per_unit=Decimal("19")),
        ]

        with pytest.raises(BadRequestError, match="does not match"):
            _create(transaction_service, tenant_id, sample_accounts, details)

        assert temp_db.find_transactions(TransactionFilters().normalize(tenant_id)) == []

    def test_creates_transaction_and_details(
        self, transaction_service, temp_db, tenant_id, sample_accounts, sample_products
    ):
        details = [
            DetailInput(product_id=sample_products["milk"], quantity=Decimal("2"), price_per_unit=Decimal("40")),
            DetailInput(product_id=sample_products["soap"], quantity=Decimal("1"), price_per_unit=Decimal("20")),
        ]

        txn = _create(transaction_service, tenant_id, sample_accounts, details, description="Weekly")

        assert txn.amount == 100
        assert txn.name == "Shopping"
        assert txn.description == "Weekly"
        assert txn.date == datetime(2024, 3, 1)
        stored = temp_db.list_transaction_details(txn.id)
        assert len(stored) == 2
        assert [d.product_id for d in stored] == [sample_products["milk"], sample_products["soap"]]
        assert all(d.tenant_id == tenant_id for d in stored)
        assert stored[0].quantity == Decimal("2")

    def test_difference_within_tolerance_is_accepted(
        self, transaction_service, tenant_id, sample_accounts, sample_products
    ):
        details = [{"product_id": sample_products["milk"], "quantity": "3", "price_per_unit": "33.333"}]
        txn = _create(transaction_service, tenant_id, sample_accounts, details)
        assert txn.amount == 100

    def test_calculate_details_total(self):
        details = [
            DetailInput(product_id=1, quantity=Decimal("2"), price_per_unit=Decimal("40")),
            DetailInput(product_id=2, quantity=Decimal("0.5"), price_per_unit=Decimal("3")),
        ]
        assert calculate_details_total(details) == Decimal("81.5")

    @pytest.mark.parametrize(
        "amount,details",
        [
            (0, [{"product_id": 1, "quantity": 1, "price_per_unit": 1}]),
            (10, []),
            (10, [{"product_id": 1, "quantity": 0, "price_per_unit": 10}]),
            (10, [{"product_id": 1, "quantity": 1, "price_per_unit": "ten"}]),
            (10, [{"quantity": 1, "price_per_unit": 10}]),
        ],
    )
    def test_invalid_input(self, transaction_service, tenant_id, sample_accounts, amount, details):
        with pytest.raises(BadRequestError):
            _create(transaction_service, tenant_id, sample_accounts, details, amount=amount)

    def test_blank_name(self, transaction_service, tenant_id, sample_accounts, sample_products):
        details = [{"product_id": sample_products["milk"], "quantity": 1, "price_per_unit": 100}]
        with pytest.raises(BadRequestError):
            _create(transaction_service, tenant_id, sample_accounts, details, name="  ")

    def test_foreign_account(
        self, transaction_service, account_service, tenant_id, other_tenant_id, sample_accounts, sample_products
    ):
        foreign = account_service.create_account(other_tenant_id, "Theirs", AccountType.COUNTERPARTY, "USD")
        details = [{"product_id": sample_products["milk"], "quantity": 1, "price_per_unit": 100}]

        with pytest.raises(NotFoundError, match="accounts"):
            _create(
                transaction_service,
                tenant_id,
                {"own": sample_accounts["own"], "shop": foreign},
                details,
            )

    def test_foreign_product(
        self, transaction_service, product_service, temp_db, tenant_id, other_tenant_id, sample_accounts
    ):
        foreign_product = product_service.create_product(other_tenant_id, "Theirs")
        details = [{"product_id": foreign_product, "quantity": 1, "price_per_unit": 100}]

        with pytest.raises(NotFoundError):
            _create(transaction_service, tenant_id, sample_accounts, details)
        assert temp_db.find_transactions(TransactionFilters().normalize(tenant_id)) == []

    def test_invalid_date(self, transaction_service, tenant_id, sample_accounts, sample_products):
        details = [{"product_id": sample_products["milk"], "quantity": 1, "price_per_unit": 100}]
        with pytest.raises(BadRequestError, match="date"):
            _create(transaction_service, tenant_id, sample_accounts, details, date="not a date")

    def test_get_transaction_is_tenant_scoped(
        self, transaction_service, tenant_id, other_tenant_id, sample_transaction
    ):
        assert transaction_service.get_transaction(tenant_id, sample_transaction.id).id == sample_transaction.id
        with pytest.raises(NotFoundError):
            transaction_service.get_transaction(other_tenant_id, sample_transaction.id)


@pytest.fixture
def history(transaction_service, tenant_id, sample_accounts, sample_products):
    """Three transactions on different days and in different categories."""
    first = transaction_service.create_transaction(
        tenant_id=tenant_id,
        name="Groceries",
        amount=100,
        date="2024-03-10T12:00:00",
        account_id=sample_accounts["own"],
        counterparty_id=sample_accounts["shop"],
        details=[
            {"product_id": sample_products["milk"], "quantity": 2, "price_per_unit": 40},
            {"product_id": sample_products["soap"], "quantity": 1, "price_per_unit": 20},
        ],
    )
    second = transaction_service.create_transaction(
        tenant_id=tenant_id,
        name="Cheese board",
        amount=500,
        date="2024-03-12",
        account_id=sample_accounts["own"],
        counterparty_id=sample_accounts["shop"],
        details=[{"product_id": sample_products["brie"], "quantity": "0.5", "price_per_unit": 1000}],
    )
    third = transaction_service.create_transaction(
        tenant_id=tenant_id,
        name="Birthday present",
        amount=2500,
        date="2024-02-01",
        account_id=sample_accounts["own"],
        counterparty_id=sample_accounts["shop"],
        details=[{"product_id": sample_products["gift"], "quantity": 1, "price_per_unit": 2500}],
        description="For Sam",
    )
    return {"groceries": first.id, "cheese": second.id, "gift": third.id}


class TestQueryTransactions:
    def test_newest_first(self, transaction_service, tenant_id, history):
        result = transaction_service.query_transactions(tenant_id)
        assert [t.id for t in result] == [history["cheese"], history["groceries"], history["gift"]]

    def test_other_tenant_sees_nothing(self, transaction_service, other_tenant_id, history):
        assert transaction_service.query_transactions(other_tenant_id) == []

    def test_search_is_case_insensitive(self, transaction_service, tenant_id, history):
        result = transaction_service.query_transactions(tenant_id, TransactionFilters(search_text="GROC"))
        assert [t.id for t in result] == [history["groceries"]]

    @pytest.mark.parametrize("text", ["Хліб", "хліб", "ХЛІБ", "Café", "CAFÉ", "хліб café"])
    def test_search_folds_non_ascii_case(
        self, transaction_service, tenant_id, sample_accounts, sample_products, history, text
    ):
        bread = transaction_service.create_transaction(
            tenant_id=tenant_id,
            name="Хліб Café",
            amount=30,
            date="2024-03-05",
            account_id=sample_accounts["own"],
            counterparty_id=sample_accounts["shop"],
            details=[{"product_id": sample_products["gift"], "quantity": 1, "price_per_unit": 30}],
        )

        result = transaction_service.query_transactions(tenant_id, TransactionFilters(search_text=text))

        assert [t.id for t in result] == [bread.id]

    def test_search_text_is_literal(self, transaction_service, tenant_id, history):
        result = transaction_service.query_transactions(tenant_id, TransactionFilters(search_text="%"))
        assert result == []

    def test_amount_bounds(self, transaction_service, tenant_id, history):
        result = transaction_service.query_transactions(
            tenant_id, TransactionFilters(min_amount="100", max_amount="500")
        )
        assert {t.id for t in result} == {history["groceries"], history["cheese"]}

    def test_date_bounds(self, transaction_service, tenant_id, history):
        result = transaction_service.query_transactions(
            tenant_id, TransactionFilters(start_date="2024-03-01", end_date="2024-03-11")
        )
        assert [t.id for t in result] == [history["groceries"]]

    def test_unparsable_date_is_ignored(self, transaction_service, tenant_id, history):
        result = transaction_service.query_transactions(
            tenant_id, TransactionFilters(start_date="whenever")
        )
        assert len(result) == 3

    def test_account_filters(self, transaction_service, tenant_id, sample_accounts, history):
        by_account = transaction_service.query_transactions(
            tenant_id, TransactionFilters(account_id=str(sample_accounts["own"]))
        )
        by_counterparty_as_account = transaction_service.query_transactions(
            tenant_id, TransactionFilters(account_id=sample_accounts["shop"])
        )
        assert len(by_account) == 3
        assert by_counterparty_as_account == []

    def test_category_filter_narrows_details(
        self, transaction_service, tenant_id, sample_categories, history
    ):
        result = transaction_service.query_transactions(
            tenant_id, TransactionFilters(category_ids=str(sample_categories["dairy"]))
        )

        assert [t.id for t in result] == [history["groceries"]]
        assert [d.product.name for d in result[0].details] == ["Milk"]
        assert result[0].details[0].category_path == "Food > Dairy"

    def test_category_and_product_must_match_same_detail(
        self, transaction_service, tenant_id, sample_categories, history
    ):
        mismatched = transaction_service.query_transactions(
            tenant_id,
            TransactionFilters(category_ids=[sample_categories["household"]], product_names=["Milk"]),
        )
        matched = transaction_service.query_transactions(
            tenant_id,
            TransactionFilters(category_ids=[sample_categories["dairy"]], product_names=["Milk"]),
        )

        assert mismatched == []
        assert [t.id for t in matched] == [history["groceries"]]

    def test_product_name_filter(self, transaction_service, tenant_id, history):
        result = transaction_service.query_transactions(
            tenant_id, TransactionFilters(product_names=[" Soap ", "Brie"])
        )
        assert [t.id for t in result] == [history["cheese"], history["groceries"]]
        assert [d.product.name for d in result[1].details] == ["Soap"]

    def test_every_returned_detail_matches(self, transaction_service, tenant_id, sample_categories, history):
        cats = [sample_categories["dairy"], sample_categories["cheese"]]
        result = transaction_service.query_transactions(tenant_id, TransactionFilters(category_ids=cats))

        assert result
        for txn in result:
            assert txn.details
            assert all(d.product.category_id in cats for d in txn.details)

    def test_dto_shape(self, transaction_service, tenant_id, sample_categories, history):
        result = {t.id: t for t in transaction_service.query_transactions(tenant_id)}

        groceries = result[history["groceries"]].to_dict()
        assert "description" not in groceries
        assert groceries["account"]["currency"]["code"] == "USD"
        assert groceries["counterparty"]["type"] == "COUNTERPARTY"
        milk = groceries["details"][0]
        assert milk["product"]["unit"] == {"id": milk["product"]["unit"]["id"], "name": "l"}
        assert milk["product"]["category"]["category_path"] == "Food > Dairy"
        assert milk["product"]["category"]["parent_id"] == sample_categories["food"]

        gift = result[history["gift"]].to_dict()
        assert gift["description"] == "For Sam"
        gift_product = gift["details"][0]["product"]
        assert "category" not in gift_product
        assert "category_path" not in gift["details"][0]

    def test_find_accepts_prebuilt_query(self, transaction_service, tenant_id, other_tenant_id, history):
        query = TransactionFilters(search_text="cheese").normalize(other_tenant_id)
        # The query is rescoped to the calling tenant
        result = transaction_service.find_transactions(tenant_id, query)
        assert [t.id for t in result] == [history["cheese"]]

    def test_list_details(self, transaction_service, tenant_id, other_tenant_id, history):
        details = transaction_service.list_details(tenant_id, history["groceries"])
        assert len(details) == 2
        with pytest.raises(NotFoundError):
            transaction_service.list_details(other_tenant_id, history["groceries"])
