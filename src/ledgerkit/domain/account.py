"""Account domain service."""

import logging
from typing import Optional

from ledgerkit.database.base import Database
from ledgerkit.domain.dto import AccountDTO, SelectItem
from ledgerkit.domain.entities import Account, AccountType, Currency
from ledgerkit.domain import errors
from ledgerkit.domain.errors import BadRequestError, NotFoundError

logger = logging.getLogger(__name__)


class AccountService:
    """Service for managing accounts and currencies."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_currency(
        self,
        code: str,
        name: str,
        symbol: str,
        fractional_part_name: str,
        part_fraction: int = 100,
    ) -> int:
        """Create a currency.

        Raises:
            BadRequestError: If the code is blank, already used or the fraction is not positive
        """
        code = (code or "").strip().upper()
        if not code:
            raise BadRequestError("Currency code must not be empty")
        if part_fraction <= 0:
            raise BadRequestError("Currency part fraction must be positive")
        if self.db.get_currency_by_code(code) is not None:
            raise BadRequestError(f"Currency '{code}' already exists")

        currency_id = self.db.create_currency(
            code=code,
            name=name,
            symbol=symbol,
            fractional_part_name=fractional_part_name,
            part_fraction=part_fraction,
        )
        logger.info("Created currency %s (%s)", currency_id, code)
        return currency_id

    def list_currencies(self) -> list[Currency]:
        """List all currencies."""
        return self.db.list_currencies()

    def create_account(
        self,
        tenant_id: int,
        name: str,
        account_type: AccountType,
        currency_code: str,
        description: Optional[str] = None,
    ) -> int:
        """Create an account.

        Args:
            tenant_id: Owning tenant
            name: Account name
            account_type: OWN or COUNTERPARTY
            currency_code: Code of an existing currency
            description: Optional description

        Returns:
            Account ID

        Raises:
            BadRequestError: If the name is blank
            NotFoundError: If the currency does not exist
        """
        if not name or not name.strip():
            raise BadRequestError("Account name must not be empty")
        if not isinstance(account_type, AccountType):
            try:
                account_type = AccountType(str(account_type).strip().upper())
            except ValueError:
                raise BadRequestError(f"Unknown account type '{account_type}'")
        currency = self.db.get_currency_by_code((currency_code or "").strip().upper())
        if currency is None:
            raise NotFoundError(errors.currency_not_found(currency_code))

        account_id = self.db.create_account(
            tenant_id=tenant_id,
            name=name.strip(),
            account_type=account_type,
            currency_id=currency.id,
            description=description or None,
        )
        logger.info("Tenant %s created %s account %s", tenant_id, account_type.value, account_id)
        return account_id

    def get_account(self, tenant_id: int, account_id: int) -> Optional[Account]:
        """Get an account if it exists and belongs to the tenant."""
        account = self.db.get_account(account_id)
        if account is None or account.tenant_id != tenant_id:
            return None
        return account

    def list_accounts(self, tenant_id: int) -> list[AccountDTO]:
        """List all of the tenant's accounts with their currencies."""
        return [AccountDTO.from_entity(acc) for acc in self.db.list_accounts(tenant_id)]

    def select_items(self, tenant_id: int) -> list[SelectItem]:
        """List the tenant's own accounts as select items."""
        accounts = self.db.list_accounts(tenant_id, account_type=AccountType.OWN)
        return [SelectItem(id=acc.id, label=acc.name) for acc in accounts]

    def counterparty_select_items(self, tenant_id: int) -> list[SelectItem]:
        """List the tenant's counterparty accounts as select items."""
        accounts = self.db.list_accounts(tenant_id, account_type=AccountType.COUNTERPARTY)
        return [SelectItem(id=acc.id, label=acc.name) for acc in accounts]
