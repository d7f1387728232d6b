"""Transaction commands."""

import json
from decimal import Decimal

import click

from ledgerkit.cli.date_filters import period_options, resolve_cli_date_range
from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.cli.tenant_resolution import resolve_tenant_or_exit
from ledgerkit.domain.account import AccountService
from ledgerkit.domain.dto import AccountDTO
from ledgerkit.domain.entities import DetailInput
from ledgerkit.domain import errors
from ledgerkit.domain.errors import DomainError, NotFoundError
from ledgerkit.domain.transaction import TransactionService
from ledgerkit.domain.transaction_query import TransactionFilters
from ledgerkit.utils.amount_parser import parse_amount, to_minor_units


def parse_detail_spec(raw: str, part_fraction: int) -> DetailInput:
    """Parse 'PRODUCT_ID:QUANTITY:PRICE' with PRICE in display units.

    Raises:
        ValueError: If the detail string is malformed
    """
    parts = raw.split(":")
    if len(parts) != 3:
        raise ValueError(f"Detail '{raw}' must look like PRODUCT_ID:QUANTITY:PRICE")
    try:
        product_id = int(parts[0])
    except ValueError:
        raise ValueError(f"Detail '{raw}' has a non-numeric product ID")
    return DetailInput(
        product_id=product_id,
        quantity=parse_amount(parts[1]),
        price_per_unit=parse_amount(parts[2]) * part_fraction,
    )


def format_amount(amount: int, account: AccountDTO | None) -> str:
    """Render minor units in the account currency's display units."""
    if account is None or account.currency is None:
        return str(amount)
    currency = account.currency
    return f"{currency.symbol}{Decimal(amount) / Decimal(currency.part_fraction)}"


@click.group()
def transaction_group():
    """Record and search transactions."""
    pass


@transaction_group.command("add")
@click.option("--name", required=True, help="Transaction name")
@click.option("--amount", required=True, help="Total in display units (e.g. 12.50)")
@click.option("--date", "date_str", default="today", show_default=True, help="Date (YYYY-MM-DD, ISO timestamp or 'today', 'yesterday')")
@click.option("--account", "account_id", type=int, required=True, help="Own account ID")
@click.option("--counterparty", "counterparty_id", type=int, required=True, help="Counterparty account ID")
@click.option(
    "--detail",
    "detail_specs",
    multiple=True,
    required=True,
    help="Line item PRODUCT_ID:QUANTITY:PRICE (repeatable)",
)
@click.option("--description", help="Optional description")
@click.pass_context
def add_transaction(
    ctx,
    name: str,
    amount: str,
    date_str: str,
    account_id: int,
    counterparty_id: int,
    detail_specs: tuple[str, ...],
    description: str | None,
):
    """Record a transaction with its line items.

    The total must match the sum of QUANTITY * PRICE over all details.

    Examples:
        ledgerkit transaction add --name "Groceries" --amount 12.50 \\
            --account 1 --counterparty 2 --detail 3:2:5.00 --detail 4:1:2.50
    """
    tenant_id = resolve_tenant_or_exit(ctx)
    db = ctx.obj["db"]

    account = AccountService(db).get_account(tenant_id, account_id)
    if account is None or account.currency is None:
        handle_domain_error(ctx, NotFoundError(errors.accounts_not_owned()))
    part_fraction = account.currency.part_fraction

    try:
        amount_minor = to_minor_units(parse_amount(amount), part_fraction)
        details = [parse_detail_spec(spec, part_fraction) for spec in detail_specs]
    except ValueError as e:
        handle_domain_error(ctx, e)

    try:
        transaction = TransactionService(db).create_transaction(
            tenant_id=tenant_id,
            name=name,
            amount=amount_minor,
            date=date_str,
            account_id=account_id,
            counterparty_id=counterparty_id,
            details=details,
            description=description,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(
        f"Created transaction {transaction.id}: '{transaction.name}' "
        f"{format_amount(transaction.amount, AccountDTO.from_entity(account))} on {transaction.date:%Y-%m-%d}"
    )


@transaction_group.command("list")
@click.option("--account", "account_id", help="Own account ID")
@click.option("--counterparty", "counterparty_id", help="Counterparty account ID")
@click.option("--category", "category_ids", multiple=True, help="Category ID (repeatable)")
@click.option("--product", "product_names", multiple=True, help="Exact product name (repeatable)")
@click.option("--search", "search_text", help="Case-insensitive text in the transaction name")
@click.option("--min-amount", help="Minimum amount in minor units")
@click.option("--max-amount", help="Maximum amount in minor units")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@period_options
@click.option("--json", "as_json", is_flag=True, help="Print the transactions as JSON")
@click.pass_context
def list_transactions(
    ctx,
    account_id: str | None,
    counterparty_id: str | None,
    category_ids: tuple[str, ...],
    product_names: tuple[str, ...],
    search_text: str | None,
    min_amount: str | None,
    max_amount: str | None,
    start_date: str | None,
    end_date: str | None,
    as_json: bool,
    **period_flags: bool,
):
    """Search transactions, newest first.

    Filters that cannot be parsed (for example a malformed date) are ignored.
    With --category or --product only the matching line items are shown.
    """
    tenant_id = resolve_tenant_or_exit(ctx)
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags={name.replace("_", "-"): value for name, value in period_flags.items()},
    )

    filters = TransactionFilters(
        account_id=account_id,
        counterparty_id=counterparty_id,
        category_ids=list(category_ids) or None,
        product_names=list(product_names) or None,
        search_text=search_text,
        min_amount=min_amount,
        max_amount=max_amount,
        start_date=start,
        end_date=end,
    )
    transactions = TransactionService(ctx.obj["db"]).query_transactions(tenant_id, filters)

    if as_json:
        click.echo(json.dumps([txn.to_dict() for txn in transactions], default=str, indent=2))
        return

    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 100)
    click.echo(f"{'ID':<6} {'Date':<12} {'Amount':>14}  {'Name':<30} {'Counterparty':<30}")
    click.echo("-" * 100)
    for txn in transactions:
        counterparty = txn.counterparty.name if txn.counterparty else str(txn.counterparty_id)
        click.echo(
            f"{txn.id:<6} {txn.date:%Y-%m-%d}   {format_amount(txn.amount, txn.account):>14}  "
            f"{txn.name[:30]:<30} {counterparty[:30]:<30}"
        )
        for detail in txn.details:
            category = detail.category_path or "Uncategorized"
            click.echo(
                f"{'':<6} - {detail.product.name} x {detail.quantity.normalize():f} [{category}]"
            )


def register_commands(cli: click.Group) -> None:
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
