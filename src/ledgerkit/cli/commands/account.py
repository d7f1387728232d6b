"""Account and currency management commands."""

import click

from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.cli.tenant_resolution import resolve_tenant_or_exit
from ledgerkit.domain.account import AccountService
from ledgerkit.domain.entities import AccountType
from ledgerkit.domain.errors import DomainError


@click.group()
def currency_group():
    """Manage currencies."""
    pass


@currency_group.command("create")
@click.argument("code")
@click.option("--name", required=True, help="Full name (e.g. 'US Dollar')")
@click.option("--symbol", required=True, help="Symbol (e.g. '$')")
@click.option("--fraction-name", default="cent", show_default=True, help="Name of the minor unit")
@click.option("--part-fraction", type=int, default=100, show_default=True, help="Minor units per unit")
@click.pass_context
def create_currency(ctx, code: str, name: str, symbol: str, fraction_name: str, part_fraction: int):
    """Create a currency.

    Examples:
        ledgerkit currency create USD --name "US Dollar" --symbol "$"
        ledgerkit currency create JPY --name "Yen" --symbol "¥" --part-fraction 1
    """
    service = AccountService(ctx.obj["db"])
    try:
        currency_id = service.create_currency(
            code=code,
            name=name,
            symbol=symbol,
            fractional_part_name=fraction_name,
            part_fraction=part_fraction,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created currency '{code.upper()}' (ID: {currency_id})")


@currency_group.command("list")
@click.pass_context
def list_currencies(ctx):
    """List all currencies."""
    currencies = AccountService(ctx.obj["db"]).list_currencies()
    if not currencies:
        click.echo("No currencies found.")
        return

    for cur in currencies:
        click.echo(f"{cur.code:<5} {cur.symbol:<3} {cur.name} (1 = {cur.part_fraction} {cur.fractional_part_name})")


@click.group()
def account_group():
    """Manage accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option(
    "--type",
    "account_type",
    type=click.Choice(["own", "counterparty"], case_sensitive=False),
    default="own",
    show_default=True,
    help="Whether the account is yours or a counterparty's",
)
@click.option("--currency", "currency_code", required=True, help="Currency code (e.g. USD)")
@click.option("--description", help="Optional description")
@click.pass_context
def create_account(ctx, name: str, account_type: str, currency_code: str, description: str | None):
    """Create an account.

    Examples:
        ledgerkit account create "Checking" --currency USD
        ledgerkit account create "Corner Shop" --type counterparty --currency USD
    """
    tenant_id = resolve_tenant_or_exit(ctx)
    service = AccountService(ctx.obj["db"])
    try:
        account_id = service.create_account(
            tenant_id=tenant_id,
            name=name,
            account_type=AccountType(account_type.upper()),
            currency_code=currency_code,
            description=description,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created account '{name}' (ID: {account_id})")


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List all accounts."""
    tenant_id = resolve_tenant_or_exit(ctx)
    accounts = AccountService(ctx.obj["db"]).list_accounts(tenant_id)
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 70)
    for acc in accounts:
        currency = acc.currency.code if acc.currency else "?"
        line = f"ID: {acc.id:3d} | {acc.name:20s} | {acc.type:12s} | {currency}"
        if acc.description:
            line += f" | {acc.description}"
        click.echo(line)


@account_group.command("select-items")
@click.option("--counterparties", is_flag=True, help="List counterparty accounts instead of own ones")
@click.pass_context
def account_select_items(ctx, counterparties: bool):
    """List accounts as 'ID<TAB>label' pairs."""
    tenant_id = resolve_tenant_or_exit(ctx)
    service = AccountService(ctx.obj["db"])
    if counterparties:
        items = service.counterparty_select_items(tenant_id)
    else:
        items = service.select_items(tenant_id)
    for item in items:
        click.echo(f"{item.id}\t{item.label}")


def register_commands(cli):
    """Register account and currency commands with main CLI."""
    cli.add_command(currency_group, name="currency")
    cli.add_command(account_group, name="account")
