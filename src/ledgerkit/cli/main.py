"""Main CLI entry point."""

import click

from ledgerkit.database.factories import create_database
from ledgerkit.logging_config import configure_logging

# Import and register all commands at module level
from ledgerkit.cli.commands import (
    tenant,
    account,
    category,
    product,
    transaction,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to SQLite database file (overrides LEDGERKIT_DB_PATH environment variable)",
    envvar="LEDGERKIT_DB_PATH",
)
@click.option(
    "--database-url",
    help="SQLAlchemy database URL; takes precedence over --db-path",
    envvar="LEDGERKIT_DATABASE_URL",
)
@click.option(
    "--tenant",
    "tenant_id",
    help="Tenant ID the command acts for",
    envvar="LEDGERKIT_TENANT_ID",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging level (default: WARNING)",
    envvar="LEDGERKIT_LOG_LEVEL",
)
@click.pass_context
def cli(ctx, db_path: str | None, database_url: str | None, tenant_id: str | None, log_level: str | None):
    """Ledgerkit - multi-tenant ledger.

    Record transactions between your accounts and counterparties, classify
    their line items into a category tree and search your history.
    """
    ctx.ensure_object(dict)
    configure_logging(log_level)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_database(database_url=database_url, database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.obj["tenant_id"] = tenant_id
        ctx.call_on_close(db.disconnect)


# Register all commands
tenant.register_commands(cli)
account.register_commands(cli)
category.register_commands(cli)
product.register_commands(cli)
transaction.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
