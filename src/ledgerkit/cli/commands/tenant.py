"""Tenant management commands."""

import click

from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.domain.errors import DomainError
from ledgerkit.domain.tenant import TenantService


@click.group()
def tenant_group():
    """Manage tenants."""
    pass


@tenant_group.command("create")
@click.argument("name")
@click.pass_context
def create_tenant(ctx, name: str):
    """Create a tenant and print its ID.

    Use the ID with --tenant (or LEDGERKIT_TENANT_ID) for all other commands.
    """
    service = TenantService(ctx.obj["db"])
    try:
        tenant_id = service.create_tenant(name)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created tenant '{name}' (ID: {tenant_id})")


def register_commands(cli):
    """Register tenant commands with main CLI."""
    cli.add_command(tenant_group, name="tenant")
