"""CLI helper for resolving the acting tenant."""

from __future__ import annotations

import click

from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.domain.errors import UnauthorizedError
from ledgerkit.domain.tenant import TenantService


def resolve_tenant_or_exit(ctx: click.Context) -> int:
    """Resolve the --tenant option to a tenant ID, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    root = ctx.find_root()
    service = TenantService(root.obj["db"])
    try:
        return service.resolve_tenant(root.obj.get("tenant_id")).id
    except UnauthorizedError as exc:
        handle_domain_error(ctx, exc)
