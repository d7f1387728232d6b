"""Product management commands."""

import click

from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.cli.tenant_resolution import resolve_tenant_or_exit
from ledgerkit.domain.category import CategoryService
from ledgerkit.domain.entities import Product
from ledgerkit.domain.errors import DomainError
from ledgerkit.domain.product import ProductService


def _print_products(ctx, tenant_id: int, products: list[Product], empty_message: str) -> None:
    if not products:
        click.echo(empty_message)
        return
    tree = CategoryService(ctx.obj["db"]).get_tree_view(tenant_id)
    for product in products:
        category = tree.compute_path(product.category_id) if product.category_id is not None else "-"
        click.echo(f"ID: {product.id:3d} | {product.name:30s} | Category: {category}")


@click.group()
def product_group():
    """Manage products and services."""
    pass


@product_group.command("create")
@click.argument("name")
@click.option("--category", "category_id", type=int, help="Category ID")
@click.option("--unit", help="Measure unit (e.g. kg, pcs)")
@click.option("--piece-size-unit", help="Unit of a single piece's size")
@click.pass_context
def create_product(ctx, name: str, category_id: int | None, unit: str | None, piece_size_unit: str | None):
    """Create a product or service."""
    tenant_id = resolve_tenant_or_exit(ctx)
    service = ProductService(ctx.obj["db"])
    try:
        product_id = service.create_product(
            tenant_id, name=name, category_id=category_id, unit=unit, piece_size_unit=piece_size_unit
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created product '{name}' (ID: {product_id})")


@product_group.command("list")
@click.pass_context
def list_products(ctx):
    """List products as 'ID<TAB>name' pairs."""
    tenant_id = resolve_tenant_or_exit(ctx)
    items = ProductService(ctx.obj["db"]).select_items(tenant_id)
    if not items:
        click.echo("No products found.")
        return
    for item in items:
        click.echo(f"{item.id}\t{item.label}")


@product_group.command("by-category")
@click.argument("category_id", type=int, required=False)
@click.pass_context
def products_by_category(ctx, category_id: int | None):
    """List products in a category (omit the ID for uncategorized products)."""
    tenant_id = resolve_tenant_or_exit(ctx)
    products = ProductService(ctx.obj["db"]).list_by_category(tenant_id, category_id)
    _print_products(ctx, tenant_id, products, "No products found.")


@product_group.command("not-in-category")
@click.argument("category_id", type=int, required=False)
@click.pass_context
def products_not_in_category(ctx, category_id: int | None):
    """List products outside a category (omit the ID for all categorized products)."""
    tenant_id = resolve_tenant_or_exit(ctx)
    products = ProductService(ctx.obj["db"]).list_not_in_category(tenant_id, category_id)
    _print_products(ctx, tenant_id, products, "No products found.")


@product_group.command("move")
@click.argument("source_category_id", type=int)
@click.option("--to", "target_category_id", type=int, help="Target category ID (omit to uncategorize)")
@click.pass_context
def move_products(ctx, source_category_id: int, target_category_id: int | None):
    """Move every product of a category into another category."""
    tenant_id = resolve_tenant_or_exit(ctx)
    service = ProductService(ctx.obj["db"])
    try:
        moved = service.move_products(tenant_id, source_category_id, target_category_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Moved {moved} product{'s' if moved != 1 else ''}")


@product_group.command("set-category")
@click.argument("product_id", type=int)
@click.argument("category_id", type=int, required=False)
@click.pass_context
def set_product_category(ctx, product_id: int, category_id: int | None):
    """Assign a product to a category (omit CATEGORY_ID to uncategorize)."""
    tenant_id = resolve_tenant_or_exit(ctx)
    service = ProductService(ctx.obj["db"])
    try:
        product = service.update_product_category(tenant_id, product_id, category_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    if category_id is None:
        click.echo(f"Product '{product.name}' is now uncategorized")
    else:
        path = CategoryService(ctx.obj["db"]).format_category_path(tenant_id, category_id)
        click.echo(f"Product '{product.name}' moved to '{path}'")


def register_commands(cli):
    """Register product commands with main CLI."""
    cli.add_command(product_group, name="product")
