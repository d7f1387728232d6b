"""Category management commands."""

import click

from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.cli.tenant_resolution import resolve_tenant_or_exit
from ledgerkit.domain.category import CategoryService
from ledgerkit.domain.errors import DomainError


def print_category_tree(categories: list[dict]) -> None:
    """Print a nested category tree, one indented line per category."""
    stack = [(cat, 0) for cat in reversed(categories)]
    while stack:
        cat, indent = stack.pop()
        click.echo(f"{'  ' * indent}{cat['name']} (ID: {cat['id']})")
        stack.extend((child, indent + 1) for child in reversed(cat.get("children", [])))


@click.group()
def category_group():
    """Manage categories."""
    pass


@category_group.command("list")
@click.pass_context
def list_categories(ctx):
    """List all categories in tree format."""
    tenant_id = resolve_tenant_or_exit(ctx)
    tree = CategoryService(ctx.obj["db"]).get_category_tree(tenant_id)
    if not tree:
        click.echo("No categories found.")
        return

    click.echo("\nCategories:")
    print_category_tree(tree)


@category_group.command("select-items")
@click.pass_context
def category_select_items(ctx):
    """List categories as 'ID<TAB>path' pairs."""
    tenant_id = resolve_tenant_or_exit(ctx)
    for item in CategoryService(ctx.obj["db"]).select_items(tenant_id):
        click.echo(f"{item.id}\t{item.label}")


@category_group.command("create")
@click.argument("name")
@click.option("--parent", "parent_id", type=int, help="Parent category ID")
@click.pass_context
def create_category(ctx, name: str, parent_id: int | None):
    """Create a new category."""
    tenant_id = resolve_tenant_or_exit(ctx)
    service = CategoryService(ctx.obj["db"])
    try:
        category_id = service.create_category(tenant_id, name=name, parent_id=parent_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    parent_str = f" under '{service.format_category_path(tenant_id, parent_id)}'" if parent_id else ""
    click.echo(f"Created category '{name}'{parent_str} (ID: {category_id})")


@category_group.command("update")
@click.argument("category_id", type=int)
@click.option("--name", help="New name")
@click.option("--parent", "parent_id", type=int, help="New parent category ID")
@click.option("--root", "to_root", is_flag=True, help="Move the category to the top level")
@click.pass_context
def update_category(ctx, category_id: int, name: str | None, parent_id: int | None, to_root: bool):
    """Rename a category or move it under another parent.

    Examples:
        ledgerkit category update 4 --name "Groceries"
        ledgerkit category update 4 --parent 2
        ledgerkit category update 4 --root
    """
    tenant_id = resolve_tenant_or_exit(ctx)
    service = CategoryService(ctx.obj["db"])
    try:
        service.update_category(
            tenant_id, category_id, name=name, parent_id=parent_id, clear_parent=to_root
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated category {category_id}: {service.format_category_path(tenant_id, category_id)}")


@category_group.command("delete")
@click.argument("category_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_category(ctx, category_id: int, yes: bool):
    """Delete a category and all of its subcategories.

    Fails if any product still belongs to the category or one of its
    subcategories; move them first with 'product move'.
    """
    tenant_id = resolve_tenant_or_exit(ctx)
    service = CategoryService(ctx.obj["db"])
    try:
        path = service.format_category_path(tenant_id, service.get_category(tenant_id, category_id).id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not yes and not click.confirm(f"Delete category '{path}' and all its subcategories?"):
        click.echo("Deletion cancelled.")
        return

    try:
        deleted = service.delete_category(tenant_id, category_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted category '{path}' ({len(deleted)} categor{'y' if len(deleted) == 1 else 'ies'} removed)")


@category_group.command("merge")
@click.argument("source_id", type=int)
@click.option("--into", "target_id", type=int, help="Target category ID (omit to leave products uncategorized)")
@click.pass_context
def merge_category(ctx, source_id: int, target_id: int | None):
    """Move all products of SOURCE_ID into another category and delete SOURCE_ID."""
    tenant_id = resolve_tenant_or_exit(ctx)
    service = CategoryService(ctx.obj["db"])
    try:
        moved = service.merge_category(tenant_id, source_id, target_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    target_str = f"category {target_id}" if target_id is not None else "uncategorized"
    click.echo(f"Merged category {source_id} into {target_str} ({moved} products moved)")


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
