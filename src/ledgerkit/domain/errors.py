"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class NotFoundError(DomainError):
    """Requested domain entity does not exist (or is not visible to the tenant)."""


class ForbiddenError(DomainError):
    """Operation not allowed: cross-tenant access or a taxonomy violation."""


class BadRequestError(DomainError):
    """Invalid input or failed validation in domain logic."""


class UnauthorizedError(DomainError):
    """Caller identity could not be resolved to a tenant."""


def tenant_not_resolved(tenant_id) -> str:
    """Return message for a missing or unknown tenant."""
    if tenant_id is None:
        return "No tenant given; pass --tenant or set LEDGERKIT_TENANT_ID"
    return f"Tenant {tenant_id} not found"


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def accounts_not_owned() -> str:
    """Return message when a transaction references a foreign or missing account."""
    return "One of the accounts not found or does not belong to the tenant"


def currency_not_found(code: str) -> str:
    """Return message for missing currency by code."""
    return f"Currency '{code}' not found"


def category_not_found(category_id: int) -> str:
    """Return message for missing category by ID."""
    return f"Category {category_id} not found"


def category_forbidden(category_id: int) -> str:
    """Return message for a category owned by another tenant."""
    return f"Category {category_id} does not belong to this tenant"


def category_self_parent(category_id: int) -> str:
    """Return message for an attempt to make a category its own parent."""
    return f"Category {category_id} cannot be its own parent"


def category_cycle(category_id: int, parent_id: int) -> str:
    """Return message for a reparent that would create a cycle."""
    return (
        f"Cannot move category {category_id} under {parent_id}: "
        f"{parent_id} is one of its subcategories"
    )


def category_has_products(category_id: int) -> str:
    """Return message when the category itself still has products."""
    return f"Cannot delete category {category_id}: it still has products"


def subcategory_has_products(category_id: int, subcategory_id: int) -> str:
    """Return message when a descendant of the category still has products."""
    return (
        f"Cannot delete category {category_id}: "
        f"its subcategory {subcategory_id} still has products"
    )


def merge_into_subtree(source_id: int, target_id: int) -> str:
    """Return message for a merge whose target lies inside the source subtree."""
    return f"Cannot merge category {source_id} into {target_id}: target is inside the merged subtree"


def product_not_found(product_id: int) -> str:
    """Return message for missing product."""
    return f"Product {product_id} not found"


def product_forbidden(product_id: int) -> str:
    """Return message for a product owned by another tenant."""
    return f"Product {product_id} does not belong to this tenant"


def amount_mismatch(amount, calculated) -> str:
    """Return message when details do not add up to the transaction amount."""
    return (
        f"Total amount does not match the sum of details "
        f"(declared {amount}, calculated {calculated})"
    )
