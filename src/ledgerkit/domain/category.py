"""Category domain service.

All mutations go through ownership checks and keep each tenant's categories
a forest: no category may become its own ancestor, and a category is only
deleted together with its whole subtree once no product references any of
it.
"""

import logging
from typing import Any, Optional

from ledgerkit.database.base import Database
from ledgerkit.domain.category_tree import CategoryTree
from ledgerkit.domain.dto import SelectItem
from ledgerkit.domain.entities import Category
from ledgerkit.domain import errors
from ledgerkit.domain.errors import BadRequestError, ForbiddenError, NotFoundError

logger = logging.getLogger(__name__)


def require_category(db: Database, tenant_id: int, category_id: int) -> Category:
    """Fetch a category the tenant owns.

    Raises:
        NotFoundError: If the category does not exist
        ForbiddenError: If it belongs to another tenant
    """
    category = db.get_category(category_id)
    if category is None:
        raise NotFoundError(errors.category_not_found(category_id))
    if category.tenant_id != tenant_id:
        raise ForbiddenError(errors.category_forbidden(category_id))
    return category


def _clean_name(name: Optional[str]) -> str:
    if name is None or not name.strip():
        raise BadRequestError("Category name must not be empty")
    return name.strip()


class CategoryService:
    """Service for managing categories."""

    def __init__(self, db: Database):
        """Initialize category service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_tree_view(self, tenant_id: int) -> CategoryTree:
        """Load the tenant's categories into a tree view."""
        return CategoryTree(self.db.list_categories(tenant_id))

    def get_category_tree(self, tenant_id: int) -> list[dict[str, Any]]:
        """Get the tenant's full category tree.

        Returns:
            List of root categories (ascending id) with nested children
        """
        return self.get_tree_view(tenant_id).build_tree()

    def select_items(self, tenant_id: int) -> list[SelectItem]:
        """List categories as select items labelled with their full path."""
        return self.get_tree_view(tenant_id).select_items()

    def format_category_path(self, tenant_id: int, category_id: int) -> str:
        """Get full path for a category (e.g. "Food > Dairy"), or "" if unknown."""
        return self.get_tree_view(tenant_id).compute_path(category_id)

    def get_category(self, tenant_id: int, category_id: int) -> Category:
        """Get a category owned by the tenant.

        Raises:
            NotFoundError: If the category does not exist
            ForbiddenError: If it belongs to another tenant
        """
        return require_category(self.db, tenant_id, category_id)

    def create_category(self, tenant_id: int, name: str, parent_id: Optional[int] = None) -> int:
        """Create a category.

        Args:
            tenant_id: Owning tenant
            name: Category name
            parent_id: Optional parent category ID

        Returns:
            Category ID

        Raises:
            BadRequestError: If the name is blank
            NotFoundError: If the parent does not exist
            ForbiddenError: If the parent belongs to another tenant
        """
        clean_name = _clean_name(name)
        if parent_id is not None:
            require_category(self.db, tenant_id, parent_id)

        category_id = self.db.create_category(tenant_id=tenant_id, name=clean_name, parent_id=parent_id)
        logger.info("Tenant %s created category %s under %s", tenant_id, category_id, parent_id)
        return category_id

    def update_category(
        self,
        tenant_id: int,
        category_id: int,
        name: Optional[str] = None,
        parent_id: Optional[int] = None,
        clear_parent: bool = False,
    ) -> Category:
        """Rename and/or move a category.

        Args:
            tenant_id: Owning tenant
            category_id: Category to update
            name: New name, or None to keep the current one
            parent_id: New parent, or None to keep the current one
            clear_parent: If True, move the category to the root

        Returns:
            The updated category

        Raises:
            BadRequestError: If the name is blank or both parent_id and clear_parent are given
            NotFoundError: If the category or the new parent does not exist
            ForbiddenError: On foreign ownership, self-parenting or a cycle
        """
        category = require_category(self.db, tenant_id, category_id)

        new_name = category.name if name is None else _clean_name(name)

        if clear_parent:
            if parent_id is not None:
                raise BadRequestError("Cannot set both parent_id and clear_parent")
            new_parent_id = None
        elif parent_id is not None:
            if parent_id == category_id:
                raise ForbiddenError(errors.category_self_parent(category_id))
            require_category(self.db, tenant_id, parent_id)
            if self.get_tree_view(tenant_id).is_descendant(category_id, parent_id):
                raise ForbiddenError(errors.category_cycle(category_id, parent_id))
            new_parent_id = parent_id
        else:
            new_parent_id = category.parent_id

        self.db.update_category(category_id, name=new_name, parent_id=new_parent_id)
        logger.info(
            "Tenant %s updated category %s (name=%r, parent=%s)",
            tenant_id,
            category_id,
            new_name,
            new_parent_id,
        )
        return Category(id=category_id, tenant_id=tenant_id, name=new_name, parent_id=new_parent_id)

    def _check_no_products(self, tree: CategoryTree, category_id: int) -> None:
        """Raise if the category or any descendant is referenced by a product.

        Depth-first, stopping at the first hit.
        """
        if self.db.category_has_products(category_id):
            raise ForbiddenError(errors.category_has_products(category_id))
        for descendant_id in tree.descendant_ids(category_id):
            if self.db.category_has_products(descendant_id):
                raise ForbiddenError(errors.subcategory_has_products(category_id, descendant_id))

    def _delete_subtree(self, tree: CategoryTree, category_id: int) -> list[int]:
        self._check_no_products(tree, category_id)
        deleted = tree.post_order(category_id)
        for subtree_id in deleted:
            self.db.delete_category(subtree_id)
        return deleted

    def delete_category(self, tenant_id: int, category_id: int) -> list[int]:
        """Delete a category together with all of its subcategories.

        Runs as one atomic unit: either the whole subtree is removed or
        nothing is.

        Returns:
            IDs of the deleted categories, children before parents

        Raises:
            NotFoundError: If the category does not exist
            ForbiddenError: On foreign ownership or if any product references the subtree
        """
        require_category(self.db, tenant_id, category_id)

        with self.db.atomic():
            deleted = self._delete_subtree(self.get_tree_view(tenant_id), category_id)

        logger.info("Tenant %s deleted categories %s", tenant_id, deleted)
        return deleted

    def merge_category(
        self, tenant_id: int, source_category_id: int, target_category_id: Optional[int]
    ) -> int:
        """Move all products of a category into another one, then delete it.

        Both steps share one atomic unit, so a failed delete also undoes the
        move. A ``target_category_id`` of None leaves the products
        uncategorized.

        Returns:
            Number of products moved

        Raises:
            NotFoundError: If source or target does not exist
            ForbiddenError: On foreign ownership, a target inside the source
                subtree, or products left in source subcategories
        """
        require_category(self.db, tenant_id, source_category_id)
        tree = self.get_tree_view(tenant_id)
        if target_category_id is not None:
            require_category(self.db, tenant_id, target_category_id)
            if target_category_id == source_category_id or tree.is_descendant(
                source_category_id, target_category_id
            ):
                raise ForbiddenError(
                    errors.merge_into_subtree(source_category_id, target_category_id)
                )

        with self.db.atomic():
            moved = self.db.reassign_products(tenant_id, source_category_id, target_category_id)
            self._delete_subtree(tree, source_category_id)

        logger.info(
            "Tenant %s merged category %s into %s (%d products moved)",
            tenant_id,
            source_category_id,
            target_category_id,
            moved,
        )
        return moved
