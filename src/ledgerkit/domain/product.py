"""Product domain service."""

import logging
from typing import Optional

from ledgerkit.database.base import Database
from ledgerkit.domain.category import require_category
from ledgerkit.domain.dto import SelectItem
from ledgerkit.domain.entities import Product
from ledgerkit.domain import errors
from ledgerkit.domain.errors import BadRequestError, ForbiddenError, NotFoundError

logger = logging.getLogger(__name__)


def require_product(db: Database, tenant_id: int, product_id: int) -> Product:
    """Fetch a product the tenant owns.

    Raises:
        NotFoundError: If the product does not exist
        ForbiddenError: If it belongs to another tenant
    """
    product = db.get_product(product_id)
    if product is None:
        raise NotFoundError(errors.product_not_found(product_id))
    if product.tenant_id != tenant_id:
        raise ForbiddenError(errors.product_forbidden(product_id))
    return product


class ProductService:
    """Service for managing products and their category assignment."""

    def __init__(self, db: Database):
        """Initialize product service.

        Args:
            db: Database instance
        """
        self.db = db

    def _unit_id(self, tenant_id: int, name: Optional[str]) -> Optional[int]:
        """Look up a measure unit by name, creating it on first use."""
        if name is None or not name.strip():
            return None
        unit = self.db.get_measure_unit_by_name(tenant_id, name.strip())
        if unit is not None:
            return unit.id
        return self.db.create_measure_unit(tenant_id, name.strip())

    def create_product(
        self,
        tenant_id: int,
        name: str,
        category_id: Optional[int] = None,
        unit: Optional[str] = None,
        piece_size_unit: Optional[str] = None,
    ) -> int:
        """Create a product.

        Args:
            tenant_id: Owning tenant
            name: Product name
            category_id: Optional category ID
            unit: Optional measure unit name (e.g. "kg")
            piece_size_unit: Optional unit of a single piece's size

        Returns:
            Product ID

        Raises:
            BadRequestError: If the name is blank
            NotFoundError: If the category does not exist
            ForbiddenError: If the category belongs to another tenant
        """
        if not name or not name.strip():
            raise BadRequestError("Product name must not be empty")
        if category_id is not None:
            require_category(self.db, tenant_id, category_id)

        product_id = self.db.create_product(
            tenant_id=tenant_id,
            name=name.strip(),
            category_id=category_id,
            unit_id=self._unit_id(tenant_id, unit),
            piece_size_unit_id=self._unit_id(tenant_id, piece_size_unit),
        )
        logger.info("Tenant %s created product %s in category %s", tenant_id, product_id, category_id)
        return product_id

    def get_product(self, tenant_id: int, product_id: int) -> Product:
        """Get a product owned by the tenant."""
        return require_product(self.db, tenant_id, product_id)

    def select_items(self, tenant_id: int) -> list[SelectItem]:
        """List products as select items sorted by name."""
        return [SelectItem(id=p.id, label=p.name) for p in self.db.list_products(tenant_id)]

    def list_by_category(self, tenant_id: int, category_id: Optional[int]) -> list[Product]:
        """List products in a category; None lists uncategorized products."""
        return self.db.list_products_in_category(tenant_id, category_id)

    def list_not_in_category(self, tenant_id: int, category_id: Optional[int]) -> list[Product]:
        """List products outside a category.

        For a concrete category this includes uncategorized products; for
        None it lists every categorized product.
        """
        return self.db.list_products_not_in_category(tenant_id, category_id)

    def move_products(
        self, tenant_id: int, source_category_id: int, target_category_id: Optional[int]
    ) -> int:
        """Move every product from one category to another (or to uncategorized).

        Returns:
            Number of products moved

        Raises:
            NotFoundError: If the target category does not exist
            ForbiddenError: If the target category belongs to another tenant
        """
        if target_category_id is not None:
            require_category(self.db, tenant_id, target_category_id)

        moved = self.db.reassign_products(tenant_id, source_category_id, target_category_id)
        logger.info(
            "Tenant %s moved %d products from category %s to %s",
            tenant_id,
            moved,
            source_category_id,
            target_category_id,
        )
        return moved

    def update_product_category(
        self, tenant_id: int, product_id: int, category_id: Optional[int]
    ) -> Product:
        """Assign a single product to a category (None to uncategorize).

        Raises:
            NotFoundError: If the product or category does not exist
            ForbiddenError: If either belongs to another tenant
        """
        product = require_product(self.db, tenant_id, product_id)
        if category_id is not None:
            require_category(self.db, tenant_id, category_id)

        self.db.update_product_category(product_id, category_id)
        logger.info("Tenant %s set category of product %s to %s", tenant_id, product_id, category_id)
        return Product(
            id=product.id,
            tenant_id=product.tenant_id,
            name=product.name,
            category_id=category_id,
            unit_id=product.unit_id,
            piece_size_unit_id=product.piece_size_unit_id,
        )
