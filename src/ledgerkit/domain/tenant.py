"""Tenant domain service."""

import logging
from typing import Any

from ledgerkit.database.base import Database
from ledgerkit.domain.entities import Tenant
from ledgerkit.domain.errors import BadRequestError, UnauthorizedError, tenant_not_resolved
from ledgerkit.utils.amount_parser import parse_int_or_none

logger = logging.getLogger(__name__)


class TenantService:
    """Service for creating tenants and resolving the calling tenant."""

    def __init__(self, db: Database):
        """Initialize tenant service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_tenant(self, name: str) -> int:
        """Create a tenant.

        Raises:
            BadRequestError: If the name is blank
        """
        if not name or not name.strip():
            raise BadRequestError("Tenant name must not be empty")
        tenant_id = self.db.create_tenant(name.strip())
        logger.info("Created tenant %s (%s)", tenant_id, name.strip())
        return tenant_id

    def resolve_tenant(self, tenant_id: Any) -> Tenant:
        """Resolve an already-authenticated tenant id to a tenant.

        Credential and session handling happen outside this package; callers
        hand over whatever tenant id their identity layer produced.

        Raises:
            UnauthorizedError: If the id is missing, malformed or unknown
        """
        parsed = parse_int_or_none(tenant_id)
        tenant = self.db.get_tenant(parsed) if parsed is not None else None
        if tenant is None:
            raise UnauthorizedError(tenant_not_resolved(tenant_id))
        return tenant
