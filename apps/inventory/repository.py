"""Inventory module repository implementation."""

from typing import List, Optional
from framework.repository.base import BaseRepository, Page
from .models import InventoryTransaction


class InventoryTransactionRepository(BaseRepository[InventoryTransaction]):
    """Inventory transaction repository."""

    async def list_by_product(
        self,
        tenant_id: int,
        product_id: int,
        page: Optional[Page] = None
    ) -> List[InventoryTransaction]:
        """Movements of one product, newest first."""
        return await self.list(
            filters={"tenant_id": tenant_id, "product_id": product_id},
            page=page,
            order_by="id",
            descending=True,
        )
