"""Catalog module repository implementations."""

from typing import List, Optional
from sqlmodel import select
from framework.repository.base import BaseRepository, Page
from .models import Category, Product


class CategoryRepository(BaseRepository[Category]):
    """Category repository."""

    async def get_by_name(self, tenant_id: int, name: str) -> Optional[Category]:
        return await self.find_one(tenant_id=tenant_id, name=name)


class ProductRepository(BaseRepository[Product]):
    """Product repository; every query is tenant-scoped."""

    async def get_by_id_and_tenant(self, product_id: int, tenant_id: int) -> Optional[Product]:
        """Get product by id within a tenant (tenant isolation)."""
        return await self.find_one(id=product_id, tenant_id=tenant_id)

    async def get_by_sku(self, tenant_id: int, sku: str) -> Optional[Product]:
        return await self.find_one(tenant_id=tenant_id, sku=sku)

    async def search(
        self,
        tenant_id: int,
        page: Optional[Page] = None,
        category_id: Optional[int] = None,
        name_contains: Optional[str] = None,
        active_only: bool = True,
    ) -> List[Product]:
        """
        List a tenant's products, newest first.

        Args:
            tenant_id: Tenant ID (tenant isolation)
            page: Pagination window
            category_id: Optional category filter
            name_contains: Optional case-insensitive name fragment
            active_only: Skip deactivated products

        Returns:
            List of products (by creation time descending)
        """
        page = page or Page()
        statement = select(Product).where(Product.tenant_id == tenant_id)
        if category_id is not None:
            statement = statement.where(Product.category_id == category_id)
        if name_contains:
            statement = statement.where(Product.name.ilike(f"%{name_contains}%"))
        if active_only:
            statement = statement.where(Product.is_active == True)  # noqa: E712

        statement = statement.order_by(Product.created_at.desc(), Product.id.desc())
        statement = statement.limit(page.limit).offset(page.offset)

        result = await self.context.exec(statement)
        return self._detached_all(result.all())
