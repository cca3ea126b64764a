from decimal import Decimal
from typing import Any, Dict, List, Optional
from framework.logging.logger import get_logger
from framework.exceptions.handler import BusinessException
from framework.exceptions.persistence import NotFound
from framework.repository.base import Page
from framework.repository.unit_of_work import UnitOfWork
from framework.security import CurrentUser
from .models import Category, Product, utcnow
from .repository import CategoryRepository, ProductRepository

logger = get_logger("catalog_service")

# Fields a client may change on an existing product
MUTABLE_PRODUCT_FIELDS = ("category_id", "name", "description", "price", "is_active")


class CatalogService:
    """Categories and products of the current user's tenant."""

    def __init__(self, uow: UnitOfWork, current_user: CurrentUser):
        self.uow = uow
        self.current_user = current_user

    @property
    def tenant_id(self) -> int:
        return self.current_user.tenant_id

    @property
    def categories(self) -> CategoryRepository:
        return self.uow.repository(Category)

    @property
    def products(self) -> ProductRepository:
        return self.uow.repository(Product)

    async def list_categories(self, page: Optional[Page] = None) -> List[Category]:
        return await self.categories.list(filters={"tenant_id": self.tenant_id}, page=page, order_by="name")

    async def create_category(self, name: str, description: Optional[str] = None) -> Category:
        if await self.categories.get_by_name(self.tenant_id, name):
            raise BusinessException(f"Category '{name}' already exists", code=400)
        category = self.categories.create(
            Category(tenant_id=self.tenant_id, name=name, description=description)
        )
        await self.uow.commit()
        logger.info(f"Category {name} created for tenant {self.tenant_id}")
        return category

    async def list_products(
        self,
        page: Optional[Page] = None,
        category_id: Optional[int] = None,
        q: Optional[str] = None,
        include_inactive: bool = False,
    ) -> List[Product]:
        return await self.products.search(
            self.tenant_id,
            page=page,
            category_id=category_id,
            name_contains=q,
            active_only=not include_inactive,
        )

    async def get_product(self, product_id: int) -> Product:
        """Tenant-scoped read; products of other tenants are reported as not found."""
        product = await self.products.get_by_id_and_tenant(product_id, self.tenant_id)
        if product is None:
            raise NotFound(Product, product_id)
        return product

    async def create_product(
        self,
        sku: str,
        name: str,
        price: Decimal,
        stock: int = 0,
        category_id: Optional[int] = None,
        description: Optional[str] = None,
    ) -> Product:
        if await self.products.get_by_sku(self.tenant_id, sku):
            raise BusinessException(f"SKU '{sku}' already exists", code=400)
        if category_id is not None:
            await self._check_category(category_id)

        product = self.products.create(
            Product(
                tenant_id=self.tenant_id,
                sku=sku,
                name=name,
                price=price,
                stock=stock,
                category_id=category_id,
                description=description,
            )
        )
        await self.uow.commit()
        logger.info(f"Product {sku} created for tenant {self.tenant_id}")
        return product

    async def update_product(self, product_id: int, version: int, changes: Dict[str, Any]) -> Product:
        """Apply changes on top of the version the client last read."""
        product = await self.get_product(product_id)
        if changes.get("category_id") is not None:
            await self._check_category(changes["category_id"])

        for field, value in changes.items():
            if field in MUTABLE_PRODUCT_FIELDS:
                setattr(product, field, value)
        product.version = version
        product.updated_at = utcnow()

        self.products.update(product)
        await self.uow.commit()
        logger.info(f"Product {product_id} updated to version {product.version}")
        return product

    async def delete_product(self, product_id: int) -> None:
        await self.get_product(product_id)
        self.products.delete(product_id)
        await self.uow.commit()
        logger.info(f"Product {product_id} deleted from tenant {self.tenant_id}")

    async def _check_category(self, category_id: int) -> None:
        category = await self.categories.find_one(id=category_id, tenant_id=self.tenant_id)
        if category is None:
            raise BusinessException(f"Category {category_id} does not exist", code=400)
