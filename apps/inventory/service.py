from typing import List, Optional
from framework.logging.logger import get_logger
from framework.exceptions.handler import BusinessException
from framework.exceptions.persistence import NotFound
from framework.repository.base import Page
from framework.repository.unit_of_work import UnitOfWork
from framework.security import CurrentUser
from apps.catalog.models import Product, utcnow
from apps.catalog.repository import ProductRepository
from .models import InventoryTransaction, TransactionType
from .repository import InventoryTransactionRepository

logger = get_logger("inventory_service")


def stock_delta(transaction_type: TransactionType, quantity: int) -> int:
    """Signed stock change: sales remove stock, receipts and returns add it, adjustments are signed."""
    if transaction_type is TransactionType.ADJUSTMENT:
        if quantity == 0:
            raise BusinessException("Adjustment quantity cannot be zero", code=400)
        return quantity
    if quantity <= 0:
        raise BusinessException(f"{transaction_type.value} quantity must be positive", code=400)
    return -quantity if transaction_type is TransactionType.SALE else quantity


class InventoryService:
    """Stock movements; the movement row and the product stock change commit together."""

    def __init__(self, uow: UnitOfWork, current_user: CurrentUser):
        self.uow = uow
        self.current_user = current_user

    @property
    def products(self) -> ProductRepository:
        return self.uow.repository(Product)

    @property
    def transactions(self) -> InventoryTransactionRepository:
        return self.uow.repository(InventoryTransaction)

    async def record(
        self,
        product_id: int,
        transaction_type: TransactionType,
        quantity: int,
        note: Optional[str] = None,
    ) -> InventoryTransaction:
        tenant_id = self.current_user.tenant_id
        delta = stock_delta(transaction_type, quantity)

        product = await self.products.get_by_id_and_tenant(product_id, tenant_id)
        if product is None:
            raise NotFound(Product, product_id)
        if product.stock + delta < 0:
            raise BusinessException(
                f"Insufficient stock for product {product_id}: {product.stock} available",
                code=400,
            )

        product.stock += delta
        product.updated_at = utcnow()
        self.products.update(product)
        transaction = self.transactions.create(
            InventoryTransaction(
                tenant_id=tenant_id,
                product_id=product_id,
                transaction_type=transaction_type,
                quantity=delta,
                stock_after=product.stock,
                note=note,
                created_by=self.current_user.id,
            )
        )
        await self.uow.commit()
        logger.info(
            f"{transaction_type.value} of {delta:+d} on product {product_id}, stock now {product.stock}"
        )
        return transaction

    async def history(self, product_id: int, page: Optional[Page] = None) -> List[InventoryTransaction]:
        tenant_id = self.current_user.tenant_id
        if await self.products.get_by_id_and_tenant(product_id, tenant_id) is None:
            raise NotFound(Product, product_id)
        return await self.transactions.list_by_product(tenant_id, product_id, page=page)
