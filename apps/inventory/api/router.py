from fastapi import APIRouter, Depends, Query
from typing import Optional
from pydantic import BaseModel, Field
from framework.repository.base import Page
from framework.repository.unit_of_work import UnitOfWork
from framework.response import ResponseModel
from framework.security import CurrentUser, get_current_user
from apps.dependencies import get_uow
from ..models import TransactionType
from ..service import InventoryService

router = APIRouter()

class TransactionCreate(BaseModel):
    product_id: int
    transaction_type: TransactionType
    quantity: int
    note: Optional[str] = Field(default=None, max_length=500)

def get_inventory_service(
    uow: UnitOfWork = Depends(get_uow),
    current_user: CurrentUser = Depends(get_current_user)
) -> InventoryService:
    """Dependency: create InventoryService."""
    return InventoryService(uow, current_user)

@router.post("/transactions")
async def record_transaction(
    payload: TransactionCreate,
    service: InventoryService = Depends(get_inventory_service)
):
    """Record a stock movement and apply it to the product in one commit."""
    transaction = await service.record(
        payload.product_id,
        payload.transaction_type,
        payload.quantity,
        note=payload.note,
    )
    return ResponseModel.success(data=transaction)

@router.get("/transactions")
async def list_transactions(
    product_id: int,
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    service: InventoryService = Depends(get_inventory_service)
):
    """Stock movements of one product, newest first."""
    transactions = await service.history(product_id, page=Page(limit=limit, offset=offset))
    return ResponseModel.success(data=transactions)
