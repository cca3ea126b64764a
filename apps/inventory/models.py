from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime, timezone
from enum import Enum

class TransactionType(str, Enum):
    """Why stock moved."""
    RECEIPT = "RECEIPT"
    SALE = "SALE"
    RETURN = "RETURN"
    ADJUSTMENT = "ADJUSTMENT"

class InventoryTransaction(SQLModel, table=True):
    """One stock movement; `quantity` is the signed change applied to the product's stock."""
    __tablename__ = "inventory_transactions"

    id: Optional[int] = Field(default=None, primary_key=True)
    tenant_id: int = Field(foreign_key="tenants.id", index=True)
    product_id: int = Field(foreign_key="products.id", index=True)
    transaction_type: TransactionType = Field(description="Movement type")
    quantity: int = Field(description="Signed stock delta")
    stock_after: int = Field(description="Product stock after this movement")
    note: Optional[str] = Field(default=None, max_length=500)
    created_by: int = Field(foreign_key="users.id")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
