from sqlmodel import SQLModel, Field
from sqlalchemy import UniqueConstraint
from typing import Optional
from decimal import Decimal
from datetime import datetime, timezone

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

class Category(SQLModel, table=True):
    __tablename__ = "categories"
    __table_args__ = (UniqueConstraint("tenant_id", "name", name="uq_categories_tenant_name"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    tenant_id: int = Field(foreign_key="tenants.id", index=True)
    name: str = Field(max_length=255)
    description: Optional[str] = Field(default=None, max_length=1000)

class Product(SQLModel, table=True):
    """Sellable item. `version` is the optimistic-concurrency token, bumped on every update."""
    __tablename__ = "products"
    __table_args__ = (UniqueConstraint("tenant_id", "sku", name="uq_products_tenant_sku"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    tenant_id: int = Field(foreign_key="tenants.id", index=True)
    category_id: Optional[int] = Field(default=None, foreign_key="categories.id", index=True)
    sku: str = Field(max_length=64, index=True)
    name: str = Field(max_length=255)
    description: Optional[str] = Field(default=None, max_length=2000)
    price: Decimal = Field(default=Decimal("0"), max_digits=12, decimal_places=2)
    stock: int = Field(default=0)
    is_active: bool = Field(default=True)
    version: int = Field(default=1)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
