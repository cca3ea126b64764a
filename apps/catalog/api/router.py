from fastapi import APIRouter, Depends, Query
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, field_validator
from framework.repository.base import Page
from framework.repository.unit_of_work import UnitOfWork
from framework.response import ResponseModel
from framework.security import CurrentUser, get_current_user, require_admin
from apps.dependencies import get_uow
from ..service import CatalogService

router = APIRouter()

class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=1000)

class ProductCreate(BaseModel):
    sku: str = Field(min_length=1, max_length=64)
    name: str = Field(min_length=1, max_length=255)
    price: Decimal = Field(ge=0, max_digits=12, decimal_places=2)
    stock: int = Field(default=0, ge=0)
    category_id: Optional[int] = None
    description: Optional[str] = Field(default=None, max_length=2000)

class ProductUpdate(BaseModel):
    """Partial update; `version` must be the one returned by the last read."""
    version: int = Field(ge=1)
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    price: Optional[Decimal] = Field(default=None, ge=0, max_digits=12, decimal_places=2)
    category_id: Optional[int] = None
    description: Optional[str] = Field(default=None, max_length=2000)
    is_active: Optional[bool] = None

    @field_validator("name", "price", "is_active")
    @classmethod
    def not_null(cls, value):
        # Omit the field to leave it unchanged; these columns are NOT NULL
        if value is None:
            raise ValueError("must not be null")
        return value

def get_page(
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0)
) -> Page:
    return Page(limit=limit, offset=offset)

def get_catalog_service(
    uow: UnitOfWork = Depends(get_uow),
    current_user: CurrentUser = Depends(get_current_user)
) -> CatalogService:
    """Dependency: create CatalogService."""
    return CatalogService(uow, current_user)

@router.get("/categories")
async def list_categories(
    page: Page = Depends(get_page),
    service: CatalogService = Depends(get_catalog_service)
):
    categories = await service.list_categories(page)
    return ResponseModel.success(data=categories)

@router.post("/categories", dependencies=[Depends(require_admin)])
async def create_category(
    payload: CategoryCreate,
    service: CatalogService = Depends(get_catalog_service)
):
    category = await service.create_category(payload.name, payload.description)
    return ResponseModel.success(data=category)

@router.get("/products")
async def list_products(
    page: Page = Depends(get_page),
    category_id: Optional[int] = None,
    q: Optional[str] = Query(default=None, max_length=100),
    include_inactive: bool = False,
    service: CatalogService = Depends(get_catalog_service)
):
    """List the tenant's products, newest first."""
    products = await service.list_products(page, category_id=category_id, q=q, include_inactive=include_inactive)
    return ResponseModel.success(data=products)

@router.post("/products", dependencies=[Depends(require_admin)])
async def create_product(
    payload: ProductCreate,
    service: CatalogService = Depends(get_catalog_service)
):
    product = await service.create_product(**payload.model_dump())
    return ResponseModel.success(data=product)

@router.get("/products/{product_id}")
async def get_product(
    product_id: int,
    service: CatalogService = Depends(get_catalog_service)
):
    product = await service.get_product(product_id)
    return ResponseModel.success(data=product)

@router.put("/products/{product_id}", dependencies=[Depends(require_admin)])
async def update_product(
    product_id: int,
    payload: ProductUpdate,
    service: CatalogService = Depends(get_catalog_service)
):
    """Update a product; a stale version answers with code 409."""
    changes = payload.model_dump(exclude_unset=True, exclude={"version"})
    product = await service.update_product(product_id, payload.version, changes)
    return ResponseModel.success(data=product)

@router.delete("/products/{product_id}", dependencies=[Depends(require_admin)])
async def delete_product(
    product_id: int,
    service: CatalogService = Depends(get_catalog_service)
):
    await service.delete_product(product_id)
    return ResponseModel.success(data={"id": product_id})
