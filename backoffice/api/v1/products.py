# ==============================================================================
# CATALOG ENDPOINTS - Categories, Products and Stock
# ==============================================================================

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Query, status

from backoffice.api.dependencies import CategoryServiceDep, ProductServiceDep
from backoffice.core.constants import APIConstants
from backoffice.schemas.base import APIResponse
from backoffice.schemas.catalog import (
    CategoryCreate,
    CategoryResponse,
    InventorySummary,
    ProductCreate,
    ProductResponse,
    ProductUpdate,
    StockAdjustment,
)

router = APIRouter(tags=["Catalog"])


# ==============================================================================
# CATEGORIES
# ==============================================================================

@router.get(
    "/categories",
    response_model=APIResponse[List[CategoryResponse]],
    summary="List categories",
)
async def list_categories(
    service: CategoryServiceDep,
) -> APIResponse[List[CategoryResponse]]:
    return APIResponse.ok(data=await service.list_categories())


@router.post(
    "/categories",
    response_model=APIResponse[CategoryResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create category",
)
async def create_category(
    schema: CategoryCreate,
    service: CategoryServiceDep,
) -> APIResponse[CategoryResponse]:
    category = await service.create(schema)
    return APIResponse.ok(data=category, message="Category created successfully")


# ==============================================================================
# PRODUCTS
# ==============================================================================

@router.get(
    "/products",
    response_model=APIResponse[List[ProductResponse]],
    summary="List products",
    description="List products, optionally of one category or only active ones.",
)
async def list_products(
    service: ProductServiceDep,
    category_id: Optional[str] = Query(None),
    active_only: bool = Query(False),
    skip: int = Query(0, ge=0),
    limit: int = Query(APIConstants.DEFAULT_PAGE_SIZE, ge=1, le=APIConstants.MAX_PAGE_SIZE),
) -> APIResponse[List[ProductResponse]]:
    products = await service.list_products(
        category_id=category_id,
        active_only=active_only,
        skip=skip,
        limit=limit,
    )
    return APIResponse.ok(data=products)


@router.get(
    "/products/low-stock",
    response_model=APIResponse[InventorySummary],
    summary="Low-stock report",
)
async def low_stock(
    service: ProductServiceDep,
    threshold: Optional[int] = Query(None, ge=0),
) -> APIResponse[InventorySummary]:
    return APIResponse.ok(data=await service.inventory_summary(threshold))


@router.get(
    "/products/{product_id}",
    response_model=APIResponse[ProductResponse],
    summary="Get product",
)
async def get_product(
    product_id: str,
    service: ProductServiceDep,
) -> APIResponse[ProductResponse]:
    return APIResponse.ok(data=await service.get_by_id(product_id))


@router.post(
    "/products",
    response_model=APIResponse[ProductResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create product",
)
async def create_product(
    schema: ProductCreate,
    service: ProductServiceDep,
) -> APIResponse[ProductResponse]:
    product = await service.create(schema)
    return APIResponse.ok(data=product, message="Product created successfully")


@router.patch(
    "/products/{product_id}",
    response_model=APIResponse[ProductResponse],
    summary="Update product",
)
async def update_product(
    product_id: str,
    schema: ProductUpdate,
    service: ProductServiceDep,
) -> APIResponse[ProductResponse]:
    product = await service.update(product_id, schema)
    return APIResponse.ok(data=product, message="Product updated successfully")


@router.post(
    "/products/{product_id}/stock",
    response_model=APIResponse[ProductResponse],
    summary="Adjust stock",
    description="Add or remove units; stock never drops below zero.",
)
async def adjust_stock(
    product_id: str,
    schema: StockAdjustment,
    service: ProductServiceDep,
) -> APIResponse[ProductResponse]:
    product = await service.adjust_stock(product_id, schema.delta)
    return APIResponse.ok(data=product, message="Stock updated")
