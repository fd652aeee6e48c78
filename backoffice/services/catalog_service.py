# ==============================================================================
# CATALOG SERVICE - Categories, Products and Stock
# ==============================================================================

from __future__ import annotations

import logging
from typing import Any, List, Optional

from backoffice.core.constants import DatabaseConstants
from backoffice.core.settings import settings
from backoffice.database.adapters.base_adapter import BaseDatabaseAdapter
from backoffice.schemas.catalog import (
    CategoryCreate,
    CategoryResponse,
    InventorySummary,
    ProductCreate,
    ProductResponse,
    ProductUpdate,
)
from backoffice.services.base_service import BaseService
from backoffice.utils.helpers import field_value

logger = logging.getLogger(__name__)


class CategoryService(BaseService[CategoryCreate, CategoryCreate, CategoryResponse]):
    """Category listing and maintenance."""

    _resource_name = "Category"

    def __init__(self, adapter: BaseDatabaseAdapter) -> None:
        super().__init__(adapter, DatabaseConstants.CATEGORIES_COLLECTION)

    def _to_response(self, entity: Any) -> CategoryResponse:
        if isinstance(entity, dict):
            return CategoryResponse.model_validate(entity)
        return CategoryResponse.model_validate(entity, from_attributes=True)

    async def list_categories(self) -> List[CategoryResponse]:
        return await self.get_all(limit=DatabaseConstants.MAX_SCAN_LIMIT, sort_by="name")


class ProductService(BaseService[ProductCreate, ProductUpdate, ProductResponse]):
    """
    Product catalog reader with stock management.

    Stock never goes below zero through this service.
    """

    _resource_name = "Product"

    def __init__(self, adapter: BaseDatabaseAdapter) -> None:
        super().__init__(adapter, DatabaseConstants.PRODUCTS_COLLECTION)

    def _to_response(self, entity: Any) -> ProductResponse:
        if isinstance(entity, dict):
            return ProductResponse.model_validate(entity)
        return ProductResponse.model_validate(entity, from_attributes=True)

    async def list_products(
        self,
        category_id: Optional[str] = None,
        active_only: bool = False,
        skip: int = 0,
        limit: int = 100,
    ) -> List[ProductResponse]:
        """
        List products sorted by name.

        Args:
            category_id: Only products of this category
            active_only: Hide products that are not listed
            skip: Records to skip
            limit: Maximum records
        """
        filters = {}
        if category_id:
            filters["category_id"] = category_id
        if active_only:
            filters["is_active"] = True

        return await self.get_all(
            skip=skip,
            limit=limit,
            filters=filters or None,
            sort_by="name",
        )

    async def inventory_summary(self, threshold: Optional[int] = None) -> InventorySummary:
        """Products at or below the low-stock threshold, lowest first."""
        threshold = settings.LOW_STOCK_THRESHOLD if threshold is None else threshold
        products = await self.get_all(
            limit=DatabaseConstants.MAX_SCAN_LIMIT,
            sort_by="stock",
        )
        return build_inventory_summary(products, threshold)

    async def adjust_stock(self, product_id: str, delta: int) -> ProductResponse:
        """
        Add `delta` units to a product's stock, clamping at zero.

        Raises:
            NotFoundError: If product not found
        """
        product = await self._adapter.get_by_id(self._collection_name, product_id)
        if not product:
            raise self._not_found(product_id)

        current = int(field_value(product, "stock", 0) or 0)
        new_stock = max(0, current + delta)
        updated = await self._adapter.update(
            self._collection_name, product_id, {"stock": new_stock}
        )
        if not updated:
            raise self._not_found(product_id)

        logger.info(f"Product {product_id} stock {current} -> {new_stock}")
        return self._to_response(updated)


def build_inventory_summary(
    products: List[ProductResponse],
    threshold: int,
) -> InventorySummary:
    low_stock = sorted(
        (product for product in products if product.stock <= threshold),
        key=lambda product: product.stock,
    )
    return InventorySummary(
        threshold=threshold,
        low_stock=low_stock,
        out_of_stock_count=sum(1 for product in products if product.stock <= 0),
    )
