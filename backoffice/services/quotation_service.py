# ==============================================================================
# QUOTATION SERVICE - Admin Quotations
# ==============================================================================
# Header plus items; items are replaced wholesale on every save
# ==============================================================================

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional

from backoffice.core.constants import DatabaseConstants
from backoffice.core.exceptions import DatabaseError, NotFoundError
from backoffice.core.settings import settings
from backoffice.database.adapters.base_adapter import BaseDatabaseAdapter
from backoffice.schemas.quotation import QuotationResponse, QuotationSave
from backoffice.utils.helpers import as_dict, field_value, next_short_id, quantize_money

logger = logging.getLogger(__name__)

QUOTATIONS = DatabaseConstants.QUOTATIONS_COLLECTION
QUOTATION_ITEMS = DatabaseConstants.QUOTATION_ITEMS_COLLECTION


class QuotationService:
    """Create, replace, read and delete quotations."""

    def __init__(self, adapter: BaseDatabaseAdapter) -> None:
        self._adapter = adapter

    async def save_quotation(
        self,
        data: QuotationSave,
        existing_id: Optional[str] = None,
    ) -> QuotationResponse:
        """
        Create a quotation, or replace an existing one.

        The total is recomputed from the items. A new quotation gets the
        next QT short id; an existing one keeps its id and short id.

        If the items cannot be stored, a new header is removed again and
        a replaced quotation gets its previous header and items back.

        Raises:
            NotFoundError: existing_id does not exist
            DatabaseError: The items could not be stored
        """
        header: Dict[str, Any] = data.model_dump(exclude={"items"})
        header["total_amount"] = quantize_money(
            sum((item.quantity * item.price for item in data.items), Decimal("0"))
        )
        header["discount_amt"] = quantize_money(data.discount_amt)

        prior: Optional[QuotationResponse] = None
        if existing_id:
            prior = await self.get_quotation(existing_id)
            quotation = await self._adapter.update(QUOTATIONS, existing_id, header)
            if not quotation:
                raise self._not_found(existing_id)
            await self._adapter.bulk_delete(QUOTATION_ITEMS, {"quotation_id": existing_id})
            quotation_id = existing_id
        else:
            header["short_id"] = await next_short_id(
                self._adapter,
                QUOTATIONS,
                settings.QUOTATION_SHORT_ID_PREFIX,
                settings.SHORT_ID_WIDTH,
            )
            quotation = await self._adapter.create(QUOTATIONS, header)
            quotation_id = field_value(quotation, "id")

        rows = [
            {
                "quotation_id": quotation_id,
                "product_id": item.product_id,
                "quantity": item.quantity,
                "price": item.price,
                "total_price": item.quantity * item.price,
            }
            for item in data.items
        ]
        try:
            await self._adapter.bulk_create(QUOTATION_ITEMS, rows)
        except Exception as e:
            logger.error(f"Items of quotation {quotation_id} not stored: {e}")
            if prior is None:
                await self._discard_quotation(quotation_id)
            else:
                await self._restore_quotation(prior)
            raise DatabaseError(f"Failed to save quotation items: {e}")

        logger.info(
            f"Saved quotation {field_value(quotation, 'short_id')} "
            f"with {len(rows)} items"
        )
        return await self.get_quotation(quotation_id)

    async def _discard_quotation(self, quotation_id: str) -> None:
        try:
            await self._adapter.delete(QUOTATIONS, quotation_id)
        except Exception as e:
            logger.error(f"Orphan quotation {quotation_id} could not be removed: {e}")

    async def _restore_quotation(self, prior: QuotationResponse) -> None:
        """Put back the header and items a failed replacement removed."""
        header = prior.model_dump(
            include={
                "customer_name", "phone", "email", "address",
                "total_amount", "discount_amt", "notes", "user_id",
            }
        )
        rows = [
            {
                "quotation_id": prior.id,
                "product_id": item.product_id,
                "quantity": item.quantity,
                "price": item.price,
                "total_price": item.total_price,
            }
            for item in prior.items
        ]
        try:
            await self._adapter.update(QUOTATIONS, prior.id, header)
            if rows:
                await self._adapter.bulk_create(QUOTATION_ITEMS, rows)
        except Exception as e:
            logger.critical(
                f"Quotation {prior.short_id} could not be restored after a "
                f"failed save: {e}"
            )

    async def get_quotation(self, quotation_id: str) -> QuotationResponse:
        quotation = await self._adapter.get_by_id(QUOTATIONS, quotation_id)
        if not quotation:
            raise self._not_found(quotation_id)
        items = await self._adapter.get_all(
            QUOTATION_ITEMS,
            limit=DatabaseConstants.MAX_SCAN_LIMIT,
            filters={"quotation_id": quotation_id},
            sort_by="created_at",
        )
        return QuotationResponse.model_validate(
            {**as_dict(quotation), "items": [as_dict(item) for item in items]}
        )

    async def list_quotations(
        self,
        skip: int = 0,
        limit: int = 20,
    ) -> List[QuotationResponse]:
        """Quotations newest first, without items."""
        quotations = await self._adapter.get_all(
            QUOTATIONS,
            skip=skip,
            limit=limit,
            sort_by="created_at",
            sort_order="desc",
        )
        return [QuotationResponse.model_validate(as_dict(q)) for q in quotations]

    async def delete_quotation(self, quotation_id: str) -> bool:
        """Delete a quotation and its items."""
        if not await self._adapter.get_by_id(QUOTATIONS, quotation_id):
            raise self._not_found(quotation_id)
        await self._adapter.bulk_delete(QUOTATION_ITEMS, {"quotation_id": quotation_id})
        await self._adapter.delete(QUOTATIONS, quotation_id)
        logger.info(f"Deleted quotation {quotation_id}")
        return True

    def _not_found(self, quotation_id: str) -> NotFoundError:
        return NotFoundError(
            message="Quotation not found",
            resource_type=QUOTATIONS,
            resource_id=quotation_id,
        )
