# ==============================================================================
# ORDER SERVICE - Placing, Listing, Status and Edits
# ==============================================================================

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from backoffice.core.constants import DatabaseConstants, DiscountMode, OrderStatus
from backoffice.core.exceptions import (
    BusinessRuleError,
    DatabaseError,
    LineItemWriteFailedError,
    NotFoundError,
    ValidationError,
)
from backoffice.core.settings import settings
from backoffice.database.adapters.base_adapter import BaseDatabaseAdapter
from backoffice.schemas.base import PaginatedResponse
from backoffice.schemas.order import (
    DiscountSpec,
    LineItemDraft,
    OrderAuditResponse,
    OrderDraft,
    OrderEditRequest,
    OrderEditResult,
    OrderPlaceRequest,
    OrderResponse,
)
from backoffice.services.cart import Cart
from backoffice.services.reconciliation import (
    OrderReconciliationEngine,
    line_item_rows,
    quantity_map,
    read_order,
)
from backoffice.utils.helpers import as_dict, field_value, next_short_id, quantize_money

logger = logging.getLogger(__name__)

ORDERS = DatabaseConstants.ORDERS_COLLECTION
ORDER_ITEMS = DatabaseConstants.ORDER_ITEMS_COLLECTION
ORDER_AUDITS = DatabaseConstants.ORDER_AUDITS_COLLECTION
PRODUCTS = DatabaseConstants.PRODUCTS_COLLECTION


def canonical_status(status: str) -> str:
    """
    Match a status case-insensitively against the lifecycle values.

    Raises:
        ValidationError: If the status is not a lifecycle value
    """
    for known in OrderStatus.ALL:
        if known.lower() == status.strip().lower():
            return known
    raise ValidationError(
        message=f"Unknown order status '{status}'",
        errors={"status": f"must be one of: {', '.join(OrderStatus.ALL)}"},
    )


def require_lr_number(status: Optional[str], lr_number: Optional[str]) -> None:
    """
    Reject a Shipped order without a lorry receipt number.

    Raises:
        BusinessRuleError: Status is Shipped and the LR number is blank
    """
    if status == OrderStatus.SHIPPED and not (lr_number or "").strip():
        raise BusinessRuleError(
            message="An LR number is required to mark an order as Shipped",
            rule="lr_number_required",
        )


def draft_from_order(order: OrderResponse) -> OrderDraft:
    """Snapshot a stored order as the starting point of an edit."""
    return OrderDraft.model_validate(
        {
            **order.model_dump(exclude={"items", "grand_total"}),
            "items": [
                LineItemDraft(
                    product_id=item.product_id,
                    quantity=item.quantity,
                    price=item.price,
                    total_price=item.total_price,
                )
                for item in order.items
            ],
        }
    )


class OrderService:
    """
    Enquiry order operations.

    Placing an order is the one-shot form of an edit: there is no prior
    state, so the whole quantity is checked against stock and consumed.
    Edits of placed orders go through OrderReconciliationEngine.
    """

    def __init__(self, adapter: BaseDatabaseAdapter) -> None:
        self._adapter = adapter
        self._engine = OrderReconciliationEngine(adapter)

    # ==========================================================================
    # PLACING ORDERS
    # ==========================================================================

    async def place_order(self, request: OrderPlaceRequest) -> OrderEditResult:
        """
        Place an enquiry order from checkout items.

        Unit prices are snapshotted from each product's current offer price.

        Returns:
            The stored order; `stock_delta` holds the consumed quantities

        Raises:
            NotFoundError: A product does not exist
            BusinessRuleError: A product is not listed
            StockShortfallError: A product lacks stock
            LineItemWriteFailedError: Line items could not be stored
        """
        cart = await self._build_cart(request)
        line_items = cart.to_line_items()
        consumed = quantity_map(line_items)

        await self._engine.check_stock(consumed)

        short_id = await next_short_id(
            self._adapter,
            ORDERS,
            settings.ORDER_SHORT_ID_PREFIX,
            settings.SHORT_ID_WIDTH,
        )
        data = request.delivery.model_dump()
        data.update(
            short_id=short_id,
            user_id=request.user_id,
            payment_method=request.payment_method,
            referred_by=request.referred_by,
            status=OrderStatus.ENQUIRY_RECEIVED,
            total_amount=quantize_money(cart.total_amount),
            discount_amt=quantize_money(0),
            discount_percentage=None,
        )

        try:
            order = await self._adapter.create(ORDERS, data)
        except Exception as e:
            logger.error(f"Creating order failed: {e}")
            raise DatabaseError(f"Failed to create order: {e}")
        order_id = field_value(order, "id")

        try:
            await self._adapter.bulk_create(ORDER_ITEMS, line_item_rows(order_id, line_items))
        except Exception as e:
            logger.error(f"Line items of new order {order_id} not stored: {e}")
            await self._discard_order(order_id)
            raise LineItemWriteFailedError(order_id, str(e))

        warnings = await self._engine.adjust_stock(order_id, consumed)
        stored = await read_order(self._adapter, order_id)

        logger.info(f"Placed order {short_id} with {len(line_items)} line items")
        return OrderEditResult(
            order=stored,
            stock_delta=consumed,
            warnings=[warning.to_dict() for warning in warnings],
        )

    async def _build_cart(self, request: OrderPlaceRequest) -> Cart:
        cart = Cart()
        for item in request.items:
            product = await self._adapter.get_by_id(PRODUCTS, item.product_id)
            if not product:
                raise NotFoundError(
                    message="Product not found",
                    resource_type=PRODUCTS,
                    resource_id=item.product_id,
                )
            if not field_value(product, "is_active", True):
                raise BusinessRuleError(
                    message=f"Product {item.product_id} is not available",
                    rule="product_inactive",
                )
            cart.add(product, item.quantity)
        return cart

    async def _discard_order(self, order_id: str) -> None:
        try:
            await self._adapter.delete(ORDERS, order_id)
        except Exception as e:
            logger.error(f"Orphan order {order_id} could not be removed: {e}")

    # ==========================================================================
    # READING ORDERS
    # ==========================================================================

    async def get_order(self, order_id: str) -> OrderResponse:
        return await read_order(self._adapter, order_id)

    async def list_orders(
        self,
        status: Optional[str] = None,
        user_id: Optional[str] = None,
        skip: int = 0,
        limit: int = 20,
    ) -> PaginatedResponse[OrderResponse]:
        """
        List orders newest first, each with its line items.

        `user_id` narrows the list to one customer's order history.
        """
        filters: Dict[str, Any] = {}
        if status:
            filters["status"] = canonical_status(status)
        if user_id:
            filters["user_id"] = user_id

        orders = await self._adapter.get_all(
            ORDERS,
            skip=skip,
            limit=limit,
            filters=filters,
            sort_by="created_at",
            sort_order="desc",
        )
        total = await self._adapter.count(ORDERS, filters)

        items_by_order: Dict[str, List[Dict[str, Any]]] = {}
        order_ids = [field_value(order, "id") for order in orders]
        if order_ids:
            items = await self._adapter.get_all(
                ORDER_ITEMS,
                limit=DatabaseConstants.MAX_SCAN_LIMIT,
                filters={"order_id": order_ids},
                sort_by="created_at",
            )
            for item in items:
                items_by_order.setdefault(field_value(item, "order_id"), []).append(as_dict(item))

        return PaginatedResponse[OrderResponse](
            items=[
                OrderResponse.model_validate({
                    **as_dict(order),
                    "items": items_by_order.get(field_value(order, "id"), []),
                })
                for order in orders
            ],
            total=total,
            skip=skip,
            limit=limit,
        )

    async def list_audits(self, order_id: str) -> List[OrderAuditResponse]:
        """Edit history of an order, newest first."""
        if not await self._adapter.get_by_id(ORDERS, order_id):
            raise NotFoundError(
                message="Order not found",
                resource_type=ORDERS,
                resource_id=order_id,
            )
        audits = await self._adapter.get_all(
            ORDER_AUDITS,
            limit=DatabaseConstants.MAX_SCAN_LIMIT,
            filters={"order_id": order_id},
            sort_by="created_at",
            sort_order="desc",
        )
        return [OrderAuditResponse.model_validate(as_dict(audit)) for audit in audits]

    # ==========================================================================
    # STATUS
    # ==========================================================================

    async def update_status(
        self,
        order_id: str,
        status: str,
        lr_number: Optional[str] = None,
    ) -> OrderResponse:
        """
        Move an order to another lifecycle status.

        Raises:
            ValidationError: Unknown status
            BusinessRuleError: Shipped without an LR number
            NotFoundError: Order not found
        """
        status = canonical_status(status)
        data: Dict[str, Any] = {"status": status}

        lr_number = (lr_number or "").strip()
        require_lr_number(status, lr_number)
        if lr_number:
            data["lr_number"] = lr_number

        updated = await self._adapter.update(ORDERS, order_id, data)
        if not updated:
            raise NotFoundError(
                message="Order not found",
                resource_type=ORDERS,
                resource_id=order_id,
            )
        logger.info(f"Order {order_id} status -> {status}")
        return await read_order(self._adapter, order_id)

    # ==========================================================================
    # EDITS
    # ==========================================================================

    async def edit_order(
        self,
        order_id: str,
        edit: OrderEditRequest,
        changed_by: Optional[str] = None,
    ) -> OrderEditResult:
        """
        Apply an admin edit to a placed order.

        Fields left out of the request keep their stored values; that
        includes the line items and the discount.
        """
        original = draft_from_order(await read_order(self._adapter, order_id))

        updates = edit.model_dump(
            exclude={"items", "discount"},
            exclude_unset=True,
        )
        if updates.get("status"):
            updates["status"] = canonical_status(updates["status"])
        if "lr_number" in updates:
            updates["lr_number"] = (updates["lr_number"] or "").strip() or None
        if "items" in edit.model_fields_set:
            updates["items"] = edit.items
        target = original.model_copy(update=updates)
        if {"status", "lr_number"} & updates.keys():
            require_lr_number(target.status, target.lr_number)

        if "discount" in edit.model_fields_set:
            discount = edit.discount
        else:
            discount = stored_discount(original)

        return await self._engine.save_order_edits(original, target, discount, changed_by)


def stored_discount(order: OrderDraft) -> DiscountSpec:
    """Discount entry that reproduces what is stored on an order."""
    if order.discount_percentage:
        return DiscountSpec(mode=DiscountMode.PERCENTAGE, value=order.discount_percentage)
    return DiscountSpec(mode=DiscountMode.AMOUNT, value=order.discount_amt)
