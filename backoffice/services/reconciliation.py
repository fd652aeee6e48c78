# ==============================================================================
# ORDER RECONCILIATION ENGINE - Saving Edits to a Placed Order
# ==============================================================================
# Converges stored order, line items and stock to an edited order through
# a sequence of independent gateway writes with one compensating rollback
# ==============================================================================

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Tuple

from backoffice.core.constants import (
    AUDITED_ORDER_FIELDS,
    EDITABLE_ORDER_FIELDS,
    DatabaseConstants,
    DiscountMode,
)
from backoffice.core.exceptions import (
    AuditWriteWarning,
    BadRequestError,
    DatabaseError,
    LineItemWriteFailedError,
    NotFoundError,
    OrderUpdateFailedError,
    ReconciliationWarning,
    RollbackFailedError,
    StockAdjustmentWarning,
    StockShortfallError,
)
from backoffice.database.adapters.base_adapter import BaseDatabaseAdapter
from backoffice.schemas.order import (
    DiscountSpec,
    LineItemDraft,
    OrderDraft,
    OrderEditResult,
    OrderResponse,
)
from backoffice.utils.helpers import as_dict, field_value, quantize_money, to_decimal

logger = logging.getLogger(__name__)

ORDERS = DatabaseConstants.ORDERS_COLLECTION
ORDER_ITEMS = DatabaseConstants.ORDER_ITEMS_COLLECTION
ORDER_AUDITS = DatabaseConstants.ORDER_AUDITS_COLLECTION
PRODUCTS = DatabaseConstants.PRODUCTS_COLLECTION


# ==============================================================================
# PURE HELPERS
# ==============================================================================

def compute_subtotal(items: Iterable[LineItemDraft]) -> Decimal:
    """Sum of quantity x unit price, recomputed from the lines."""
    return sum(
        (item.quantity * to_decimal(item.price) for item in items),
        Decimal("0"),
    )


def format_percentage(value: Decimal) -> str:
    """
    Render a percentage as the literal the admin typed.

    Example:
        >>> format_percentage(Decimal("10.0"))
        '10'
    """
    return format(to_decimal(value).normalize(), "f")


def compute_discount(
    subtotal: Decimal,
    discount: DiscountSpec,
) -> Tuple[Decimal, Optional[str]]:
    """
    Resolve a discount entry into the stored pair.

    Returns:
        (discount_amt, discount_percentage); the percentage is None in
        amount mode
    """
    if discount.mode == DiscountMode.PERCENTAGE:
        amount = quantize_money(subtotal * discount.value / Decimal("100"))
        return amount, format_percentage(discount.value)
    return quantize_money(discount.value), None


def quantity_map(items: Iterable[LineItemDraft]) -> Dict[str, int]:
    """Total quantity per product, summing repeated products."""
    quantities: Dict[str, int] = {}
    for item in items:
        quantities[item.product_id] = quantities.get(item.product_id, 0) + item.quantity
    return quantities


def compute_stock_delta(
    original: Dict[str, int],
    target: Dict[str, int],
) -> Dict[str, int]:
    """
    Net change of on-order quantity per product.

    A product missing from either map counts as zero there. Positive
    values consume stock, negative values return it.
    """
    product_ids = list(dict.fromkeys([*original, *target]))
    return {
        product_id: target.get(product_id, 0) - original.get(product_id, 0)
        for product_id in product_ids
    }


def _normalize(value: Any) -> Any:
    if value == "":
        return None
    if isinstance(value, float):
        return to_decimal(value)
    return value


def _jsonable(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    return value


def build_changes(
    original: OrderDraft,
    updated_fields: Dict[str, Any],
    original_quantities: Dict[str, int],
    target_quantities: Dict[str, int],
) -> Dict[str, Any]:
    """
    Build the audit diff of an edit.

    Scalar fields from AUDITED_ORDER_FIELDS that differ are recorded as
    {"from", "to"}. Products whose quantity moved are listed under
    "items"; the key is left out when no quantity changed.
    """
    changes: Dict[str, Any] = {}

    for name in AUDITED_ORDER_FIELDS:
        before = getattr(original, name, None)
        after = updated_fields.get(name, before)
        if _normalize(before) != _normalize(after):
            changes[name] = {"from": _jsonable(before), "to": _jsonable(after)}

    items = []
    for product_id, delta in compute_stock_delta(original_quantities, target_quantities).items():
        if delta:
            items.append({
                "product_id": product_id,
                "from": original_quantities.get(product_id, 0),
                "to": target_quantities.get(product_id, 0),
            })
    if items:
        changes["items"] = items

    return changes


def line_item_rows(
    order_id: str,
    items: Iterable[LineItemDraft],
    keep_totals: bool = False,
) -> List[Dict[str, Any]]:
    """
    Rows to insert for a set of line items.

    With `keep_totals` a line that carries its stored total keeps it;
    otherwise the total is quantity x price.
    """
    rows = []
    for item in items:
        price = to_decimal(item.price)
        total_price = item.quantity * price
        if keep_totals and item.total_price is not None:
            total_price = to_decimal(item.total_price)
        rows.append({
            "order_id": order_id,
            "product_id": item.product_id,
            "quantity": item.quantity,
            "price": price,
            "total_price": total_price,
        })
    return rows


async def read_order(adapter: BaseDatabaseAdapter, order_id: str) -> OrderResponse:
    """
    Read an order together with its line items.

    Raises:
        NotFoundError: If the order does not exist
    """
    order = await adapter.get_by_id(ORDERS, order_id)
    if not order:
        raise NotFoundError(
            message="Order not found",
            resource_type=ORDERS,
            resource_id=order_id,
        )
    items = await adapter.get_all(
        ORDER_ITEMS,
        skip=0,
        limit=DatabaseConstants.MAX_SCAN_LIMIT,
        filters={"order_id": order_id},
        sort_by="created_at",
    )
    return OrderResponse.model_validate(
        {**as_dict(order), "items": [as_dict(item) for item in items]}
    )


# ==============================================================================
# ENGINE
# ==============================================================================

class OrderReconciliationEngine:
    """
    Persists an admin's edit of an existing order.

    The gateway has no transactions, so the save runs as ordered steps:

        1-6   compute subtotal, discount, audit diff and stock delta
        7     check stock for every product the edit needs more of
        8     update the order row                  (fatal on failure)
        9-10  delete then re-insert line items      (fatal, one rollback)
        11    adjust stock per product              (warning on failure)
        12    append the audit record               (warning on failure)
        13    read the order back

    Nothing is written when step 7 fails. Failures after step 10 are
    collected as warnings on the result.

    Example:
        >>> engine = OrderReconciliationEngine(adapter)
        >>> result = await engine.save_order_edits(original, target, discount)
        >>> result.order.total_amount
        Decimal('25.00')
    """

    def __init__(self, adapter: BaseDatabaseAdapter) -> None:
        self._adapter = adapter

    async def save_order_edits(
        self,
        original: OrderDraft,
        target: OrderDraft,
        discount: DiscountSpec,
        changed_by: Optional[str] = None,
    ) -> OrderEditResult:
        """
        Save an edited order.

        Args:
            original: Order and line items as last read
            target: Edited order; lines absent or at quantity 0 are removed
            discount: Discount entry applied to the recomputed subtotal
            changed_by: Admin recorded on the audit row

        Returns:
            The re-read order with the diff, stock delta and any warnings

        Raises:
            StockShortfallError: An increase exceeds current stock
            OrderUpdateFailedError: The order row was not written
            LineItemWriteFailedError: Line items were not replaced
        """
        order_id = original.id
        if not order_id:
            raise BadRequestError("Original order must carry its id")

        target_items = [item for item in target.items if item.quantity > 0]

        subtotal = compute_subtotal(target_items)
        discount_amt, discount_percentage = compute_discount(subtotal, discount)

        order_fields: Dict[str, Any] = {
            name: getattr(target, name) for name in EDITABLE_ORDER_FIELDS
        }
        order_fields.update(
            total_amount=quantize_money(subtotal),
            discount_amt=discount_amt,
            discount_percentage=discount_percentage,
        )

        original_quantities = quantity_map(original.items)
        target_quantities = quantity_map(target_items)
        changes = build_changes(original, order_fields, original_quantities, target_quantities)
        stock_delta = compute_stock_delta(original_quantities, target_quantities)

        logger.debug(
            f"Saving order {order_id}: subtotal={subtotal} "
            f"discount={discount_amt} delta={stock_delta}"
        )

        await self.check_stock(stock_delta)
        await self._update_order(order_id, order_fields)
        await self._replace_line_items(order_id, original.items, target_items)

        warnings: List[ReconciliationWarning] = []
        warnings.extend(await self.adjust_stock(order_id, stock_delta))

        audit_warning = await self._write_audit(order_id, changed_by, changes)
        if audit_warning:
            warnings.append(audit_warning)

        order = await self._read_back(order_id)

        logger.info(
            f"Order {order_id} saved: {len(target_items)} line items, "
            f"{len(changes)} changes, {len(warnings)} warnings"
        )
        return OrderEditResult(
            order=order,
            changes=changes,
            stock_delta={pid: delta for pid, delta in stock_delta.items() if delta},
            warnings=[warning.to_dict() for warning in warnings],
        )

    # --------------------------------------------------------------------------
    # STEP 7: PRE-FLIGHT STOCK CHECK
    # --------------------------------------------------------------------------

    async def check_stock(self, stock_delta: Dict[str, int]) -> None:
        """Raise StockShortfallError for the first increase stock cannot cover."""
        for product_id, delta in stock_delta.items():
            if delta <= 0:
                continue
            try:
                product = await self._adapter.get_by_id(PRODUCTS, product_id)
            except Exception as e:
                logger.error(f"Stock check failed reading product {product_id}: {e}")
                raise DatabaseError(f"Could not read stock for product {product_id}: {e}")

            available = int(field_value(product, "stock", 0) or 0) if product else 0
            if available < delta:
                logger.info(
                    f"Stock shortfall for product {product_id}: "
                    f"available={available} required={delta}"
                )
                raise StockShortfallError(product_id, available, delta)

    # --------------------------------------------------------------------------
    # STEP 8: ORDER ROW
    # --------------------------------------------------------------------------

    async def _update_order(self, order_id: str, order_fields: Dict[str, Any]) -> None:
        try:
            updated = await self._adapter.update(ORDERS, order_id, order_fields)
        except Exception as e:
            logger.error(f"Order {order_id} update failed: {e}")
            raise OrderUpdateFailedError(order_id, str(e))

        if not updated:
            logger.error(f"Order {order_id} update matched no row")
            raise OrderUpdateFailedError(order_id, "order not found")

    # --------------------------------------------------------------------------
    # STEPS 9-10: LINE ITEMS
    # --------------------------------------------------------------------------

    async def _replace_line_items(
        self,
        order_id: str,
        original_items: List[LineItemDraft],
        target_items: List[LineItemDraft],
    ) -> None:
        deleted = False
        try:
            await self._adapter.bulk_delete(ORDER_ITEMS, {"order_id": order_id})
            deleted = True
            if target_items:
                await self._adapter.bulk_create(
                    ORDER_ITEMS, line_item_rows(order_id, target_items)
                )
        except Exception as e:
            reason = str(e)
            if not deleted:
                logger.error(f"Deleting line items of order {order_id} failed: {reason}")
                raise LineItemWriteFailedError(order_id, reason)

            logger.error(
                f"Inserting line items of order {order_id} failed: {reason}; "
                f"restoring {len(original_items)} original items"
            )
            await self._restore_line_items(order_id, original_items, reason)
            raise LineItemWriteFailedError(order_id, reason, rolled_back=True)

    async def _restore_line_items(
        self,
        order_id: str,
        original_items: List[LineItemDraft],
        reason: str,
    ) -> None:
        if not original_items:
            return
        try:
            await self._adapter.bulk_create(
                ORDER_ITEMS, line_item_rows(order_id, original_items, keep_totals=True)
            )
        except Exception as rollback_exc:
            logger.critical(
                f"Order {order_id} has no line items: insert failed ({reason}) "
                f"and restoring the originals failed ({rollback_exc})"
            )
            raise LineItemWriteFailedError(
                order_id,
                reason,
                rollback_error=RollbackFailedError(order_id, str(rollback_exc)),
            )

    # --------------------------------------------------------------------------
    # STEP 11: STOCK
    # --------------------------------------------------------------------------

    async def adjust_stock(
        self,
        order_id: str,
        stock_delta: Dict[str, int],
    ) -> List[StockAdjustmentWarning]:
        warnings: List[StockAdjustmentWarning] = []

        for product_id, delta in stock_delta.items():
            if not delta:
                continue
            try:
                product = await self._adapter.get_by_id(PRODUCTS, product_id)
                if not product:
                    raise LookupError("product not found")
                current = int(field_value(product, "stock", 0) or 0)
                new_stock = max(0, current - delta)
                updated = await self._adapter.update(PRODUCTS, product_id, {"stock": new_stock})
                if not updated:
                    raise LookupError("product not found")
                logger.debug(f"Product {product_id} stock {current} -> {new_stock}")
            except Exception as e:
                logger.warning(
                    f"Stock for product {product_id} not adjusted by {-delta} "
                    f"after saving order {order_id}: {e}"
                )
                warnings.append(StockAdjustmentWarning(
                    f"Stock for product {product_id} was not adjusted: {e}",
                    order_id=order_id,
                    product_id=product_id,
                    delta=delta,
                ))

        return warnings

    # --------------------------------------------------------------------------
    # STEP 12: AUDIT
    # --------------------------------------------------------------------------

    async def _write_audit(
        self,
        order_id: str,
        changed_by: Optional[str],
        changes: Dict[str, Any],
    ) -> Optional[AuditWriteWarning]:
        try:
            await self._adapter.create(ORDER_AUDITS, {
                "order_id": order_id,
                "changed_by": changed_by,
                "changes": changes,
            })
        except Exception as e:
            logger.warning(f"Audit record for order {order_id} not written: {e}")
            return AuditWriteWarning(
                f"Audit record was not written: {e}",
                order_id=order_id,
            )
        return None

    # --------------------------------------------------------------------------
    # STEP 13: READ BACK
    # --------------------------------------------------------------------------

    async def _read_back(self, order_id: str) -> OrderResponse:
        try:
            return await read_order(self._adapter, order_id)
        except NotFoundError:
            raise
        except Exception as e:
            logger.error(f"Reading back order {order_id} failed: {e}")
            raise DatabaseError(f"Order {order_id} was saved but could not be read back: {e}")
