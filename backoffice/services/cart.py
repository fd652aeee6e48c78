# ==============================================================================
# CART - Storefront Cart and Admin Quotation Builder
# ==============================================================================
# In-memory product -> quantity map with derived totals
# ==============================================================================

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import Field

from backoffice.schemas.base import BaseSchema
from backoffice.schemas.order import LineItemDraft
from backoffice.utils.helpers import to_decimal

logger = logging.getLogger(__name__)


class CartProduct(BaseSchema):
    """Product fields the cart needs; read from any product record."""

    id: str
    name: Optional[str] = None
    offer_price: Decimal = Field(Decimal("0"), ge=0)
    actual_price: Decimal = Field(Decimal("0"), ge=0)


class CartLine(BaseSchema):
    product: CartProduct
    quantity: int = Field(..., ge=1)

    @property
    def total(self) -> Decimal:
        return self.quantity * self.product.offer_price

    @property
    def actual_total(self) -> Decimal:
        return self.quantity * self.product.actual_price


class Cart:
    """
    Cart of products with quantities.

    Quantities are always positive: a change that would bring a line to
    zero or below removes it. Totals are derived on every read.

    Example:
        >>> cart = Cart()
        >>> cart.add({"id": "p1", "offer_price": "10", "actual_price": "12"}, 3)
        >>> cart.total_amount
        Decimal('30')
        >>> cart.add({"id": "p1"}, -3)
        >>> cart.total_quantity
        0
    """

    def __init__(self) -> None:
        self._lines: Dict[str, CartLine] = {}

    def __len__(self) -> int:
        return len(self._lines)

    def __contains__(self, product_id: object) -> bool:
        return product_id in self._lines

    @property
    def items(self) -> List[CartLine]:
        return list(self._lines.values())

    def quantity_of(self, product_id: str) -> int:
        line = self._lines.get(product_id)
        return line.quantity if line else 0

    # ==========================================================================
    # MUTATIONS
    # ==========================================================================

    def add(self, product: Any, quantity: int = 1) -> None:
        """
        Add a signed quantity of a product.

        Args:
            product: Product record (ORM instance, dict or schema)
            quantity: Units to add; negative values take units away
        """
        snapshot = CartProduct.model_validate(product, from_attributes=True)
        line = self._lines.get(snapshot.id)

        if line is None:
            if quantity > 0:
                self._lines[snapshot.id] = CartLine(product=snapshot, quantity=quantity)
            return

        new_quantity = line.quantity + quantity
        if new_quantity <= 0:
            del self._lines[snapshot.id]
            logger.debug(f"Removed {snapshot.id} from cart")
        else:
            line.quantity = new_quantity

    def remove(self, product_id: str) -> None:
        self._lines.pop(product_id, None)

    def update_quantity(self, product_id: str, quantity: int) -> None:
        """Set a line's quantity; 0 removes it, negative values are ignored."""
        if quantity < 0 or product_id not in self._lines:
            return
        if quantity == 0:
            del self._lines[product_id]
        else:
            self._lines[product_id].quantity = quantity

    def clear(self) -> None:
        self._lines.clear()

    # ==========================================================================
    # DERIVED TOTALS
    # ==========================================================================

    @property
    def total_quantity(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    @property
    def total_amount(self) -> Decimal:
        """Sum of quantity x offer price."""
        return sum((line.total for line in self._lines.values()), Decimal("0"))

    @property
    def total_actual_amount(self) -> Decimal:
        """Sum of quantity x list price."""
        return sum((line.actual_total for line in self._lines.values()), Decimal("0"))

    @property
    def savings(self) -> Decimal:
        return self.total_actual_amount - self.total_amount

    def to_line_items(self) -> List[LineItemDraft]:
        """Line items priced at the current offer price."""
        return [
            LineItemDraft(
                product_id=line.product.id,
                quantity=line.quantity,
                price=to_decimal(line.product.offer_price),
            )
            for line in self._lines.values()
        ]
