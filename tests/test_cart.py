# ==============================================================================
# CART TESTS
# ==============================================================================

from decimal import Decimal

from backoffice.services.cart import Cart

SPARKLER = {"id": "p1", "name": "Sparkler", "offer_price": "10.00", "actual_price": "15.00"}
ROCKET = {"id": "p2", "name": "Rocket", "offer_price": "40.00", "actual_price": "50.00"}


class TestCart:
    """Tests for the storefront cart."""

    def test_add_accumulates_quantity(self):
        cart = Cart()
        cart.add(SPARKLER, 2)
        cart.add(SPARKLER, 3)
        assert cart.quantity_of("p1") == 5
        assert len(cart) == 1

    def test_negative_add_removes_line_at_zero(self):
        cart = Cart()
        cart.add(SPARKLER, 2)
        cart.add(SPARKLER, -2)
        assert "p1" not in cart
        assert cart.total_quantity == 0

    def test_negative_add_of_unknown_product_is_ignored(self):
        cart = Cart()
        cart.add(SPARKLER, -1)
        assert len(cart) == 0

    def test_update_quantity(self):
        cart = Cart()
        cart.add(SPARKLER, 2)
        cart.update_quantity("p1", 7)
        assert cart.quantity_of("p1") == 7

        cart.update_quantity("p1", -1)
        assert cart.quantity_of("p1") == 7

        cart.update_quantity("p1", 0)
        assert "p1" not in cart

    def test_totals(self):
        cart = Cart()
        cart.add(SPARKLER, 3)
        cart.add(ROCKET, 1)
        assert cart.total_quantity == 4
        assert cart.total_amount == Decimal("70.00")
        assert cart.total_actual_amount == Decimal("95.00")
        assert cart.savings == Decimal("25.00")

    def test_remove_and_clear(self):
        cart = Cart()
        cart.add(SPARKLER)
        cart.add(ROCKET)
        cart.remove("p1")
        assert [line.product.id for line in cart.items] == ["p2"]
        cart.clear()
        assert len(cart) == 0

    def test_line_items_use_offer_price(self):
        cart = Cart()
        cart.add(ROCKET, 2)
        items = cart.to_line_items()
        assert len(items) == 1
        assert items[0].product_id == "p2"
        assert items[0].quantity == 2
        assert items[0].price == Decimal("40.00")
