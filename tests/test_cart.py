# =============================================================================
# tests/test_cart.py - Cart Tests
# =============================================================================

import pytest

from core.services.cart import Cart


BIKE = {"id": 10, "title": "Road bike", "price": 120.0, "image": "bike.jpg"}
LAMP = {"id": 11, "title": "Desk lamp", "price": 15.5}


class TestCart:
    """Test local cart state."""

    def test_empty(self):
        cart = Cart()

        assert cart.count == 0
        assert cart.total == 0

    def test_add_and_totals(self):
        cart = Cart()

        cart.add(BIKE)
        cart.add(LAMP, qty=2)

        assert cart.count == 3
        assert cart.total == pytest.approx(151.0)

    def test_add_same_product_increases_quantity(self):
        """Adding an existing product merges into one line."""
        cart = Cart()

        cart.add(BIKE)
        item = cart.add(BIKE, qty=2)

        assert len(cart.items) == 1
        assert item.qty == 3

    def test_invalid_quantity(self):
        with pytest.raises(ValueError):
            Cart().add(BIKE, qty=0)

    def test_remove_and_clear(self):
        cart = Cart()
        cart.add(BIKE)
        cart.add(LAMP)

        cart.remove("10")
        assert [item.id for item in cart.items] == ["11"]

        cart.clear()
        assert cart.items == []
