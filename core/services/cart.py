# =============================================================================
# core/services/cart.py - Local Cart
# =============================================================================
# In-memory cart for one app instance. Adding a product that is already in
# the cart increases its quantity instead of adding a second line.
# =============================================================================

from typing import Any

from core.models.cart import CartItem


class Cart:
    """Local cart state with count/total getters."""

    def __init__(self):
        self.items: list[CartItem] = []

    @property
    def count(self) -> int:
        return sum(item.qty for item in self.items)

    @property
    def total(self) -> float:
        return sum(item.subtotal for item in self.items)

    def add(self, product: dict[str, Any], qty: int = 1) -> CartItem:
        """
        Add a product (a products row) to the cart.

        Raises:
            ValueError: If qty is not positive
        """
        if qty < 1:
            raise ValueError(f"qty must be positive, got {qty}")

        product_id = str(product["id"])
        for index, item in enumerate(self.items):
            if item.id == product_id:
                updated = item.model_copy(update={"qty": item.qty + qty})
                self.items[index] = updated
                return updated

        item = CartItem(
            id=product_id,
            title=product.get("title", ""),
            price=product.get("price", 0),
            image=product.get("image"),
            qty=qty,
        )
        self.items.append(item)
        return item

    def remove(self, product_id: str) -> None:
        self.items = [item for item in self.items if item.id != str(product_id)]

    def clear(self) -> None:
        self.items = []
