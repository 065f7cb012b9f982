# =============================================================================
# core/models/cart.py - Cart Schemas
# =============================================================================

from pydantic import BaseModel, Field


class CartItem(BaseModel):
    """A product line in the local cart."""

    id: str
    title: str
    price: float = Field(..., ge=0)
    image: str | None = None
    qty: int = Field(default=1, ge=1)

    @property
    def subtotal(self) -> float:
        return self.price * self.qty
