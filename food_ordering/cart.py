from __future__ import annotations

from typing import Any, Dict

from food_ordering.services.orders import CartLine


class Cart:
    """Client-side cart: menu item id -> quantity.

    Lines keep insertion order. A line that drops to zero is removed, so the
    payload built from a cart never carries a non-positive quantity.
    """

    def __init__(self) -> None:
        self._quantities: Dict[int, int] = {}

    def add(self, menu_item_id: int, quantity: int = 1) -> None:
        if quantity <= 0:
            raise ValueError("quantity must be positive")
        self._quantities[menu_item_id] = self._quantities.get(menu_item_id, 0) + quantity

    def remove(self, menu_item_id: int, quantity: int = 1) -> None:
        if quantity <= 0:
            raise ValueError("quantity must be positive")
        current = self._quantities.get(menu_item_id)
        if current is None:
            return
        remaining = current - quantity
        if remaining > 0:
            self._quantities[menu_item_id] = remaining
        else:
            del self._quantities[menu_item_id]

    def clear(self) -> None:
        self._quantities.clear()

    def quantity_of(self, menu_item_id: int) -> int:
        return self._quantities.get(menu_item_id, 0)

    @property
    def is_empty(self) -> bool:
        return not self._quantities

    @property
    def item_count(self) -> int:
        return sum(self._quantities.values())

    def lines(self) -> list[CartLine]:
        return [CartLine(menu_item_id=item_id, quantity=qty) for item_id, qty in self._quantities.items()]

    def to_order_payload(self, payment_method: str, discount_type: str = "none") -> Dict[str, Any]:
        # building the payload never clears the cart; do that after a 201
        return {
            "items": [{"menu_item_id": line.menu_item_id, "quantity": line.quantity} for line in self.lines()],
            "payment_method": payment_method,
            "discount_type": discount_type,
        }
