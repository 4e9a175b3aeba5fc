from typing import Dict, Mapping

from foodorder.domain.errors import ValidationError
from foodorder.utils.logging import get_logger
from foodorder.utils.settings import MAX_ITEM_QUANTITY

logger = get_logger(__name__)


class Cart:
    """
    Per-user cart: item id -> quantity in 1..max_quantity.
    increment/decrement are the only mutators, a key whose quantity
    drops to zero is removed.
    """

    def __init__(self, items: Mapping[str, int] | None = None, max_quantity: int = MAX_ITEM_QUANTITY):
        self.max_quantity = max_quantity
        self._items: Dict[str, int] = {}
        for item_id, quantity in (items or {}).items():
            # stored rows written by older clients may hold junk
            if isinstance(quantity, int) and not isinstance(quantity, bool) and quantity > 0:
                if quantity > max_quantity:
                    logger.warning(f"Stored quantity {quantity} of item {item_id} exceeds {max_quantity}, capped")
                    quantity = max_quantity
                self._items[str(item_id)] = quantity

    def increment(self, item_id: str) -> int:
        quantity = self._items.get(item_id, 0) + 1
        if quantity > self.max_quantity:
            raise ValidationError(f"Quantity for item {item_id} cannot exceed {self.max_quantity}")
        self._items[item_id] = quantity
        return quantity

    def decrement(self, item_id: str) -> int:
        quantity = self._items.get(item_id, 0)
        if quantity <= 1:
            self._items.pop(item_id, None)
            return 0
        self._items[item_id] = quantity - 1
        return quantity - 1

    def quantity(self, item_id: str) -> int:
        return self._items.get(item_id, 0)

    def as_dict(self) -> Dict[str, int]:
        return dict(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other) -> bool:
        if isinstance(other, Cart):
            return self._items == other._items
        return NotImplemented

    def __repr__(self) -> str:
        return f"Cart({self._items!r})"
