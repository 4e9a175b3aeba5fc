from enum import Enum


class OrderStatus(str, Enum):
    """Fulfillment stages of a paid order, in delivery order."""

    FOOD_PROCESSING = "Food Processing"
    OUT_FOR_DELIVERY = "Out for Delivery"
    DELIVERED = "Delivered"

    @property
    def rank(self) -> int:
        return list(OrderStatus).index(self)

    def can_advance_to(self, other: "OrderStatus") -> bool:
        return other.rank >= self.rank
