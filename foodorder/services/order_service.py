# foodorder/services/order_service.py
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any, Dict, List, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from foodorder.data.models.order import OrderModel
from foodorder.domain.errors import (
    ConcurrencyConflict,
    OrderAlreadyFinalized,
    OrderCreationError,
    OrderNotFound,
    PersistenceError,
    ValidationError,
)
from foodorder.domain.order_status import OrderStatus
from foodorder.repos.order_repo import OrderRepo
from foodorder.services.cart_service import CartService
from foodorder.services.catalog_client import CatalogClient
from foodorder.services.lock_service import LockService
from foodorder.services.notification_service import NotificationService
from foodorder.services.payment_gateway import LineItem, StripeGateway
from foodorder.utils.settings import DELIVERY_FEE, FRONTEND_URL
from foodorder.utils.logging import get_logger

logger = get_logger(__name__)

CENT = Decimal("0.01")

# verified event type -> payment outcome
GATEWAY_EVENTS = {
    "checkout.session.completed": True,
    "checkout.session.async_payment_succeeded": True,
    "checkout.session.async_payment_failed": False,
    "checkout.session.expired": False,
}


class PaymentResult(str, Enum):
    PAID = "Paid"
    NOT_PAID = "Not Paid"


def order_to_dict(order: OrderModel) -> Dict[str, Any]:
    return {
        "id": order.id,
        "user_id": order.user_id,
        "items": order.items,
        "amount": float(order.amount),
        "address": order.address,
        "status": order.status,
        "payment": order.payment,
        "created_at": order.created_at,
    }


class OrderService:
    """
    Owns the order lifecycle: the only place where order state changes.

    Created(unpaid) -> Paid -> Food Processing -> Out for Delivery -> Delivered
                    \\-> Cancelled (row deleted)
    """

    def __init__(
        self,
        db: Session,
        gateway: StripeGateway,
        lock_service: LockService,
        catalog_client: CatalogClient | None = None,
        notification_service: NotificationService | None = None,
        delivery_fee: Decimal = DELIVERY_FEE,
        frontend_url: str = FRONTEND_URL,
    ):
        self.repo = OrderRepo(db)
        self.gateway = gateway
        self.carts = CartService(db, lock_service)
        self.catalog_client = catalog_client
        self.notification_service = notification_service or NotificationService()
        self.delivery_fee = Decimal(delivery_fee)
        self.frontend_url = frontend_url.rstrip("/")

    def _snapshot(self, items: Sequence) -> List[Dict[str, Any]]:
        snapshot = []
        for item in items:
            name, price = item.name, Decimal(str(item.price))

            if self.catalog_client is not None:
                # submitted prices are only trusted without a catalog
                if not item.item_id:
                    raise ValidationError(f"Item {item.name!r} has no catalog id")
                food = self.catalog_client.fetch_food(item.item_id)
                if food is None:
                    raise ValidationError(f"Unknown food item {item.item_id}")
                name, price = food["name"], Decimal(str(food["price"]))

            snapshot.append(
                {
                    "item_id": item.item_id,
                    "name": name,
                    # gateway charges per unit in cents
                    "price": price.quantize(CENT, rounding=ROUND_HALF_UP),
                    "quantity": item.quantity,
                }
            )
        return snapshot

    def _raise_missing_or_finalized(self, order_id: str):
        if self.repo.get_order(order_id) is None:
            raise OrderNotFound(f"Order {order_id} does not exist")
        raise OrderAlreadyFinalized(f"Order {order_id} is already paid")

    # commands
    def place_order(self, user_id: str, items: Sequence, amount: Decimal, address) -> Dict[str, str]:
        """
        1. Validates the items and recomputes the total
        2. Persists the unpaid order
        3. Requests a checkout session from the gateway
        The cart stays untouched until payment is confirmed.
        """
        if not items:
            raise ValidationError("Order must contain at least one item")

        snapshot = self._snapshot(items)
        subtotal = sum((i["price"] * i["quantity"] for i in snapshot), Decimal("0.00"))
        total = (subtotal + self.delivery_fee).quantize(CENT)

        if Decimal(str(amount)).quantize(CENT) != total:
            logger.warning(f"Amount mismatch for user {user_id}: declared {amount}, computed {total}")
            raise ValidationError(f"Order amount {amount} does not match items total {total}")

        order = OrderModel(
            user_id=user_id,
            items=[{**i, "price": float(i["price"])} for i in snapshot],
            amount=total,
            address=address,
            status=OrderStatus.FOOD_PROCESSING.value,
            payment=False,
        )

        try:
            created = self.repo.create_order(order)
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Failed to persist order for user {user_id}: {e}")
            raise OrderCreationError("Order could not be stored") from e

        logger.info(f"Order {created.id} created for user {user_id}, amount {total}")

        line_items = [LineItem(name=i["name"], unit_price=i["price"], quantity=i["quantity"]) for i in snapshot]
        if self.delivery_fee > 0:
            line_items.append(LineItem(name="Delivery Charges", unit_price=self.delivery_fee, quantity=1))

        # GatewayError propagates, the unpaid order is left for the sweep
        session = self.gateway.create_checkout_session(
            line_items,
            success_url=f"{self.frontend_url}/verify?success=true&orderId={created.id}",
            cancel_url=f"{self.frontend_url}/verify?success=false&orderId={created.id}",
            metadata={"order_id": created.id, "user_id": user_id},
        )

        try:
            self.repo.set_session_id(created.id, session.id)
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Failed to store session {session.id} on order {created.id}: {e}")
            raise PersistenceError("Order could not be updated") from e

        return {"order_id": created.id, "session_url": session.url}

    def confirm_payment(self, order_id: str, success: bool) -> PaymentResult:
        """
        Finalizes the payment of an unpaid order.
        Replays are detected: a deleted order raises OrderNotFound, a paid one
        OrderAlreadyFinalized. A paid order is never deleted.
        """
        try:
            if success:
                rowcount = self.repo.mark_paid(order_id)
            else:
                rowcount = self.repo.delete_unpaid(order_id)

            if rowcount == 0:
                self._raise_missing_or_finalized(order_id)

            order = self.repo.get_order(order_id) if success else None
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Failed to confirm payment of order {order_id}: {e}")
            raise PersistenceError("Order store unavailable") from e

        if not success:
            logger.info(f"Payment for order {order_id} failed, order deleted")
            return PaymentResult.NOT_PAID

        logger.info(f"Order {order_id} paid by user {order.user_id}")

        # payment is already recorded, a stale cart is not worth failing the callback
        try:
            self.carts.clear_cart(order.user_id)
        except (PersistenceError, ConcurrencyConflict) as e:
            logger.warning(f"Cart of user {order.user_id} not cleared after order {order_id}: {e}")

        self.notification_service.send_payment_notification(order.user_id, order_id)
        return PaymentResult.PAID

    def handle_gateway_event(self, event: Dict[str, Any]) -> str:
        """
        Applies a verified Stripe webhook event. Replays are acknowledged, not re-applied.

        A completed session with a delayed payment method is not paid yet; the
        outcome arrives later as async_payment_succeeded / async_payment_failed.
        """
        event_type = event.get("type")
        session = event.get("data", {}).get("object", {})
        order_id = (session.get("metadata") or {}).get("order_id")

        if event_type not in GATEWAY_EVENTS:
            logger.info(f"Ignoring gateway event {event_type}")
            return "ignored"

        if not order_id:
            logger.warning(f"Gateway event {event_type} carries no order id")
            return "ignored"

        if event_type == "checkout.session.completed" and session.get("payment_status") != "paid":
            return self._await_settlement(order_id)

        try:
            return self.confirm_payment(order_id, GATEWAY_EVENTS[event_type]).value
        except (OrderNotFound, OrderAlreadyFinalized) as e:
            logger.info(f"Gateway event {event_type} for order {order_id} already applied: {e.code}")
            return "already_finalized"

    def _await_settlement(self, order_id: str) -> str:
        try:
            rowcount = self.repo.mark_awaiting_settlement(order_id)
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Failed to mark order {order_id} as awaiting settlement: {e}")
            raise PersistenceError("Order store unavailable") from e

        if rowcount == 0:
            logger.info(f"Order {order_id} is already finalized, settlement notice dropped")
            return "already_finalized"

        logger.info(f"Order {order_id} checkout completed, awaiting payment settlement")
        return "pending"

    def advance_status(self, order_id: str, new_status: str) -> Dict[str, Any]:
        """Admin use case: move a paid order forward through fulfillment."""
        try:
            target = OrderStatus(new_status)
        except ValueError:
            raise ValidationError(f"Unknown order status {new_status!r}") from None

        try:
            order = self.repo.get_order(order_id)
            if order is None:
                raise OrderNotFound(f"Order {order_id} does not exist")

            if not order.payment:
                raise ValidationError(f"Order {order_id} is not paid")

            current = OrderStatus(order.status)
            if current == target:
                return order_to_dict(order)

            if not current.can_advance_to(target):
                raise ValidationError(f"Cannot move order {order_id} from {current.value} back to {target.value}")

            rowcount = self.repo.update_status(order_id, current.value, target.value)
            if rowcount == 0:
                raise ConcurrencyConflict(f"Order {order_id} was changed by another request")

            order = self.repo.get_order(order_id)
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Failed to update status of order {order_id}: {e}")
            raise PersistenceError("Order store unavailable") from e

        logger.info(f"Order {order_id} status {current.value} -> {target.value}")
        return order_to_dict(order)

    # queries
    def list_user_orders(self, user_id: str) -> List[Dict[str, Any]]:
        try:
            return [order_to_dict(o) for o in self.repo.list_by_user(user_id)]
        except SQLAlchemyError as e:
            logger.error(f"Failed to list orders of user {user_id}: {e}")
            raise PersistenceError("Order store unavailable") from e

    def list_all_orders(self) -> List[Dict[str, Any]]:
        try:
            return [order_to_dict(o) for o in self.repo.list_all()]
        except SQLAlchemyError as e:
            logger.error(f"Failed to list orders: {e}")
            raise PersistenceError("Order store unavailable") from e
