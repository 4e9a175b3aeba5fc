# foodorder/api/routers/order.py
from fastapi import APIRouter, Depends, Header, Request
from sqlalchemy.orm import Session

from foodorder.api.deps import (
    get_catalog_client,
    get_current_user_id,
    get_lock_service,
    get_notification_service,
    get_payment_gateway,
)
from foodorder.data.database import get_db
from foodorder.domain.schemas import (
    MessageOut,
    OrdersOut,
    PlaceOrderIn,
    PlaceOrderOut,
    StatusUpdateIn,
    VerifyOrderIn,
)
from foodorder.services.catalog_client import CatalogClient
from foodorder.services.lock_service import LockService
from foodorder.services.notification_service import NotificationService
from foodorder.services.order_service import OrderService, PaymentResult
from foodorder.services.payment_gateway import StripeGateway

router = APIRouter(prefix="/api/order", tags=["orders"])


def get_service(
    db: Session = Depends(get_db),
    gateway: StripeGateway = Depends(get_payment_gateway),
    lock_service: LockService = Depends(get_lock_service),
    catalog_client: CatalogClient | None = Depends(get_catalog_client),
    notification_service: NotificationService = Depends(get_notification_service),
) -> OrderService:
    return OrderService(
        db=db,
        gateway=gateway,
        lock_service=lock_service,
        catalog_client=catalog_client,
        notification_service=notification_service,
    )


@router.post("/place", response_model=PlaceOrderOut)
def place_order(
    payload: PlaceOrderIn,
    user_id: str = Depends(get_current_user_id),
    svc: OrderService = Depends(get_service),
):
    """
    Stores an unpaid order and returns the checkout URL of the payment gateway.
    """
    result = svc.place_order(user_id, payload.items, payload.amount, payload.address)
    return {"success": True, "session_url": result["session_url"]}


@router.post("/verify", response_model=MessageOut)
def verify_order(payload: VerifyOrderIn, svc: OrderService = Depends(get_service)):
    """
    Redirect callback of the checkout page, confirms or cancels the order.
    """
    result = svc.confirm_payment(payload.order_id, payload.success)
    return {"success": result is PaymentResult.PAID, "message": result.value}


async def raw_body(request: Request) -> bytes:
    # signature is computed over the exact bytes Stripe sent
    return await request.body()


@router.post("/webhook")
def gateway_webhook(
    payload: bytes = Depends(raw_body),
    stripe_signature: str | None = Header(default=None),
    gateway: StripeGateway = Depends(get_payment_gateway),
    svc: OrderService = Depends(get_service),
):
    event = gateway.parse_webhook(payload, stripe_signature)
    return {"received": True, "result": svc.handle_gateway_event(event)}


@router.post("/userOrders", response_model=OrdersOut)
def user_orders(
    user_id: str = Depends(get_current_user_id),
    svc: OrderService = Depends(get_service),
):
    return {"success": True, "data": svc.list_user_orders(user_id)}


@router.get("/list", response_model=OrdersOut)
def list_orders(svc: OrderService = Depends(get_service)):
    return {"success": True, "data": svc.list_all_orders()}


@router.post("/status", response_model=MessageOut)
def update_status(payload: StatusUpdateIn, svc: OrderService = Depends(get_service)):
    svc.advance_status(payload.order_id, payload.status)
    return {"success": True, "message": "Status Updated"}
