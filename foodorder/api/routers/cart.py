# foodorder/api/routers/cart.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from foodorder.api.deps import get_current_user_id, get_lock_service
from foodorder.data.database import get_db
from foodorder.domain.schemas import CartDataOut, CartItemIn, MessageOut
from foodorder.services.cart_service import CartService
from foodorder.services.lock_service import LockService

router = APIRouter(prefix="/api/cart", tags=["cart"])


def get_service(
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
) -> CartService:
    return CartService(db=db, lock_service=lock_service)


@router.post("/add", response_model=MessageOut)
def add_to_cart(
    payload: CartItemIn,
    user_id: str = Depends(get_current_user_id),
    svc: CartService = Depends(get_service),
):
    svc.add_item(user_id, payload.item_id)
    return {"success": True, "message": "Added to cart"}


@router.post("/remove", response_model=MessageOut)
def remove_from_cart(
    payload: CartItemIn,
    user_id: str = Depends(get_current_user_id),
    svc: CartService = Depends(get_service),
):
    svc.remove_item(user_id, payload.item_id)
    return {"success": True, "message": "Removed from cart"}


@router.post("/get", response_model=CartDataOut)
def get_cart(
    user_id: str = Depends(get_current_user_id),
    svc: CartService = Depends(get_service),
):
    return {"success": True, "cart_data": svc.get_cart(user_id)}
