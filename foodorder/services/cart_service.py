from typing import Dict

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from foodorder.domain.cart import Cart
from foodorder.domain.errors import PersistenceError
from foodorder.repos.user_repo import UserRepo
from foodorder.services.lock_service import LockService
from foodorder.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Use cases of the cart domain.
    commands (add, remove, clear) change the stored cart
    query (get) is read only
    """

    def __init__(self, db: Session, lock_service: LockService):
        self.repo = UserRepo(db)
        self.lock_service = lock_service

    def _load(self, user_id: str) -> Cart:
        user = self.repo.get_user(user_id)
        if not user:
            raise PersistenceError(f"User {user_id} not found")
        return Cart(user.cart_data)

    def _save(self, user_id: str, cart: Cart) -> None:
        rowcount = self.repo.save_cart(user_id, cart.as_dict())
        if rowcount == 0:
            raise PersistenceError(f"User {user_id} not found")

    # query
    def get_cart(self, user_id: str) -> Dict[str, int]:
        try:
            return self._load(user_id).as_dict()
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Failed to read cart of user {user_id}: {e}")
            raise PersistenceError("Cart store unavailable") from e

    # commands
    def add_item(self, user_id: str, item_id: str) -> Dict[str, int]:
        with self.lock_service.cart_lock(user_id):
            try:
                cart = self._load(user_id)
                quantity = cart.increment(item_id)
                self._save(user_id, cart)
            except SQLAlchemyError as e:
                self.repo.rollback()
                logger.error(f"Failed to add item {item_id} for user {user_id}: {e}")
                raise PersistenceError("Cart store unavailable") from e

        logger.info(f"Item {item_id} added to cart of user {user_id}, quantity {quantity}")
        return cart.as_dict()

    def remove_item(self, user_id: str, item_id: str) -> Dict[str, int]:
        with self.lock_service.cart_lock(user_id):
            try:
                cart = self._load(user_id)
                if cart.quantity(item_id) == 0:
                    logger.info(f"Item {item_id} not in cart of user {user_id}, nothing to remove")
                    return cart.as_dict()
                quantity = cart.decrement(item_id)
                self._save(user_id, cart)
            except SQLAlchemyError as e:
                self.repo.rollback()
                logger.error(f"Failed to remove item {item_id} for user {user_id}: {e}")
                raise PersistenceError("Cart store unavailable") from e

        logger.info(f"Item {item_id} removed from cart of user {user_id}, quantity {quantity}")
        return cart.as_dict()

    def clear_cart(self, user_id: str) -> None:
        with self.lock_service.cart_lock(user_id):
            try:
                self._save(user_id, Cart())
            except SQLAlchemyError as e:
                self.repo.rollback()
                logger.error(f"Failed to clear cart of user {user_id}: {e}")
                raise PersistenceError("Cart store unavailable") from e

        logger.info(f"Cart of user {user_id} cleared")
