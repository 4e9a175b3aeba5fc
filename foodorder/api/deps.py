# foodorder/api/deps.py
from fastapi import Header

from foodorder.domain.errors import Unauthenticated
from foodorder.services.catalog_client import CatalogClient
from foodorder.services.lock_service import LockService
from foodorder.services.notification_service import NotificationService
from foodorder.services.payment_gateway import StripeGateway
from foodorder.services.token_service import decode_access_token
from foodorder.utils.settings import CATALOG_SERVICE_URL


def get_current_user_id(token: str | None = Header(default=None)) -> str:
    """Access guard: resolves the ``token`` header to a user id before any user-scoped work."""
    if not token:
        raise Unauthenticated("Missing access token")
    return decode_access_token(token)


def get_lock_service() -> LockService:
    return LockService()


def get_payment_gateway() -> StripeGateway:
    return StripeGateway()


def get_catalog_client() -> CatalogClient | None:
    if not CATALOG_SERVICE_URL:
        return None
    return CatalogClient()


def get_notification_service() -> NotificationService:
    return NotificationService()
