# foodorder/services/payment_gateway.py
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List

import stripe

from foodorder.domain.errors import GatewayError, WebhookSignatureError
from foodorder.utils.settings import CURRENCY, STRIPE_SECRET_KEY, STRIPE_WEBHOOK_SECRET
from foodorder.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class LineItem:
    name: str
    unit_price: Decimal
    quantity: int


@dataclass(frozen=True)
class CheckoutSession:
    id: str
    url: str


def to_minor_units(amount: Decimal) -> int:
    return int((amount * 100).quantize(Decimal("1")))


class StripeGateway:
    """
    Boundary to Stripe Checkout.
    Creates sessions and verifies webhook events, no local bookkeeping.
    """

    def __init__(
        self,
        api_key: str | None = None,
        webhook_secret: str | None = None,
        currency: str = CURRENCY,
    ):
        self.api_key = api_key or STRIPE_SECRET_KEY
        self.webhook_secret = webhook_secret or STRIPE_WEBHOOK_SECRET
        self.currency = currency

    def _line_items(self, line_items: List[LineItem]) -> List[Dict[str, Any]]:
        return [
            {
                "price_data": {
                    "currency": self.currency,
                    "product_data": {"name": item.name},
                    "unit_amount": to_minor_units(item.unit_price),
                },
                "quantity": item.quantity,
            }
            for item in line_items
        ]

    def create_checkout_session(
        self,
        line_items: List[LineItem],
        success_url: str,
        cancel_url: str,
        metadata: Dict[str, str] | None = None,
    ) -> CheckoutSession:
        try:
            session = stripe.checkout.Session.create(
                mode="payment",
                line_items=self._line_items(line_items),
                success_url=success_url,
                cancel_url=cancel_url,
                metadata=metadata or {},
                api_key=self.api_key,
            )
        except stripe.StripeError as e:
            logger.error(f"Stripe checkout session failed: {e}")
            raise GatewayError(f"Payment gateway error: {e}") from e

        logger.info(f"Stripe checkout session {session.id} created")
        return CheckoutSession(id=session.id, url=session.url)

    def parse_webhook(self, payload: bytes, signature: str | None) -> Dict[str, Any]:
        if not self.webhook_secret:
            raise WebhookSignatureError("Webhook secret is not configured")
        if not signature:
            raise WebhookSignatureError("Missing Stripe-Signature header")

        try:
            event = stripe.Webhook.construct_event(payload, signature, self.webhook_secret)
        except stripe.SignatureVerificationError as e:
            logger.warning(f"Stripe webhook signature invalid: {e}")
            raise WebhookSignatureError("Invalid webhook signature") from e
        except ValueError as e:
            raise WebhookSignatureError("Malformed webhook payload") from e

        return event
