# storefront/services/payment_client.py
import time

import stripe

from storefront.utils.retry import stripe_retry
from storefront.utils.settings import STRIPE_SECRET_KEY, STRIPE_WEBHOOK_SECRET, CHECKOUT_SESSION_TTL_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

ALLOWED_SHIPPING_COUNTRIES = ["US", "CA", "GB", "AU", "DE", "FR", "IT", "ES"]


def _field(obj, name):
    if obj is None:
        return None
    try:
        return obj[name]
    except (KeyError, TypeError):
        return getattr(obj, name, None)


class PaymentClient:
    """Thin wrapper over the Stripe SDK: hosted checkout sessions and webhook signatures."""

    def __init__(self, api_key: str | None = None, webhook_secret: str | None = None):
        self.api_key = api_key or STRIPE_SECRET_KEY
        self.webhook_secret = webhook_secret or STRIPE_WEBHOOK_SECRET

    @stripe_retry()
    def create_checkout_session(
        self,
        line_items: list[dict],
        customer_email: str,
        metadata: dict,
        success_url: str,
        cancel_url: str,
    ) -> dict:
        logger.info(f"Creating Stripe checkout session for order {metadata.get('orderId')}")
        session = stripe.checkout.Session.create(
            api_key=self.api_key,
            payment_method_types=["card"],
            line_items=line_items,
            mode="payment",
            success_url=success_url,
            cancel_url=cancel_url,
            customer_email=customer_email,
            metadata=metadata,
            shipping_address_collection={"allowed_countries": ALLOWED_SHIPPING_COUNTRIES},
            billing_address_collection="required",
            expires_at=int(time.time()) + CHECKOUT_SESSION_TTL_SECONDS,
        )
        return {"id": session.id, "url": _field(session, "url")}

    @stripe_retry()
    def retrieve_checkout_session(self, session_id: str) -> dict:
        logger.info(f"Retrieving Stripe checkout session {session_id}")
        session = stripe.checkout.Session.retrieve(session_id, api_key=self.api_key)
        metadata = _field(session, "metadata")
        return {
            "id": session.id,
            "payment_status": _field(session, "payment_status"),
            "status": _field(session, "status"),
            "amount_total": _field(session, "amount_total"),
            "currency": _field(session, "currency"),
            "customer_email": _field(session, "customer_email"),
            "metadata": {"orderId": _field(metadata, "orderId")} if metadata else {},
        }

    def verify_signature(self, payload: str, signature: str) -> None:
        """Raises stripe.SignatureVerificationError when the header does not match the body."""
        stripe.WebhookSignature.verify_header(payload, signature, self.webhook_secret)
