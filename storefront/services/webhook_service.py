# storefront/services/webhook_service.py
import json
from enum import Enum

from sqlalchemy.orm import Session

from storefront.domain.enums import OrderStatus, PaymentStatus
from storefront.domain.errors import ConflictError
from storefront.services.event_ledger import EventLedger
from storefront.services.order_service import OrderService
from storefront.services.payment_client import PaymentClient
from storefront.utils.retry import conflict_retry
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class EventKind(str, Enum):
    CHECKOUT_SESSION_COMPLETED = "checkout.session.completed"
    PAYMENT_INTENT_SUCCEEDED = "payment_intent.succeeded"
    PAYMENT_INTENT_FAILED = "payment_intent.payment_failed"
    CHECKOUT_SESSION_EXPIRED = "checkout.session.expired"


PAID = {"payment_status": PaymentStatus.PAID.value, "status": OrderStatus.CONFIRMED.value}
FAILED = {"payment_status": PaymentStatus.FAILED.value, "status": OrderStatus.CANCELLED.value}


class WebhookService:
    """
    Payment gateway callbacks. The signature is checked before anything is read;
    after that every event is acknowledged, handler failures are logged and dropped
    because the gateway does not redeliver an acknowledged event.
    """

    def __init__(self, db: Session, payment_client: PaymentClient, ledger: EventLedger):
        self.orders = OrderService(db)
        self.payment_client = payment_client
        self.ledger = ledger
        self.handlers = {
            EventKind.CHECKOUT_SESSION_COMPLETED: self.handle_checkout_session_completed,
            EventKind.PAYMENT_INTENT_SUCCEEDED: self.handle_payment_intent_succeeded,
            EventKind.PAYMENT_INTENT_FAILED: self.handle_payment_intent_failed,
            EventKind.CHECKOUT_SESSION_EXPIRED: self.handle_checkout_session_expired,
        }

    def construct_event(self, payload: str, signature: str) -> dict:
        """Raises stripe.SignatureVerificationError on a bad signature."""
        self.payment_client.verify_signature(payload, signature)
        return json.loads(payload)

    def dispatch(self, event: dict) -> None:
        if not isinstance(event, dict):
            logger.error(f"Malformed webhook event, expected an object: {event!r}")
            return

        event_type = event.get("type")
        logger.info(f"Received webhook event: {event_type}")

        try:
            kind = EventKind(event_type)
        except ValueError:
            logger.info(f"Unhandled event type: {event_type}")
            return

        # payload shape is checked before the id is claimed
        data = event.get("data")
        obj = data.get("object") if isinstance(data, dict) else None
        if not isinstance(obj, dict):
            logger.error(f"Event {event.get('id')} has no data.object, ignoring")
            return

        if not self._claim(event.get("id")):
            logger.info(f"Event {event.get('id')} already processed, skipping")
            return

        self.handlers[kind](obj)

    def _claim(self, event_id: str | None) -> bool:
        if not event_id:
            return True
        try:
            return self.ledger.claim(event_id)
        except Exception as e:
            # re-applying an assignment is a no-op, so process without the ledger
            logger.warning(f"Event ledger unavailable, processing {event_id} anyway: {e!r}")
            return True

    # handlers: each one logs and returns on failure

    def handle_checkout_session_completed(self, session: dict):
        try:
            order_id = self._metadata_order_id(session)
            if order_id is None:
                return

            self._apply(order_id, {**PAID, "payment_intent_id": session.get("payment_intent")})
            logger.info(f"Order {order_id} marked as paid")
        except Exception as e:
            logger.error(f"Error handling checkout session completed: {e!r}")

    def handle_payment_intent_succeeded(self, payment_intent: dict):
        try:
            order = self.orders.find_by_payment_intent(payment_intent.get("id"))
            if not order:
                logger.error(f"No order found for payment intent {payment_intent.get('id')}")
                return

            self._apply(order.id, PAID)
            logger.info(f"Order {order.id} payment confirmed")
        except Exception as e:
            logger.error(f"Error handling payment intent succeeded: {e!r}")

    def handle_payment_intent_failed(self, payment_intent: dict):
        try:
            order = self.orders.find_by_payment_intent(payment_intent.get("id"))
            if not order:
                logger.error(f"No order found for payment intent {payment_intent.get('id')}")
                return

            self._apply(order.id, FAILED)
            logger.info(f"Order {order.id} payment failed")
        except Exception as e:
            logger.error(f"Error handling payment intent failed: {e!r}")

    def handle_checkout_session_expired(self, session: dict):
        try:
            order_id = self._metadata_order_id(session)
            if order_id is None:
                return

            self._apply(order_id, FAILED)
            logger.info(f"Order {order_id} session expired, marked as cancelled")
        except Exception as e:
            logger.error(f"Error handling checkout session expired: {e!r}")

    @conflict_retry()
    def _apply(self, order_id: int, new_data: dict):
        try:
            self.orders.apply_payment_result(order_id, new_data)
        except ConflictError:
            logger.warning(f"Version conflict on order {order_id}, re-reading")
            raise

    @staticmethod
    def _metadata_order_id(session: dict) -> int | None:
        order_id = (session.get("metadata") or {}).get("orderId")
        if not order_id:
            logger.error("No orderId in session metadata")
            return None
        return int(order_id)
