# storefront/services/checkout_service.py
from decimal import Decimal, ROUND_HALF_UP

from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.data.models.user import UserModel
from storefront.domain.enums import PaymentStatus
from storefront.domain.errors import NotFoundError
from storefront.domain.schemas import (
    CheckoutSessionOut,
    CheckoutSessionInfo,
    VerifiedOrderOut,
    VerifySessionOut,
)
from storefront.services.order_service import OrderService
from storefront.services.payment_client import PaymentClient
from storefront.utils.settings import APP_URL
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def to_cents(amount: Decimal) -> int:
    return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class CheckoutService:
    """Hosted checkout: open a gateway session for an order, then confirm it on return."""

    def __init__(self, db: Session, payment_client: PaymentClient):
        self.orders = OrderService(db)
        self.payment_client = payment_client

    def create_session(
        self,
        user: UserModel,
        order_id: int | None,
        success_url: str | None = None,
        cancel_url: str | None = None,
    ) -> CheckoutSessionOut:
        if not order_id:
            raise ValueError("Order ID is required")

        order = self.orders.get_order_for_payment(order_id, user)

        if order.payment_status == PaymentStatus.PAID.value:
            raise ValueError("Order already paid")

        session = self.payment_client.create_checkout_session(
            line_items=self._line_items(order),
            customer_email=user.email,
            metadata={"orderId": str(order.id), "userId": str(order.user_id)},
            success_url=success_url or f"{APP_URL}/checkout/success?session_id={{CHECKOUT_SESSION_ID}}",
            cancel_url=cancel_url or f"{APP_URL}/checkout/cancel",
        )

        self.orders.attach_checkout_session(order, session["id"])
        logger.info(f"Checkout session {session['id']} opened for order {order_id}")

        return CheckoutSessionOut(session_id=session["id"], url=session["url"])

    def verify_session(self, user: UserModel, session_id: str | None) -> VerifySessionOut:
        if not session_id:
            raise ValueError("Session ID is required")

        session = self.payment_client.retrieve_checkout_session(session_id)

        if session["customer_email"] != user.email:
            raise PermissionError("Unauthorized access to session")

        order_id = session["metadata"].get("orderId")
        if not order_id:
            raise ValueError("No order ID found in session")

        order = self.orders.get_order_model(int(order_id))
        if not order:
            raise NotFoundError("Order not found")

        return VerifySessionOut(
            session=CheckoutSessionInfo(**{k: v for k, v in session.items() if k != "metadata"}),
            order=VerifiedOrderOut.model_validate(order),
        )

    @staticmethod
    def _line_items(order: OrderModel) -> list[dict]:
        line_items = []
        for item in order.items:
            product_data = {"name": item.product.name}
            if item.product.description:
                product_data["description"] = item.product.description
            # the gateway only accepts absolute image urls
            if item.product.image_url.startswith("http"):
                product_data["images"] = [item.product.image_url]

            line_items.append(
                {
                    "price_data": {
                        "currency": "usd",
                        "product_data": product_data,
                        "unit_amount": to_cents(item.price),
                    },
                    "quantity": item.quantity,
                }
            )
        return line_items
