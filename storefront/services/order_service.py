# storefront/services/order_service.py
from decimal import Decimal

from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.data.models.user import UserModel
from storefront.domain.enums import OrderStatus, PaymentStatus, ADMIN_ASSIGNABLE_STATUSES
from storefront.domain.errors import NotFoundError, ConflictError
from storefront.domain.schemas import (
    OrderCreate,
    OrderOut,
    AdminOrderOut,
    RecentOrderOut,
    StatsOut,
)
from storefront.repos.cart_repo import CartRepo
from storefront.repos.catalog_repo import CatalogRepo
from storefront.repos.order_repo import OrderRepo
from storefront.repos.user_repo import UserRepo
from storefront.services.notification_service import NotificationService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

RECENT_ORDERS_LIMIT = 10


class OrderService:
    """
    Order domain: checkout from the cart, order history and the admin side
    of the status lifecycle. Status writes go through a version check.
    """

    def __init__(self, db: Session, notifier: NotificationService | None = None):
        self.db = db
        self.repo = OrderRepo(db)
        self.cart_repo = CartRepo(db)
        self.notifier = notifier or NotificationService()

    # commands

    def create_order_from_cart(self, user: UserModel, payload: OrderCreate) -> OrderOut:
        """
        1. Loads the user's cart, rejects an empty one
        2. Snapshots current product prices into order items
        3. Creates the order and empties the cart in one commit
        4. Queues the confirmation mail
        """
        cart = self.cart_repo.get_cart_by_user(user.id)
        items = self.cart_repo.get_cart_items(cart.id) if cart else []

        if not items:
            raise ValueError("Cart is empty or not found")

        total = sum((i.product.price * i.quantity for i in items), Decimal("0.00"))

        order = OrderModel(
            user_id=user.id,
            total=total,
            shipping_address=payload.shipping_address,
            payment_method=payload.payment_method,
            status=OrderStatus.PENDING.value,
            payment_status=PaymentStatus.PENDING.value,
            items=[
                OrderItemModel(product_id=i.product_id, quantity=i.quantity, price=i.product.price)
                for i in items
            ],
        )

        try:
            self.repo.add_order(order)
            self.cart_repo.clear_items(cart.id)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Order {order.id} created from cart {cart.id}, total {total}")

        self.notifier.send_order_confirmation(user.email, order.id)

        return OrderOut.model_validate(self.repo.get_order_with_details(order.id))

    def update_status(self, order_id: int, status: str | None) -> AdminOrderOut:
        """Admin-initiated transition, restricted to the admin-assignable statuses."""
        if not status:
            raise ValueError("Status is required")

        if status not in ADMIN_ASSIGNABLE_STATUSES:
            raise ValueError("Invalid status")

        order = self.repo.get_order(order_id)
        if not order:
            raise NotFoundError("Order not found")

        old_version = order.version
        rowcount = self.repo.update_order_version(
            order_id=order.id,
            old_version=old_version,
            new_data={"status": status},
        )

        if rowcount == 0:
            self.repo.rollback()
            raise ConflictError("Order was modified concurrently")

        self.repo.commit()
        logger.info(f"Order {order_id} status set to {status} by admin (version {old_version + 1})")

        return AdminOrderOut.model_validate(self.repo.get_order_with_details(order_id))

    def apply_payment_result(self, order_id: int, new_data: dict) -> OrderModel:
        """
        Payment-gateway-initiated transition. Same version check as the admin path;
        raises ConflictError so the caller can re-read and retry.
        """
        # drop anything cached from a previous attempt
        self.db.expire_all()

        order = self.repo.get_order(order_id)
        if not order:
            raise NotFoundError(f"Order {order_id} not found")

        rowcount = self.repo.update_order_version(
            order_id=order.id,
            old_version=order.version,
            new_data=new_data,
        )

        if rowcount == 0:
            self.repo.rollback()
            raise ConflictError(f"Order {order_id} was modified concurrently")

        self.repo.commit()
        return order

    def attach_checkout_session(self, order: OrderModel, session_id: str) -> None:
        rowcount = self.repo.update_order_version(
            order_id=order.id,
            old_version=order.version,
            new_data={
                "stripe_session_id": session_id,
                "payment_method": "stripe",
                "status": OrderStatus.PENDING.value,
            },
        )

        if rowcount == 0:
            self.repo.rollback()
            raise ConflictError("Order was modified concurrently")

        self.repo.commit()

    # queries

    def list_user_orders(self, user_id: int) -> list[OrderOut]:
        return [OrderOut.model_validate(o) for o in self.repo.list_orders(user_id=user_id)]

    def get_user_order(self, order_id: int, user_id: int) -> OrderOut:
        order = self.repo.get_order_with_details(order_id)

        if not order:
            raise NotFoundError("Order not found")

        if order.user_id != user_id:
            raise PermissionError("Unauthorized")

        return OrderOut.model_validate(order)

    def get_order_for_payment(self, order_id: int, user: UserModel) -> OrderModel:
        order = self.repo.get_order_with_details(order_id)

        if not order:
            raise NotFoundError("Order not found")

        if order.user.email != user.email:
            raise PermissionError("Unauthorized access to order")

        return order

    def get_order_model(self, order_id: int) -> OrderModel | None:
        return self.repo.get_order_with_details(order_id)

    def find_by_payment_intent(self, payment_intent_id: str) -> OrderModel | None:
        return self.repo.get_by_payment_intent(payment_intent_id)

    def list_all_orders(self) -> list[AdminOrderOut]:
        return [AdminOrderOut.model_validate(o) for o in self.repo.list_orders()]

    def recent_orders(self) -> list[RecentOrderOut]:
        return [
            RecentOrderOut(
                id=o.id,
                user=o.user.name or o.user.email,
                total=o.total,
                status=o.status,
                created_at=o.created_at,
            )
            for o in self.repo.list_orders(limit=RECENT_ORDERS_LIMIT)
        ]

    def dashboard_stats(self) -> StatsOut:
        revenue = self.repo.sum_totals()
        return StatsOut(
            total_users=UserRepo(self.db).count_users(),
            total_products=CatalogRepo(self.db).count_products(),
            total_orders=self.repo.count_orders(),
            # SUM over zero rows is NULL
            total_revenue=float(revenue or 0),
        )
