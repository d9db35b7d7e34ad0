# storefront/domain/enums.py
from enum import Enum


class OrderStatus(str, Enum):
    """Fulfillment stage of an order. One vocabulary for admin and webhook writers."""

    PENDING = "pending"
    PROCESSING = "processing"
    CONFIRMED = "confirmed"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


# confirmed is reserved for the payment webhook
ADMIN_ASSIGNABLE_STATUSES = frozenset(
    {
        OrderStatus.PENDING.value,
        OrderStatus.PROCESSING.value,
        OrderStatus.SHIPPED.value,
        OrderStatus.DELIVERED.value,
        OrderStatus.CANCELLED.value,
    }
)


class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    FAILED = "FAILED"


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"
