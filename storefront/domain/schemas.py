# storefront/domain/schemas.py
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ---------- users / auth ----------

class UserRead(CamelModel):
    id: int
    name: str
    email: str
    role: str
    created_at: datetime


class UserWithOrderCount(UserRead):
    order_count: int = 0


class UserCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=1)


class AdminUserCreate(UserCreate):
    role: Optional[str] = None


class AdminUserUpdate(CamelModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    role: Optional[str] = None


class RegisterIn(CamelModel):
    username: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=1)


class LoginIn(CamelModel):
    email: str
    password: str


class PasswordResetIn(CamelModel):
    email: str


class TokenOut(CamelModel):
    user: UserRead
    access_token: str
    token_type: str = "bearer"


class MessageOut(CamelModel):
    message: str


class AdminValidateOut(CamelModel):
    success: bool
    user: UserRead


# ---------- catalog ----------

class CategoryOut(CamelModel):
    id: int
    name: str
    description: Optional[str] = None


class ProductOut(CamelModel):
    id: int
    name: str
    description: str
    price: Decimal
    image_url: str
    category_id: int
    created_at: datetime
    updated_at: datetime


class ProductWithCategoryOut(ProductOut):
    category: CategoryOut


class ProductCreate(CamelModel):
    name: str = Field(..., min_length=1)
    description: str = ""
    price: Decimal = Field(..., gt=0)
    image_url: str = ""
    category_id: int = Field(..., gt=0)


class ProductSummary(CamelModel):
    id: int
    name: str
    image_url: str


# ---------- cart ----------

class CartItemIn(CamelModel):
    product_id: int = Field(..., gt=0)
    quantity: int = Field(..., gt=0)


class CartItemRemove(CamelModel):
    product_id: int = Field(..., gt=0)


class CartItemOut(CamelModel):
    id: int
    cart_id: int
    product_id: int
    quantity: int
    product: ProductOut


class CartOut(CamelModel):
    id: int
    user_id: int
    items: List[CartItemOut]


# ---------- orders ----------

class OrderCreate(CamelModel):
    shipping_address: str = Field(..., min_length=1)
    payment_method: str = Field(..., min_length=1)


class OrderItemOut(CamelModel):
    id: int
    order_id: int
    product_id: int
    quantity: int
    price: Decimal
    product: ProductOut


class OrderOut(CamelModel):
    id: int
    user_id: int
    total: Decimal
    status: str
    payment_status: str
    payment_method: Optional[str] = None
    payment_intent_id: Optional[str] = None
    stripe_session_id: Optional[str] = None
    shipping_address: str
    created_at: datetime
    updated_at: datetime
    items: List[OrderItemOut]


class OrderUserOut(CamelModel):
    id: int
    name: str
    email: str


class AdminOrderItemOut(CamelModel):
    id: int
    product_id: int
    quantity: int
    price: Decimal
    product: ProductSummary


class AdminOrderOut(CamelModel):
    id: int
    user_id: int
    total: Decimal
    status: str
    payment_status: str
    payment_method: Optional[str] = None
    payment_intent_id: Optional[str] = None
    shipping_address: str
    created_at: datetime
    updated_at: datetime
    user: OrderUserOut
    items: List[AdminOrderItemOut]


class OrderStatusUpdate(CamelModel):
    # validated in the service so the error message stays "Invalid status"
    status: Optional[str] = None


class RecentOrderOut(CamelModel):
    id: int
    user: str
    total: Decimal
    status: str
    created_at: datetime


class StatsOut(CamelModel):
    total_users: int
    total_products: int
    total_orders: int
    total_revenue: float


# ---------- payments ----------

class CheckoutSessionIn(CamelModel):
    order_id: Optional[int] = None
    success_url: Optional[str] = None
    cancel_url: Optional[str] = None


class CheckoutSessionOut(CamelModel):
    session_id: str
    url: Optional[str] = None


class VerifySessionIn(CamelModel):
    session_id: Optional[str] = None


class CheckoutSessionInfo(BaseModel):
    # mirrors the gateway's own field names
    id: str
    payment_status: Optional[str] = None
    status: Optional[str] = None
    amount_total: Optional[int] = None
    currency: Optional[str] = None
    customer_email: Optional[str] = None


class VerifiedOrderOut(CamelModel):
    id: int
    status: str
    payment_status: str
    total: Decimal
    items: List[OrderItemOut]
    created_at: datetime


class VerifySessionOut(CamelModel):
    session: CheckoutSessionInfo
    order: VerifiedOrderOut


class WebhookAck(CamelModel):
    received: bool = True
