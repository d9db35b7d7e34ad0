from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship

from storefront.data.database import Base


def _now():
    return datetime.now(timezone.utc)


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False, unique=True, index=True)
    # empty for accounts created through GitHub sign-in
    password = Column(String, nullable=False, default="")
    role = Column(String, nullable=False, default="user")

    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)

    orders = relationship("OrderModel", back_populates="user")
    cart = relationship("CartModel", back_populates="user", uselist=False, cascade="all, delete-orphan")
