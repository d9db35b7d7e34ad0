# storefront/repos/order_repo.py
from sqlalchemy import select, update, func
from sqlalchemy.orm import Session, selectinload, joinedload

from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel


def _with_details(stmt):
    return stmt.options(
        joinedload(OrderModel.user),
        selectinload(OrderModel.items).joinedload(OrderItemModel.product),
    )


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_order(self, order: OrderModel) -> OrderModel:
        """Stage a new order; the caller commits."""
        self.db.add(order)
        self.db.flush()
        return order

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def get_order_with_details(self, order_id: int) -> OrderModel | None:
        return self.db.execute(
            _with_details(select(OrderModel).where(OrderModel.id == order_id))
        ).scalar_one_or_none()

    def get_by_payment_intent(self, payment_intent_id: str) -> OrderModel | None:
        return self.db.execute(
            select(OrderModel).where(OrderModel.payment_intent_id == payment_intent_id)
        ).scalars().first()

    def list_orders(self, user_id: int | None = None, limit: int | None = None) -> list[OrderModel]:
        stmt = _with_details(select(OrderModel))
        if user_id is not None:
            stmt = stmt.where(OrderModel.user_id == user_id)
        stmt = stmt.order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self.db.execute(stmt).scalars().unique())

    def count_orders(self) -> int:
        return self.db.execute(select(func.count(OrderModel.id))).scalar_one()

    def sum_totals(self):
        # None when there are no orders
        return self.db.execute(select(func.sum(OrderModel.total))).scalar_one()

    def update_order_version(self, order_id: int, old_version: int, new_data: dict) -> int:
        """
        Conditional update: UPDATE orders SET ... WHERE id = :id AND version = :old.
        Returns the number of rows matched, 0 means someone else wrote first.
        """
        result = self.db.execute(
            update(OrderModel)
            .where(OrderModel.id == order_id, OrderModel.version == old_version)
            .values(version=old_version + 1, **new_data)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()

    def refresh(self, order: OrderModel) -> OrderModel:
        self.db.refresh(order)
        return order
