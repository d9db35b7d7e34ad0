from sqlalchemy import select, func
from sqlalchemy.orm import Session

from storefront.data.models.user import UserModel
from storefront.data.models.order import OrderModel


class UserRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: int) -> UserModel | None:
        return self.db.get(UserModel, user_id)

    def get_by_email(self, email: str) -> UserModel | None:
        return self.db.execute(
            select(UserModel).where(UserModel.email == email)
        ).scalar_one_or_none()

    def list_users(self) -> list[UserModel]:
        return list(self.db.execute(select(UserModel).order_by(UserModel.id)).scalars())

    def list_users_with_order_counts(self) -> list[tuple[UserModel, int]]:
        stmt = (
            select(UserModel, func.count(OrderModel.id))
            .outerjoin(OrderModel, OrderModel.user_id == UserModel.id)
            .group_by(UserModel.id)
            .order_by(UserModel.created_at.desc(), UserModel.id.desc())
        )
        return [(user, count) for user, count in self.db.execute(stmt).all()]

    def count_orders(self, user_id: int) -> int:
        return self.db.execute(
            select(func.count(OrderModel.id)).where(OrderModel.user_id == user_id)
        ).scalar_one()

    def count_users(self) -> int:
        return self.db.execute(select(func.count(UserModel.id))).scalar_one()

    def create_user(self, user: UserModel) -> UserModel:
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def save(self, user: UserModel) -> UserModel:
        self.db.commit()
        self.db.refresh(user)
        return user

    def delete_user(self, user: UserModel) -> None:
        self.db.delete(user)
        self.db.commit()
