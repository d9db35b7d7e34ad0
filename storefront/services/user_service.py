from sqlalchemy.orm import Session

from storefront.data.models.user import UserModel
from storefront.domain.enums import Role
from storefront.domain.errors import NotFoundError
from storefront.domain.schemas import (
    UserCreate,
    UserRead,
    UserWithOrderCount,
    AdminUserCreate,
    AdminUserUpdate,
)
from storefront.repos.user_repo import UserRepo
from storefront.utils.security import hash_password
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

VALID_ROLES = {Role.USER.value, Role.ADMIN.value}


class UserService:
    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def list_users(self) -> list[UserRead]:
        return [UserRead.model_validate(u) for u in self.repo.list_users()]

    def create_user(self, payload: UserCreate, role: str = Role.USER.value) -> UserRead:
        if self.repo.get_by_email(payload.email):
            raise ValueError("User with this email already exists")

        user = UserModel(
            name=payload.name,
            email=payload.email,
            password=hash_password(payload.password),
            role=role,
        )
        created = self.repo.create_user(user)
        logger.info(f"Created user {created.id} ({created.email})")
        return UserRead.model_validate(created)

    # admin back office

    def list_users_with_order_counts(self) -> list[UserWithOrderCount]:
        return [
            UserWithOrderCount(**UserRead.model_validate(user).model_dump(), order_count=count)
            for user, count in self.repo.list_users_with_order_counts()
        ]

    def admin_create_user(self, payload: AdminUserCreate) -> UserRead:
        if payload.role and payload.role not in VALID_ROLES:
            raise ValueError("Invalid role")
        return self.create_user(payload, role=payload.role or Role.USER.value)

    def admin_update_user(self, user_id: int, payload: AdminUserUpdate) -> UserWithOrderCount:
        if not payload.name or not payload.email or not payload.role:
            raise ValueError("Name, email, and role are required")

        if payload.role not in VALID_ROLES:
            raise ValueError("Invalid role")

        user = self.repo.get_user(user_id)
        if not user:
            raise NotFoundError("User not found")

        if payload.email != user.email and self.repo.get_by_email(payload.email):
            raise ValueError("Email is already taken")

        user.name = payload.name
        user.email = payload.email
        user.role = payload.role
        self.repo.save(user)
        logger.info(f"Updated user {user.id} (role={user.role})")

        return UserWithOrderCount(
            **UserRead.model_validate(user).model_dump(),
            order_count=self.repo.count_orders(user.id),
        )

    def admin_delete_user(self, user_id: int) -> None:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFoundError("User not found")

        # orders are never deleted, so neither is their owner
        if self.repo.count_orders(user_id):
            raise ValueError("Cannot delete a user with existing orders")

        self.repo.delete_user(user)
        logger.info(f"Deleted user {user_id}")
