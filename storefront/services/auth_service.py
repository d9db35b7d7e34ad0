# storefront/services/auth_service.py
from sqlalchemy.orm import Session

from storefront.data.models.user import UserModel
from storefront.domain.errors import NotFoundError
from storefront.domain.schemas import RegisterIn, LoginIn, TokenOut, UserRead
from storefront.repos.user_repo import UserRepo
from storefront.services.github_client import GitHubClient
from storefront.services.notification_service import NotificationService
from storefront.utils.security import (
    hash_password,
    verify_password,
    generate_random_password,
    create_access_token,
)
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class AuthService:
    """
    Credentials and GitHub sign-in. Both end in the same session token,
    which carries only the user id.
    """

    def __init__(self, db: Session, notifier: NotificationService | None = None):
        self.repo = UserRepo(db)
        self.notifier = notifier or NotificationService()

    def register(self, payload: RegisterIn) -> None:
        if self.repo.get_by_email(payload.email):
            raise ValueError("Email already registered. Please log in.")

        user = self.repo.create_user(
            UserModel(
                name=payload.username,
                email=payload.email,
                password=hash_password(payload.password),
            )
        )
        logger.info(f"Registered user {user.id}")

    def authenticate(self, email: str, password: str) -> UserModel:
        user = self.repo.get_by_email(email)
        if not user or not verify_password(password, user.password):
            # same message for unknown email and wrong password
            raise PermissionError("Invalid credentials")
        return user

    def login(self, payload: LoginIn) -> TokenOut:
        user = self.authenticate(payload.email, payload.password)
        logger.info(f"User {user.id} logged in")
        return self.issue_token(user)

    def issue_token(self, user: UserModel) -> TokenOut:
        return TokenOut(user=UserRead.model_validate(user), access_token=create_access_token(user.id))

    def reset_password(self, email: str) -> None:
        user = self.repo.get_by_email(email)
        if not user:
            raise NotFoundError("User not found")

        new_password = generate_random_password()
        user.password = hash_password(new_password)
        self.repo.save(user)

        self.notifier.send_password_reset(email, new_password)
        logger.info(f"Password reset for user {user.id}, mail queued")

    def github_sign_in(self, code: str, client: GitHubClient) -> TokenOut:
        access_token = client.exchange_code(code)
        profile = client.fetch_profile(access_token)

        user = self.repo.get_by_email(profile["email"])
        if not user:
            user = self.repo.create_user(
                UserModel(name=profile["name"], email=profile["email"], password="")
            )
            logger.info(f"Created user {user.id} from GitHub sign-in")

        return self.issue_token(user)
