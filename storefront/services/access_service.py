# storefront/services/access_service.py
from dataclasses import dataclass

from sqlalchemy.orm import Session

from storefront.data.models.user import UserModel
from storefront.domain.enums import Role
from storefront.repos.user_repo import UserRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class SessionClaims:
    """Decoded session token. user_id is kept as the raw string claim."""

    user_id: str


@dataclass(frozen=True)
class Authorized:
    user: UserModel


@dataclass(frozen=True)
class Denied:
    status_code: int
    reason: str


AccessResult = Authorized | Denied


class AccessService:
    """
    Per-request guard chain: session -> user row -> role.
    Nothing is cached between requests, the user row is loaded every time.
    """

    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def validate_user_access(self, session: SessionClaims | None) -> AccessResult:
        try:
            return self._resolve_user(session)
        except Exception as e:
            logger.error(f"User validation error: {e!r}")
            return Denied(500, "Internal server error")

    def validate_admin_access(self, session: SessionClaims | None) -> AccessResult:
        try:
            result = self._resolve_user(session)
            if isinstance(result, Denied):
                return result

            if result.user.role != Role.ADMIN.value:
                logger.info(f"User {result.user.id} denied admin access (role={result.user.role})")
                return Denied(403, "Admin access required")

            return result
        except Exception as e:
            logger.error(f"Admin validation error: {e!r}")
            return Denied(500, "Internal server error")

    def _resolve_user(self, session: SessionClaims | None) -> AccessResult:
        if session is None:
            return Denied(401, "Authentication required")

        try:
            user_id = int(session.user_id)
        except (TypeError, ValueError):
            return Denied(401, "Authentication required")

        user = self.repo.get_user(user_id)
        if not user:
            return Denied(404, "User not found")

        return Authorized(user)
