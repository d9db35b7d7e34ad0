# storefront/api/deps.py
from fastapi import Depends, HTTPException
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.services.access_service import AccessService, SessionClaims, Denied
from storefront.services.event_ledger import EventLedger
from storefront.services.github_client import GitHubClient
from storefront.services.notification_service import NotificationService
from storefront.services.payment_client import PaymentClient
from storefront.utils.security import decode_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/token", auto_error=False)


def get_session(token: str | None = Depends(oauth2_scheme)) -> SessionClaims | None:
    """Decoded bearer token, or None when it is missing, expired or forged."""
    if not token:
        return None
    claims = decode_access_token(token)
    if not claims or "sub" not in claims:
        return None
    return SessionClaims(user_id=str(claims["sub"]))


def require_user(
    session: SessionClaims | None = Depends(get_session),
    db: Session = Depends(get_db),
) -> UserModel:
    result = AccessService(db).validate_user_access(session)
    if isinstance(result, Denied):
        raise HTTPException(status_code=result.status_code, detail=result.reason)
    return result.user


def require_admin(
    session: SessionClaims | None = Depends(get_session),
    db: Session = Depends(get_db),
) -> UserModel:
    result = AccessService(db).validate_admin_access(session)
    if isinstance(result, Denied):
        raise HTTPException(status_code=result.status_code, detail=result.reason)
    return result.user


# external collaborators, overridden in tests

def get_payment_client() -> PaymentClient:
    return PaymentClient()


def get_event_ledger() -> EventLedger:
    return EventLedger()


def get_github_client() -> GitHubClient:
    return GitHubClient()


def get_notifier() -> NotificationService:
    return NotificationService()
