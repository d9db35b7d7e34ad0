# storefront/api/routers/auth.py
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import RedirectResponse
from fastapi.security import OAuth2PasswordRequestForm
from requests import RequestException
from sqlalchemy.orm import Session

from storefront.api.deps import get_github_client, get_notifier
from storefront.data.database import get_db
from storefront.domain.errors import NotFoundError
from storefront.domain.schemas import RegisterIn, LoginIn, PasswordResetIn, TokenOut, MessageOut
from storefront.services.auth_service import AuthService
from storefront.services.github_client import GitHubClient
from storefront.services.notification_service import NotificationService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=MessageOut)
def register(payload: RegisterIn, db: Session = Depends(get_db)):
    try:
        AuthService(db).register(payload)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return MessageOut(message="success")


@router.post("/login", response_model=TokenOut)
def login(payload: LoginIn, db: Session = Depends(get_db)):
    try:
        return AuthService(db).login(payload)
    except PermissionError as e:
        raise HTTPException(status_code=401, detail=str(e))


@router.post("/token")
def token(form: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
    """OAuth2 password flow, used by the interactive docs."""
    svc = AuthService(db)
    try:
        user = svc.authenticate(form.username, form.password)
    except PermissionError as e:
        raise HTTPException(status_code=401, detail=str(e), headers={"WWW-Authenticate": "Bearer"})
    issued = svc.issue_token(user)
    return {"access_token": issued.access_token, "token_type": "bearer"}


@router.post("/password-reset", response_model=MessageOut)
def password_reset(
    payload: PasswordResetIn,
    db: Session = Depends(get_db),
    notifier: NotificationService = Depends(get_notifier),
):
    try:
        AuthService(db, notifier=notifier).reset_password(payload.email)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return MessageOut(message="New password has been sent to your email")


@router.get("/github/login")
def github_login(request: Request, client: GitHubClient = Depends(get_github_client)):
    redirect_uri = str(request.url_for("github_callback"))
    return RedirectResponse(client.authorize_url(redirect_uri))


@router.get("/github/callback", response_model=TokenOut, name="github_callback")
def github_callback(
    code: str = Query(...),
    db: Session = Depends(get_db),
    client: GitHubClient = Depends(get_github_client),
):
    try:
        return AuthService(db).github_sign_in(code, client)
    except (ValueError, RequestException) as e:
        logger.error(f"GitHub sign-in failed: {e!r}")
        raise HTTPException(status_code=400, detail="GitHub sign-in failed")
