# storefront/utils/security.py
import secrets
import string
from datetime import datetime, timedelta, timezone

import bcrypt
from jose import JWTError, jwt

from storefront.utils.settings import AUTH_SECRET, AUTH_ALGORITHM, ACCESS_TOKEN_EXPIRE_MINUTES

_PASSWORD_CHARSET = string.ascii_letters + string.digits


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=10)).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    if not hashed:
        # OAuth-only account
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False


def generate_random_password(length: int = 12) -> str:
    return "".join(secrets.choice(_PASSWORD_CHARSET) for _ in range(length))


def create_access_token(user_id: int, expires_delta: timedelta | None = None) -> str:
    """Sign a session token. Only the user id goes in; the role is re-read per request."""
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    return jwt.encode({"sub": str(user_id), "exp": expire}, AUTH_SECRET, algorithm=AUTH_ALGORITHM)


def decode_access_token(token: str) -> dict | None:
    try:
        return jwt.decode(token, AUTH_SECRET, algorithms=[AUTH_ALGORITHM])
    except JWTError:
        return None
