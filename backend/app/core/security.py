# backend/app/core/security.py

import jwt
import bcrypt
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any

from fastapi import Header

from app.core.config_loader import settings
from app.core.errors import ApiError
from app.core.logger import logger
from app.db.sqlite_store import get_store


ALGORITHM = "HS256"


# ---------------------------------------------------------------------------
# PASSWORD HASHING
# ---------------------------------------------------------------------------
def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))


# ---------------------------------------------------------------------------
# JWT CREATION
# ---------------------------------------------------------------------------
def create_access_token(subject: str, expires_minutes: Optional[int] = None) -> str:
    """
    Default expiration comes from settings (7 days)
    """
    now = datetime.now(timezone.utc)
    minutes = expires_minutes if expires_minutes is not None else settings.access_token_expire_minutes

    payload = {
        "sub": subject,
        "exp": now + timedelta(minutes=minutes),
        "iat": now,
    }

    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=ALGORITHM)


# ---------------------------------------------------------------------------
# JWT VERIFY
# ---------------------------------------------------------------------------
def decode_token(token: str) -> Optional[dict]:
    try:
        return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[ALGORITHM])
    except jwt.PyJWTError as e:
        logger.debug(f"Rejected token: {e}")
        return None


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization or not authorization.startswith("Bearer "):
        return None
    token = authorization.split(" ", 1)[1].strip()
    return token or None


def resolve_user(token: str) -> Optional[Dict[str, Any]]:
    """Map a bearer token to the stored user row, or None when it does not verify."""
    payload = decode_token(token)
    if not payload or not payload.get("sub"):
        return None
    return get_store().get_user_by_id(str(payload["sub"]))


# ---------------------------------------------------------------------------
# REQUEST DEPENDENCIES
# ---------------------------------------------------------------------------
def get_current_user(authorization: Optional[str] = Header(None)) -> Dict[str, Any]:
    token = _bearer_token(authorization)
    if not token:
        raise ApiError.unauthorized("Missing or invalid authorization header")

    user = resolve_user(token)
    if not user:
        raise ApiError.unauthorized("Invalid or expired token", code="INVALID_TOKEN")
    return user


def get_optional_user(authorization: Optional[str] = Header(None)) -> Optional[Dict[str, Any]]:
    """Like get_current_user, but anonymous callers and bad tokens just get None."""
    token = _bearer_token(authorization)
    if not token:
        return None
    return resolve_user(token)
