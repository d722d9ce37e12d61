from datetime import datetime, timedelta, timezone

import jwt
from pydantic import ValidationError

from backend.auth.schemas import SessionUser
from backend.core import config
from backend.core.exceptions import InvalidTokenError, MissingTokenError

BEARER_PREFIX = "Bearer "


def create_access_token(claims: dict, expires_minutes: int | None = None) -> str:
    expire_minutes = expires_minutes or config.JWT_EXPIRES_MINUTES
    now = datetime.now(timezone.utc)
    payload = {**claims, "iat": now, "exp": now + timedelta(minutes=expire_minutes)}
    return jwt.encode(payload, config.JWT_SECRET_KEY, algorithm=config.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    return jwt.decode(token, config.JWT_SECRET_KEY, algorithms=[config.JWT_ALGORITHM])


def issue_token(user: SessionUser, expires_minutes: int | None = None) -> str:
    """Sign the user's identity into a session token (8 hours by default)."""
    return create_access_token(user.to_claims(), expires_minutes=expires_minutes)


def verify_token(authorization: str | None) -> SessionUser:
    """Validate an ``Authorization`` header value and return the identity it carries.

    The claims are trusted as issued; the Users table is not consulted again,
    so a role change only takes effect once the old token expires.
    """
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise MissingTokenError()

    token = authorization[len(BEARER_PREFIX):]
    try:
        payload = decode_access_token(token)
        return SessionUser.model_validate(payload)
    except (jwt.PyJWTError, ValidationError) as exc:
        raise InvalidTokenError() from exc
