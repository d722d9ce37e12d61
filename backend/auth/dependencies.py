from fastapi import Header, HTTPException

from backend.auth import jwt_handler
from backend.auth.schemas import SessionUser
from backend.core.exceptions import TokenError


def get_current_user(authorization: str | None = Header(default=None)) -> SessionUser:
    try:
        return jwt_handler.verify_token(authorization)
    except TokenError as exc:
        raise HTTPException(
            status_code=401,
            detail=str(exc),
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc
