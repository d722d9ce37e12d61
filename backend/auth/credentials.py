import logging

from sqlalchemy.orm import Session

from backend.auth.passwords import dummy_verify, verify_password
from backend.auth.schemas import SessionUser
from backend.models.user import User

logger = logging.getLogger(__name__)


def authenticate(db: Session, email: str, password: str) -> SessionUser | None:
    """Check an email/password pair against the Users table.

    Returns ``None`` both for an unknown email and for a wrong password so the
    caller cannot tell which one happened.
    """
    user = db.query(User).filter(User.email == email).first()
    if user is None:
        dummy_verify()

    if user is None or not verify_password(password, user.password_hash):
        logger.info('Rejected login attempt for %s', email)
        return None

    return SessionUser(
        user_id=str(user.id),
        email=user.email,
        full_name=user.full_name,
        role=user.role,
    )
