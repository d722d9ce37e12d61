from passlib.context import CryptContext

# Hashes are written by the timesheet system with bcrypt ($2a$/$2b$).
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Unrecognized or truncated hash in the Users table.
        return False


def dummy_verify() -> None:
    """Spend the same time as a real check when no user matched."""
    pwd_context.dummy_verify()
