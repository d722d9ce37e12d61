class EducationTrackerError(Exception):
    """Base exception for domain rule violations."""


class InvalidInputError(EducationTrackerError):
    """Raised when required input is missing or outside its allowed range."""


class TokenError(EducationTrackerError):
    """Raised when a request does not carry a usable bearer token."""


class MissingTokenError(TokenError):
    """The Authorization header is absent or not of the form ``Bearer <token>``."""

    def __init__(self, message: str = "No token provided") -> None:
        super().__init__(message)


class InvalidTokenError(TokenError):
    """The token failed signature, expiry or structural validation."""

    def __init__(self, message: str = "Invalid token") -> None:
        super().__init__(message)
