"""
Auth schemas for request/response validation
"""
from pydantic import BaseModel, Field


class SessionUser(BaseModel):
    """Identity carried inside a session token.

    Serialized with the camelCase names the browser client reads
    (``userId``, ``fullName``).
    """

    user_id: str = Field(alias='userId')
    email: str
    full_name: str | None = Field(default=None, alias='fullName')
    role: str | None = None

    class Config:
        populate_by_name = True

    def to_claims(self) -> dict:
        return self.model_dump(by_alias=True)


class LoginRequest(BaseModel):
    # The client sends the email address in the username field.
    username: str | None = None
    password: str | None = None


class LoginResponse(BaseModel):
    token: str
    user: SessionUser


class VerifyResponse(BaseModel):
    user: SessionUser
