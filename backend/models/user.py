"""User model definitions."""

from sqlalchemy import Boolean, Column, String
from backend.database import Base


class User(Base):
    """Row in the timesheet system's Users table. Read-only from this service."""
    __tablename__ = "Users"

    id = Column(String(36), primary_key=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    full_name = Column(String(255), nullable=False)
    role = Column(String(50))  # admin/user
    password_hash = Column(String(255))
    is_active = Column("IsActive", Boolean, default=True, nullable=False)
