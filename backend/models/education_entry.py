"""Education entry model definitions."""

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, Numeric, String, Unicode, UnicodeText
from backend.database import Base

DEFAULT_CATEGORY = "General"


class EducationEntry(Base):
    """One logged continuing-education activity."""
    __tablename__ = "EducationEntries"

    entry_id = Column("EntryID", Integer, primary_key=True, autoincrement=True)
    user_id = Column("UserID", String(36), ForeignKey("Users.id"), nullable=False, index=True)
    activity_date = Column("ActivityDate", Date, nullable=False)
    hours = Column("Hours", Numeric(4, 2), nullable=False)
    description = Column("Description", UnicodeText, nullable=False)
    category = Column("Category", Unicode(100), default=DEFAULT_CATEGORY)
    created_date = Column("CreatedDate", DateTime, nullable=False)
