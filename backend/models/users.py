# backend/models/users.py
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Index, func
from sqlalchemy.orm import object_session
from database import Base

# Represents a user account with credentials, role flags and shift assignments
class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False)
    password_hash = Column(String, nullable=False)

    # Role flags
    admin = Column(Boolean, nullable=False, default=False, server_default="0")
    primary = Column(Boolean, nullable=False, default=False, server_default="0")

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Case-insensitive uniqueness lives in the database so racing inserts fail at commit
    __table_args__ = (
        Index("ix_users_email_lower", func.lower(email), unique=True),
    )

    @property
    def shifts(self):
        """Shifts where this user is the primary or the secondary assignee."""
        from services.shifts import shifts_for_user

        db = object_session(self)
        if db is None:
            return []
        return shifts_for_user(db, self)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"
