"""User model."""

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from app.database import Base, TimestampMixin


class User(TimestampMixin, Base):
    """Application user.

    ``password`` holds the bcrypt hash. It and ``remember_token`` are never
    part of any response schema.
    """

    __tablename__ = "user"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)
    email_verified_at = Column(DateTime, nullable=True)
    profile_image = Column(String(512), nullable=True)
    remember_token = Column(String(100), nullable=True)

    tokens = relationship("AuthToken", back_populates="user", cascade="all, delete-orphan")
    focus_sessions = relationship("FocusSession", back_populates="user", cascade="all, delete-orphan")
    notifications = relationship("Notification", back_populates="user", cascade="all, delete-orphan")

    @property
    def has_verified_email(self) -> bool:
        return self.email_verified_at is not None
