"""Focus session model."""

from sqlalchemy import Column, Date, ForeignKey, Integer, Time
from sqlalchemy.orm import relationship

from app.database import Base, TimestampMixin


class FocusSession(TimestampMixin, Base):
    """A completed focus session belonging to a user."""

    __tablename__ = "focus_session"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True)
    duration = Column(Integer, nullable=False)  # minutes
    date = Column(Date, nullable=False)
    time = Column(Time, nullable=False)

    user = relationship("User", back_populates="focus_sessions")
