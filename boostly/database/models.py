"""SQLAlchemy ORM models for Boostly."""

from datetime import datetime, timezone
from sqlalchemy import (
    Column, Integer, String, Text, DateTime, Date
)
from sqlalchemy.orm import DeclarativeBase


def _utcnow() -> datetime:
    """Naive UTC timestamp, as stored in the DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    pass


class KeyValue(Base):
    """Durable key-value records (the live session state lives here)."""

    __tablename__ = "kv_store"

    key = Column(String(128), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(
        DateTime, nullable=False, default=_utcnow, onupdate=_utcnow
    )

    def __repr__(self) -> str:
        return f"<KeyValue key={self.key} bytes={len(self.value or '')}>"


class FocusSession(Base):
    """One finished focus interval, kept for long-term history."""

    __tablename__ = "focus_sessions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    session_type = Column(String(20), nullable=False, default="focus")
    session_number = Column(Integer, nullable=False)
    duration_minutes = Column(Integer, nullable=False)
    points_earned = Column(Integer, nullable=False, default=0)
    tree_type = Column(String(20), nullable=False)  # sapling | tree | large_tree | ancient_tree
    started_at = Column(DateTime, nullable=False)
    completed_at = Column(DateTime, nullable=False)

    def __repr__(self) -> str:
        return (
            f"<FocusSession id={self.id} #{self.session_number} "
            f"{self.duration_minutes}m points={self.points_earned}>"
        )


class UserProgress(Base):
    """Single-row table of running totals."""

    __tablename__ = "user_progress"

    id = Column(Integer, primary_key=True, autoincrement=True)
    points = Column(Integer, nullable=False, default=0)
    weekly_points = Column(Integer, nullable=False, default=0)
    week_start = Column(Date, nullable=True)
    focus_minutes = Column(Integer, nullable=False, default=0)
    sessions_completed = Column(Integer, nullable=False, default=0)
    current_streak_days = Column(Integer, nullable=False, default=0)
    longest_streak_days = Column(Integer, nullable=False, default=0)
    last_session_date = Column(Date, nullable=True)

    @property
    def focus_hours(self) -> float:
        return (self.focus_minutes or 0) / 60

    def __repr__(self) -> str:
        return (
            f"<UserProgress points={self.points} "
            f"sessions={self.sessions_completed} streak={self.current_streak_days}>"
        )
