"""
SQLAlchemy ORM models for storyboard persistence.

Tables:
- project_states: one JSON project document per state key
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import JSON

from storyboard.db.database import Base


def utc_now() -> datetime:
    """Get current UTC timestamp."""
    return datetime.now(timezone.utc)


class ProjectStateRecord(Base):
    """
    The persisted project document.

    ``payload`` holds the camelCase ``ProjectState`` document exactly as
    the store serialized it; ``revision`` counts saves to the key.
    """
    __tablename__ = "project_states"

    key: Mapped[str] = mapped_column(String(128), primary_key=True)
    payload: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    revision: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        onupdate=utc_now,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<ProjectStateRecord(key={self.key}, revision={self.revision})>"
