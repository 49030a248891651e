"""Database module for storyboard persistence."""
from storyboard.db.database import (
    Base,
    close_db,
    create_engine_for,
    get_database_url,
    init_db,
)
from storyboard.db.models import ProjectStateRecord

__all__ = [
    "Base",
    "close_db",
    "create_engine_for",
    "get_database_url",
    "init_db",
    "ProjectStateRecord",
]
