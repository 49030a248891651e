"""SQLAlchemy-backed persistence gateway.

Stores the project document as one JSON row in ``project_states`` keyed
by ``settings.state_key``. Works with any async driver SQLAlchemy
supports; the default is SQLite through aiosqlite.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from storyboard.config import settings
from storyboard.db.models import ProjectStateRecord, utc_now
from storyboard.errors import PersistenceError
from storyboard.models.state import StateDocument

logger = logging.getLogger(__name__)


class SqlAlchemyGateway:
    """Async load/save of one project document through SQLAlchemy sessions."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        key: str | None = None,
    ):
        self._session_factory = session_factory
        self.key = key or settings.state_key

    async def load(self) -> StateDocument | None:
        try:
            async with self._session_factory() as session:
                record = await session.get(ProjectStateRecord, self.key)
                if record is None:
                    logger.info(f"No stored project under key '{self.key}'")
                    return None
                logger.info(f"📂 Loaded project '{self.key}' (revision {record.revision})")
                return dict(record.payload)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to load project '{self.key}': {e}") from e

    async def save(self, state: StateDocument) -> None:
        try:
            async with self._session_factory() as session:
                try:
                    record = await session.get(ProjectStateRecord, self.key)
                    if record is None:
                        record = ProjectStateRecord(key=self.key, payload=state, revision=1)
                        session.add(record)
                    else:
                        record.payload = state
                        record.revision += 1
                        record.updated_at = utc_now()
                    await session.commit()
                except Exception:
                    await session.rollback()
                    raise
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to save project '{self.key}': {e}") from e

    async def revision(self) -> int:
        """Number of saves recorded for this key (0 when nothing is stored)."""
        try:
            async with self._session_factory() as session:
                record = await session.get(ProjectStateRecord, self.key)
                return record.revision if record else 0
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to read project '{self.key}': {e}") from e
