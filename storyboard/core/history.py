"""Bounded undo/redo history of full project snapshots.

The store pushes a snapshot of the committed state after every undoable
mutation, so the entry under the cursor always mirrors the live state::

    entries:  [S0, S1, S2, S3]
    cursor:                 ^        can_undo=True, can_redo=False

    undo() → S2             ^        can_redo=True
    push(S2') truncates S3, appends S2'

Only the oldest entries are dropped once the limit is exceeded; the
cursor is re-based so it keeps pointing at the same snapshot.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from storyboard.config import MAX_HISTORY
from storyboard.models.state import ProjectSnapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistorySnapshot:
    """An immutable copy of every entity collection at a store version."""
    version: int
    state: ProjectSnapshot
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def restore_copy(self) -> ProjectSnapshot:
        """Return a deep copy safe to hand to the store as live state."""
        return self.state.model_copy(deep=True)


class HistoryManager:
    """Snapshot list plus cursor, capped at ``limit`` entries."""

    def __init__(self, limit: int = MAX_HISTORY):
        if limit < 1:
            raise ValueError("History limit must be at least 1")
        self._limit = limit
        self._entries: list[HistorySnapshot] = []
        self._cursor: int = -1

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def can_undo(self) -> bool:
        return self._cursor > 0

    @property
    def can_redo(self) -> bool:
        return self._cursor < len(self._entries) - 1

    def __len__(self) -> int:
        return len(self._entries)

    def reset(self, snapshot: HistorySnapshot) -> None:
        """Start a new history whose only entry is ``snapshot``."""
        self._entries = [snapshot]
        self._cursor = 0

    def push(self, snapshot: HistorySnapshot) -> None:
        """Record a new state, discarding any redo branch."""
        del self._entries[self._cursor + 1:]
        self._entries.append(snapshot)

        overflow = len(self._entries) - self._limit
        if overflow > 0:
            del self._entries[:overflow]
            logger.debug(f"History full, dropped {overflow} oldest snapshot(s)")

        self._cursor = len(self._entries) - 1

    def undo(self) -> ProjectSnapshot | None:
        """Step back one entry and return the state to restore, if any."""
        if not self.can_undo:
            return None
        self._cursor -= 1
        return self._entries[self._cursor].restore_copy()

    def redo(self) -> ProjectSnapshot | None:
        """Step forward one entry and return the state to restore, if any."""
        if not self.can_redo:
            return None
        self._cursor += 1
        return self._entries[self._cursor].restore_copy()

    def current(self) -> HistorySnapshot | None:
        """The entry under the cursor."""
        if self._cursor < 0:
            return None
        return self._entries[self._cursor]
