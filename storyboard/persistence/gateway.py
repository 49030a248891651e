"""Persistence gateway interface and the in-memory implementation.

The store depends on exactly two async operations:

    load() -> StateDocument | None     once, at startup
    save(state) -> None                after every committed mutation

Documents are camelCase JSON-ready dicts (``ProjectState.to_document()``).
"""

from __future__ import annotations

import logging
from copy import deepcopy
from typing import Protocol, runtime_checkable

from storyboard.errors import PersistenceError
from storyboard.models.state import StateDocument

logger = logging.getLogger(__name__)


@runtime_checkable
class PersistenceGateway(Protocol):
    """Async key-value storage for one project document."""

    async def load(self) -> StateDocument | None:
        ...

    async def save(self, state: StateDocument) -> None:
        ...


class InMemoryGateway:
    """Dict-backed gateway. Keeps deep copies, never shares references.

    ``fail_saves`` / ``fail_loads`` make the next operations raise
    ``PersistenceError``; used to exercise the error side channel.
    """

    def __init__(self, initial: StateDocument | None = None):
        self._document: StateDocument | None = deepcopy(initial)
        self.saves: list[StateDocument] = []
        self.fail_saves = False
        self.fail_loads = False

    @property
    def document(self) -> StateDocument | None:
        return deepcopy(self._document)

    async def load(self) -> StateDocument | None:
        if self.fail_loads:
            raise PersistenceError("In-memory load failure")
        return deepcopy(self._document)

    async def save(self, state: StateDocument) -> None:
        if self.fail_saves:
            raise PersistenceError("In-memory save failure")
        self._document = deepcopy(state)
        self.saves.append(deepcopy(state))
        logger.debug(f"💾 In-memory save #{len(self.saves)}")
