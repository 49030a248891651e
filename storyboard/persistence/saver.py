"""Fire-and-forget save scheduling.

Mutations never wait for I/O: each commit hands its document to
``SaveScheduler.schedule`` which starts an asyncio task and returns
immediately. Tasks write under one ``asyncio.Lock``; lock waiters are
served first-in first-out, so writes complete in commit order and the
last one to finish holds the newest state.

Without a running event loop (synchronous callers, scripts) the newest
document is kept and written by the next ``flush()``.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timezone

from storyboard.models.state import StateDocument
from storyboard.persistence.gateway import PersistenceGateway

logger = logging.getLogger(__name__)

SaveErrorCallback = Callable[[Exception], None]


class SaveScheduler:
    """Serializes saves to a gateway and tracks their outcome.

    Failures are logged and reported through ``on_error``; they never
    propagate to the caller that scheduled the save.
    """

    def __init__(self, gateway: PersistenceGateway, on_error: SaveErrorCallback | None = None):
        self._gateway = gateway
        self._on_error = on_error
        self._lock = asyncio.Lock()
        self._pending: set[asyncio.Task[None]] = set()
        self._deferred: StateDocument | None = None
        self._active_writes: int = 0
        self.last_saved: datetime | None = None
        self.last_error: str | None = None

    @property
    def is_saving(self) -> bool:
        return self._active_writes > 0

    @property
    def has_pending(self) -> bool:
        return bool(self._pending) or self._deferred is not None

    def schedule(self, document: StateDocument) -> None:
        """Queue ``document`` for writing without waiting for it."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._deferred = document
            logger.debug("No running event loop, save deferred until flush()")
            return

        # A newer document supersedes one deferred before the loop started.
        self._deferred = None
        task = loop.create_task(self._write(document))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def flush(self) -> None:
        """Write any deferred document and wait for every scheduled save."""
        if self._deferred is not None:
            document, self._deferred = self._deferred, None
            await self._write(document)
        while self._pending:
            await asyncio.gather(*list(self._pending))

    async def _write(self, document: StateDocument) -> None:
        self._active_writes += 1
        try:
            async with self._lock:
                await self._gateway.save(document)
        except Exception as e:
            self.last_error = str(e)
            logger.exception(f"❌ Save failed: {e}")
            if self._on_error is not None:
                try:
                    self._on_error(e)
                except Exception:
                    logger.exception("Save error callback raised")
        else:
            self.last_saved = datetime.now(timezone.utc)
            self.last_error = None
            logger.debug("💾 Project saved")
        finally:
            self._active_writes -= 1
