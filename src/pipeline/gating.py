# src/pipeline/gating.py - v1
"""Single-flight gate for orchestrator requests.

At most one task runs per key. A caller arriving while a task for its key
is in flight awaits that task's outcome (value or exception) instead of
starting a second one. Keys are plain tuples such as ("generate", path) or
("translate", path, language); distinct keys run in parallel.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Hashable

logger = logging.getLogger(__name__)


class RequestGate:
    """Deduplicate concurrent async requests by key."""

    def __init__(self) -> None:
        self._inflight: dict[Hashable, asyncio.Task[Any]] = {}

    async def run(self, key: Hashable, factory: Callable[[], Awaitable[Any]]) -> Any:
        """Run ``factory()`` for ``key`` unless a run is already in flight.

        The shared task is shielded: a cancelled waiter does not cancel the
        request for the other waiters, and the cache update still lands.
        """
        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(factory())
            self._inflight[key] = task
            task.add_done_callback(lambda t, k=key: self._release(k, t))
        else:
            logger.debug("Joining in-flight request %s", key)
        return await asyncio.shield(task)

    def _release(self, key: Hashable, task: asyncio.Task[Any]) -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]
        # Mark the outcome as retrieved when every waiter was cancelled.
        if not task.cancelled():
            task.exception()

    def in_flight(self, key: Hashable) -> bool:
        return key in self._inflight

    def __len__(self) -> int:
        return len(self._inflight)
