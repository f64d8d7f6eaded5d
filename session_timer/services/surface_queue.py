"""Ordered fire-and-forget dispatch of surface calls (one queue per surface)."""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)

SurfaceOp = Callable[[], Awaitable[object]]


@dataclass
class _Pending:
    label: str
    op: SurfaceOp
    coalesce_key: str | None


class SurfaceQueue:
    """
    Applies submitted operations one at a time, in submission order.

    submit() never blocks the caller, so a slow platform call cannot delay the next tick.
    A pending (not yet started) op at the tail with the same coalesce_key is replaced by the
    newer one: stale updates may be dropped, never reordered.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._pending: deque[_Pending] = deque()
        self._wakeup = asyncio.Event()
        self._idle = asyncio.Event()
        self._idle.set()
        self._worker: asyncio.Task | None = None
        self.failures = 0

    def start(self) -> None:
        if self._worker is None:
            self._worker = asyncio.get_running_loop().create_task(self._run())

    def submit(self, label: str, op: SurfaceOp, coalesce_key: str | None = None) -> None:
        if coalesce_key is not None and self._pending and self._pending[-1].coalesce_key == coalesce_key:
            self._pending[-1] = _Pending(label, op, coalesce_key)
        else:
            self._pending.append(_Pending(label, op, coalesce_key))
        self._idle.clear()
        self._wakeup.set()

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    async def join(self) -> None:
        """Wait until every submitted op has been applied (or has failed)."""
        await self._idle.wait()

    async def aclose(self) -> None:
        """Drain what is queued, then stop the worker."""
        if self._worker is None:
            return
        await self.join()
        worker, self._worker = self._worker, None
        worker.cancel()
        try:
            await worker
        except asyncio.CancelledError:
            pass

    async def _run(self) -> None:
        while True:
            if not self._pending:
                self._idle.set()
                self._wakeup.clear()
                await self._wakeup.wait()
                continue
            item = self._pending.popleft()
            try:
                await item.op()
            except asyncio.CancelledError:
                raise
            except Exception:
                self.failures += 1
                logger.exception("%s surface: %s failed", self.name, item.label)
