"""Off-loop persistence for the session store while the app is serving."""

import asyncio
import logging
from dataclasses import dataclass, field

from fastapi.concurrency import run_in_threadpool

from find_a_time.services.sessions import (
    SessionBackend,
    SnapshotWriter,
    save_snapshot,
)

logger = logging.getLogger(__name__)


@dataclass
class ThreadpoolSnapshotWriter(SnapshotWriter):
    """Saves snapshots in the threadpool, one at a time, newest wins.

    Saves run in submission order under a lock. A snapshot that has been
    superseded by the time it gets the lock is skipped.
    """

    backend: SessionBackend
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    _issued: int = 0
    _tasks: set[asyncio.Task[None]] = field(default_factory=set)

    def submit(self, payload: dict[str, object]) -> None:
        """Schedule a save; saves inline when no event loop is running."""
        self._issued += 1
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            save_snapshot(self.backend, payload)
            return
        task = loop.create_task(self._write(self._issued, payload))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def drain(self) -> None:
        """Wait for every scheduled save to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    async def _write(self, sequence: int, payload: dict[str, object]) -> None:
        async with self._lock:
            if sequence < self._issued:
                logger.debug("Skipping superseded snapshot %d", sequence)
                return
            await run_in_threadpool(save_snapshot, self.backend, payload)
