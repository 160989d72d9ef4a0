"""
Background runner strategies using Strategy Pattern.

A runner takes fire-and-forget jobs off the request path:
- the caller never awaits the job and never sees its outcome
- the job is not cancelled when the request that spawned it goes away
- failures are logged, never raised
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, List, Optional, Set

logger = logging.getLogger(__name__)

Job = Callable[[], Awaitable[None]]


async def _run_job(description: str, job: Job) -> None:
    """Run one job, logging instead of propagating its failure."""
    try:
        await job()
    except asyncio.CancelledError:
        logger.warning("Background job cancelled: %s", description)
        raise
    except Exception:
        logger.exception("Background job failed: %s", description)


class BackgroundRunner(ABC):
    """
    Abstract base class for background runners.

    Jobs are zero-argument coroutine functions rather than coroutine objects,
    so a job that is dropped never leaves an un-awaited coroutine behind.
    """

    @abstractmethod
    def submit(self, description: str, job: Job) -> None:
        """
        Dispatch a job without waiting for it.

        Must be called from inside a running event loop. Never raises.

        Args:
            description: Human readable label used in log lines
            job: Coroutine function to run
        """
        pass

    @abstractmethod
    async def drain(self) -> None:
        """Wait until every job submitted so far has finished."""
        pass

    async def close(self) -> None:
        """Drain outstanding work and release resources."""
        await self.drain()


class TaskSpawnRunner(BackgroundRunner):
    """
    One asyncio task per job.

    The event loop only keeps weak references to tasks, so the runner
    holds each one until it completes.
    """

    def __init__(self):
        self._tasks: Set[asyncio.Task] = set()

    def submit(self, description: str, job: Job) -> None:
        task = asyncio.get_running_loop().create_task(_run_job(description, job))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def drain(self) -> None:
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    @property
    def pending(self) -> int:
        return len(self._tasks)


class WorkerPoolRunner(BackgroundRunner):
    """
    Fixed pool of worker tasks fed by a bounded queue.

    Caps how much background work can pile up under load. When the queue
    is full the job is dropped with a warning: a lost click increment
    undercounts, it never delays a redirect.

    Workers are started lazily on the first submit inside a running loop
    and restarted if the runner is reused from a different loop.
    """

    def __init__(self, workers: int = 4, max_queue_size: int = 1000):
        if workers < 1:
            raise ValueError("workers must be at least 1")
        self.workers = workers
        self.max_queue_size = max_queue_size
        self._queue: Optional[asyncio.Queue] = None
        self._worker_tasks: List[asyncio.Task] = []
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self.dropped_count = 0

    def _ensure_started(self) -> asyncio.Queue:
        loop = asyncio.get_running_loop()
        if self._queue is None or self._loop is not loop:
            self._loop = loop
            self._queue = asyncio.Queue(maxsize=self.max_queue_size)
            self._worker_tasks = [
                loop.create_task(self._worker(self._queue))
                for _ in range(self.workers)
            ]
            logger.info("Background worker pool started with %d workers", self.workers)
        return self._queue

    async def _worker(self, queue: asyncio.Queue) -> None:
        while True:
            description, job = await queue.get()
            try:
                await _run_job(description, job)
            finally:
                queue.task_done()

    def submit(self, description: str, job: Job) -> None:
        queue = self._ensure_started()
        try:
            queue.put_nowait((description, job))
        except asyncio.QueueFull:
            self.dropped_count += 1
            logger.warning("Background queue full, dropping job: %s", description)

    async def drain(self) -> None:
        if self._queue is not None and self._loop is asyncio.get_running_loop():
            await self._queue.join()

    async def close(self) -> None:
        if self._queue is not None and self._loop is asyncio.get_running_loop():
            await self._queue.join()
            for task in self._worker_tasks:
                task.cancel()
            await asyncio.gather(*self._worker_tasks, return_exceptions=True)
        # Workers of a loop that already ended are simply forgotten
        self._worker_tasks = []
        self._queue = None
        self._loop = None

    @property
    def pending(self) -> int:
        return self._queue.qsize() if self._queue is not None else 0
