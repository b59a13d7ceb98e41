"""
Task Queue
==========

Bounded-concurrency work queue shared by every compression task of a run.
"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Awaitable, Callable, List, Optional, Set

logger = logging.getLogger(__name__)

TaskFactory = Callable[[], Awaitable[Any]]


class TaskQueue:
    """
    Runs submitted tasks with at most ``concurrency`` in flight.

    Tasks start in submission order as slots free up. A task that raises is
    logged and counted in ``failures``; it never cancels or blocks its
    siblings. Blocking work inside tasks should go through ``executor``, a
    thread pool sized to the same limit.
    """

    def __init__(self,
                 concurrency: int = 2,
                 name: str = "compression",
                 on_settled: Optional[Callable[[Any], None]] = None):
        if concurrency <= 0:
            raise ValueError("concurrency must be positive")
        self.name = name
        self.concurrency = concurrency
        self.on_settled = on_settled
        self.semaphore = asyncio.Semaphore(concurrency)
        self.executor = ThreadPoolExecutor(
            max_workers=concurrency, thread_name_prefix=f"{name}-worker")

        self._pending: Set[asyncio.Task] = set()
        self.submitted = 0
        self.completed = 0
        self.active_count = 0
        self.max_observed = 0
        self.failures: List[BaseException] = []

        logger.debug(f"Initialized TaskQueue '{name}' with concurrency={concurrency}")

    def __enter__(self):
        """Context manager entry"""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - ensure cleanup"""
        self.shutdown()
        return False

    def shutdown(self):
        """Shutdown the worker thread pool"""
        self.executor.shutdown(wait=True)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def submit(self, factory: TaskFactory, label: Optional[str] = None) -> asyncio.Task:
        """
        Enqueue a task. Must be called from within the running event loop.

        Args:
            factory: Zero-argument callable returning the awaitable to run
            label: Name used when logging a failure
        """
        self.submitted += 1
        task = asyncio.create_task(self._run(factory, label or f"task-{self.submitted}"))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _run(self, factory: TaskFactory, label: str) -> Any:
        result = None
        async with self.semaphore:
            self.active_count += 1
            self.max_observed = max(self.max_observed, self.active_count)
            try:
                result = await factory()
            except Exception as e:
                self.failures.append(e)
                logger.error(f"{label} failed: {e}")
            finally:
                self.active_count -= 1
                self.completed += 1
        if self.on_settled is not None:
            self.on_settled(result)
        return result

    async def on_idle(self) -> None:
        """Wait until every submitted task, including ones submitted meanwhile, has settled"""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    def get_stats(self) -> dict:
        """Get queue statistics"""
        return {
            'name': self.name,
            'capacity': self.concurrency,
            'submitted': self.submitted,
            'completed': self.completed,
            'active': self.active_count,
            'max_observed': self.max_observed,
            'failed': len(self.failures),
        }
