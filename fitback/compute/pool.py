"""Bounded pool for CPU-heavy work.

Jobs run in child processes so a worker's event loop keeps serving requests.
The number of jobs in flight per worker is capped: once ``max_pending`` jobs
are running or queued, new submissions fail fast with ComputeBusyError.
"""

import asyncio
import logging
import multiprocessing
from collections.abc import Callable
from concurrent.futures import Executor, ProcessPoolExecutor
from concurrent.futures.process import BrokenProcessPool
from typing import Annotated, Any, TypeVar

from fastapi import Depends, Request

from fitback.compute.exceptions import ComputeBusyError
from fitback.core.exceptions import InternalError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ComputePool:
    def __init__(
        self,
        max_workers: int = 1,
        max_pending: int = 4,
        executor_factory: Callable[[int], Executor] | None = None,
    ):
        if max_pending < 1:
            raise ValueError("max_pending must be at least 1")
        self._max_workers = max_workers
        self._max_pending = max_pending
        self._executor_factory = executor_factory or _process_executor
        self._executor: Executor | None = None
        self._pending = 0

    @property
    def pending(self) -> int:
        return self._pending

    @property
    def max_pending(self) -> int:
        return self._max_pending

    def start(self) -> None:
        if self._executor is None:
            self._executor = self._executor_factory(self._max_workers)
            logger.info(
                "Compute pool started: workers=%d max_pending=%d",
                self._max_workers,
                self._max_pending,
            )

    def shutdown(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=False, cancel_futures=True)
            self._executor = None

    async def run(self, fn: Callable[..., T], *args: Any) -> T:
        """Run ``fn(*args)`` in the pool and wait for its result.

        Raises:
            ComputeBusyError: If max_pending jobs are already in flight
            InternalError: If the pool is not started or a child process died
        """
        if self._executor is None:
            raise InternalError("Compute pool is not running")
        if self._pending >= self._max_pending:
            raise ComputeBusyError()

        # Single event loop per worker: no await between check and increment.
        self._pending += 1
        executor = self._executor
        try:
            loop = asyncio.get_running_loop()
            return await loop.run_in_executor(executor, fn, *args)
        except BrokenProcessPool as e:
            # Jobs failing together share one broken executor; restart it once.
            if self._executor is executor:
                logger.error("Compute process died; restarting pool", exc_info=True)
                self._restart()
            raise InternalError("Computation worker crashed") from e
        finally:
            self._pending -= 1

    def _restart(self) -> None:
        self.shutdown()
        self.start()


def _process_executor(max_workers: int) -> Executor:
    # spawn: the parent is a threaded uvicorn worker, fork is unsafe there.
    return ProcessPoolExecutor(
        max_workers=max_workers,
        mp_context=multiprocessing.get_context("spawn"),
    )


def get_compute_pool(request: Request) -> ComputePool:
    pool = getattr(request.app.state, "compute_pool", None)
    if pool is None:
        raise InternalError("Compute pool is not running")
    return pool


ComputePoolDep = Annotated[ComputePool, Depends(get_compute_pool)]
