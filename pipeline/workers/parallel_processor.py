"""
Parallel Processor
==================

Runs per-file jobs on a fixed-width worker pool fed from a bounded queue.
"""

import asyncio
import logging
import weakref
from concurrent.futures import ThreadPoolExecutor
from typing import AsyncIterator, Callable, Iterable, Optional

from base_classes import Job, Status
from pipeline_configs import default_worker_count

logger = logging.getLogger(__name__)


class ParallelProcessor:
    """
    Dispatches Jobs to a bounded pool of threads.

    Jobs are pulled lazily from the enumerating iterable into a queue of
    ``queue_size`` entries, so a large tree never holds more than that many
    pending Jobs. Each finished Status travels over a result queue to the
    single consumer of :meth:`process_jobs`.
    """

    def __init__(self, num_workers: Optional[int] = None, queue_size: Optional[int] = None):
        self.num_workers = num_workers or default_worker_count()
        if self.num_workers <= 0:
            raise ValueError("num_workers must be positive")
        self.queue_size = queue_size or self.num_workers * 2
        self.thread_executor = ThreadPoolExecutor(
            max_workers=self.num_workers,
            thread_name_prefix='compress-verify',
        )
        self.dispatched = 0
        # Track executors for cleanup
        self._executors = weakref.WeakSet()
        self._executors.add(self.thread_executor)

    def __enter__(self):
        """Context manager entry"""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - ensure cleanup"""
        self.shutdown()
        return False

    def shutdown(self):
        """Shutdown all executors"""
        for executor in list(self._executors):
            try:
                executor.shutdown(wait=True)
            except RuntimeError as e:
                logger.error(f"Error shutting down executor: {e}")

    async def process_jobs(self,
                           jobs: Iterable[Job],
                           handler: Callable[[Job], Status]) -> AsyncIterator[Status]:
        """
        Run ``handler`` on every Job and yield each Status as it completes.

        If iterating ``jobs`` raises, no further Jobs are enqueued; the Jobs
        already dispatched still finish and their Statuses are yielded before
        the enumeration error is re-raised.
        """
        loop = asyncio.get_running_loop()
        work_queue: asyncio.Queue = asyncio.Queue(maxsize=self.queue_size)
        result_queue: asyncio.Queue = asyncio.Queue(maxsize=self.queue_size)
        enumeration_error: Optional[BaseException] = None
        self.dispatched = 0

        logger.debug(f"Starting process_jobs with {self.num_workers} workers, "
                     f"queue size {self.queue_size}")

        async def producer():
            nonlocal enumeration_error
            try:
                for job in jobs:
                    await work_queue.put(job)
                    self.dispatched += 1
            except Exception as e:
                logger.error(f"Enumeration stopped after {self.dispatched} jobs: {e}")
                enumeration_error = e

            # Add sentinel values
            for _ in range(self.num_workers):
                await work_queue.put(None)

        async def worker():
            try:
                while True:
                    job = await work_queue.get()
                    if job is None:
                        break
                    status = await loop.run_in_executor(self.thread_executor, handler, job)
                    await result_queue.put(status)
            except Exception:
                await result_queue.put(None)
                raise

            # Signal completion
            await result_queue.put(None)

        producer_task = asyncio.create_task(producer())
        workers = [asyncio.create_task(worker()) for _ in range(self.num_workers)]

        try:
            # Collect results
            completed_workers = 0
            while completed_workers < self.num_workers:
                status = await result_queue.get()
                if status is None:
                    completed_workers += 1
                    logger.debug(f"Worker completed, total: {completed_workers}/{self.num_workers}")
                else:
                    yield status

            # Surfaces any exception raised by the handler itself
            await asyncio.gather(*workers)
            await producer_task
        finally:
            for task in [producer_task, *workers]:
                if not task.done():
                    task.cancel()
            await asyncio.gather(producer_task, *workers, return_exceptions=True)

        logger.debug(f"All workers completed, {self.dispatched} jobs dispatched")
        if enumeration_error is not None:
            raise enumeration_error
