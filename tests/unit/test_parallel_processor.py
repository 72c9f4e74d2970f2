"""
Unit tests for the bounded worker pool
"""

import threading
import time
from collections import Counter
from pathlib import Path

import pytest

from base_classes import Job, Outcome, Status
from pipeline.workers.parallel_processor import ParallelProcessor
from pipeline_errors import WalkError


def make_jobs(count):
    staging = Path("staging")
    return [Job.create(Path(f"file_{i}.txt"), Path(f"file_{i}.txt"), staging) for i in range(count)]


def ok_handler(job):
    return Status(source_path=job.source_path, outcome=Outcome.OK)


async def collect(processor, jobs, handler):
    return [status async for status in processor.process_jobs(jobs, handler)]


class ConcurrencyProbe:
    """Handler that records how many calls overlap"""

    def __init__(self, delay=0.01):
        self.delay = delay
        self.active = 0
        self.peak = 0
        self._lock = threading.Lock()

    def __call__(self, job):
        with self._lock:
            self.active += 1
            self.peak = max(self.peak, self.active)
        time.sleep(self.delay)
        with self._lock:
            self.active -= 1
        return ok_handler(job)


class TestParallelProcessor:

    def test_default_width_is_capped(self):
        with ParallelProcessor() as processor:
            assert 1 <= processor.num_workers <= 8
            assert processor.queue_size == processor.num_workers * 2

    def test_invalid_width(self):
        with pytest.raises(ValueError):
            ParallelProcessor(num_workers=-1)

    @pytest.mark.asyncio
    async def test_one_status_per_job(self):
        jobs = make_jobs(50)

        with ParallelProcessor(num_workers=4) as processor:
            statuses = await collect(processor, jobs, ok_handler)
            assert processor.dispatched == 50

        assert Counter(s.source_path for s in statuses) == Counter(j.source_path for j in jobs)

    @pytest.mark.asyncio
    async def test_empty_job_list(self):
        with ParallelProcessor(num_workers=2) as processor:
            statuses = await collect(processor, [], ok_handler)

        assert statuses == []

    @pytest.mark.asyncio
    async def test_width_is_bounded(self):
        probe = ConcurrencyProbe()

        with ParallelProcessor(num_workers=3) as processor:
            statuses = await collect(processor, make_jobs(30), probe)

        assert len(statuses) == 30
        assert probe.peak <= 3

    @pytest.mark.asyncio
    async def test_jobs_are_pulled_lazily(self):
        pulled = []

        def lazy_jobs():
            for job in make_jobs(40):
                pulled.append(job)
                yield job

        first_seen_with = []

        with ParallelProcessor(num_workers=1, queue_size=2) as processor:
            async for _ in processor.process_jobs(lazy_jobs(), ConcurrencyProbe(delay=0.005)):
                first_seen_with.append(len(pulled))

        # When the first status arrives, only a few jobs have been enumerated
        assert first_seen_with[0] < 40
        assert len(first_seen_with) == 40

    @pytest.mark.asyncio
    async def test_enumeration_error_after_in_flight_jobs_finish(self):
        def failing_jobs():
            yield from make_jobs(3)
            raise WalkError("tree", cause=PermissionError("denied"))

        statuses = []
        with ParallelProcessor(num_workers=2) as processor:
            with pytest.raises(WalkError):
                async for status in processor.process_jobs(failing_jobs(), ok_handler):
                    statuses.append(status)
            assert processor.dispatched == 3

        assert len(statuses) == 3

    @pytest.mark.asyncio
    async def test_handler_bug_propagates(self):
        def broken(job):
            raise RuntimeError("handler bug")

        with ParallelProcessor(num_workers=2) as processor:
            with pytest.raises(RuntimeError, match="handler bug"):
                await collect(processor, make_jobs(5), broken)
