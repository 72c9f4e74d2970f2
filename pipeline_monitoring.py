"""
Pipeline Monitoring
===================

Thread-safe run statistics for the compress-verify pipeline: per-stage
timings, byte totals and peak process memory.
"""

import logging
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Optional

import psutil

from base_classes import Status

logger = logging.getLogger(__name__)


@dataclass
class StageMetrics:
    """Accumulated metrics for one pipeline stage"""
    stage_name: str
    calls: int = 0
    total_time: float = 0.0
    errors: int = 0

    @property
    def average_time(self) -> float:
        if self.calls:
            return self.total_time / self.calls
        return 0.0


@dataclass
class RunMetrics:
    """Snapshot of a run's statistics"""
    files_processed: int = 0
    files_ok: int = 0
    files_failed: int = 0
    bytes_in: int = 0
    bytes_out: int = 0
    duration: float = 0.0
    memory_start: int = 0
    memory_peak: int = 0
    stages: Dict[str, StageMetrics] = field(default_factory=dict)

    @property
    def compression_ratio(self) -> float:
        """Fraction of bytes saved across all verified files"""
        if self.bytes_in > 0:
            return 1 - self.bytes_out / self.bytes_in
        return 0.0

    @property
    def throughput_mb_per_sec(self) -> float:
        if self.duration > 0:
            return (self.bytes_in / 1024 / 1024) / self.duration
        return 0.0

    def summary_line(self) -> str:
        return (f"{self.bytes_in:,} bytes -> {self.bytes_out:,} bytes "
                f"({self.compression_ratio * 100:.1f}% reduction) in {self.duration:.2f}s")


class RunMonitor:
    """Collects statistics from concurrent workers"""

    def __init__(self):
        self._lock = threading.Lock()
        self._process = psutil.Process()
        self.reset()

    def reset(self) -> None:
        with self._lock:
            self._stages: Dict[str, StageMetrics] = {}
            self._files_processed = 0
            self._files_ok = 0
            self._bytes_in = 0
            self._bytes_out = 0
            self._memory_start = 0
            self._memory_peak = 0
            self._start_time: Optional[float] = None
            self._end_time: Optional[float] = None

    def start(self) -> None:
        self.reset()
        self._start_time = time.perf_counter()
        self._memory_start = self._sample_memory()
        self._memory_peak = self._memory_start

    def stop(self) -> None:
        self._end_time = time.perf_counter()
        self._update_peak()

    @contextmanager
    def time_stage(self, stage_name: str):
        """Time one stage invocation; failures are counted as stage errors"""
        start = time.perf_counter()
        failed = False
        try:
            yield
        except Exception:
            failed = True
            raise
        finally:
            elapsed = time.perf_counter() - start
            with self._lock:
                stage = self._stages.setdefault(stage_name, StageMetrics(stage_name))
                stage.calls += 1
                stage.total_time += elapsed
                if failed:
                    stage.errors += 1

    def record_status(self, status: Status) -> None:
        with self._lock:
            self._files_processed += 1
            if status.succeeded:
                self._files_ok += 1
                self._bytes_in += status.original_size
                self._bytes_out += status.compressed_size
        self._update_peak()

    def snapshot(self) -> RunMetrics:
        with self._lock:
            if self._start_time is None:
                duration = 0.0
            else:
                duration = (self._end_time or time.perf_counter()) - self._start_time
            return RunMetrics(
                files_processed=self._files_processed,
                files_ok=self._files_ok,
                files_failed=self._files_processed - self._files_ok,
                bytes_in=self._bytes_in,
                bytes_out=self._bytes_out,
                duration=duration,
                memory_start=self._memory_start,
                memory_peak=self._memory_peak,
                stages={name: StageMetrics(name, s.calls, s.total_time, s.errors)
                        for name, s in self._stages.items()},
            )

    def log_report(self) -> None:
        metrics = self.snapshot()
        logger.info(f"Run statistics: {metrics.summary_line()}, "
                    f"{metrics.throughput_mb_per_sec:.2f} MB/s, "
                    f"peak RSS {metrics.memory_peak / 1024 / 1024:.1f} MB")
        for stage in metrics.stages.values():
            logger.debug(f"Stage {stage.stage_name}: {stage.calls} calls, "
                         f"avg {stage.average_time * 1000:.1f} ms, {stage.errors} errors")

    def _sample_memory(self) -> int:
        try:
            return self._process.memory_info().rss
        except psutil.Error as e:
            logger.debug(f"Memory sample failed: {e}")
            return 0

    def _update_peak(self) -> None:
        rss = self._sample_memory()
        with self._lock:
            self._memory_peak = max(self._memory_peak, rss)
