"""
Compress-Verify Pipeline
========================

Compresses a file or a directory tree with gzip and proves, by SHA-256
round-trip, that every artifact decompresses back to the original bytes.
"""

import logging
import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional

from tqdm import tqdm

from base_classes import InputKind, Status
from pipeline.stages.file_pipeline import FilePipeline
from pipeline.walker import Walker, classify_input
from pipeline.workers.parallel_processor import ParallelProcessor
from pipeline_configs import PipelineConfig
from pipeline_errors import (
    MissingInputError, OrchestratorError, StagingConflictError, UnsupportedInputError
)
from pipeline_monitoring import RunMetrics, RunMonitor

logger = logging.getLogger(__name__)


@dataclass
class RunReport:
    """Aggregated outcome of one invocation"""
    input_path: Path
    statuses: List[Status] = field(default_factory=list)
    skipped: bool = False
    walk_error: Optional[OrchestratorError] = None
    cleanup_error: Optional[OSError] = None
    metrics: Optional[RunMetrics] = None

    @property
    def total(self) -> int:
        return len(self.statuses)

    @property
    def successful(self) -> int:
        return sum(1 for s in self.statuses if s.succeeded)

    @property
    def failed(self) -> int:
        return self.total - self.successful

    @property
    def failures(self) -> List[Status]:
        return [s for s in self.statuses if not s.succeeded]

    @property
    def success(self) -> bool:
        return self.failed == 0 and self.walk_error is None

    def summary_lines(self) -> Iterator[str]:
        yield f"Processed {self.total} files: {self.successful} successful, {self.failed} failed"
        for status in self.failures:
            yield status.describe()


class CompressVerifyPipeline:
    """Classifies the input, fans Jobs out to workers and cleans staging"""

    def __init__(self, config: Optional[PipelineConfig] = None):
        self.config = config or PipelineConfig()
        self.staging_root = self.config.staging_dir
        self.monitor = RunMonitor()
        self.walker = Walker(self.staging_root)
        self.file_pipeline = FilePipeline(config=self.config, monitor=self.monitor)

    async def run(self, input_path) -> RunReport:
        """
        Process ``input_path`` and return the run report.

        Raises:
            MissingInputError: the input does not exist (nothing is created)
            UnsupportedInputError: the input is neither a file nor a directory
            StagingConflictError: the staging root overlaps the input or already
                holds files (nothing is created or removed)
        """
        input_path = Path(input_path)
        kind = classify_input(input_path)
        logger.info(f"Input {input_path} classified as {kind.value}")

        if kind is InputKind.MISSING:
            raise MissingInputError(input_path)
        if kind is InputKind.UNSUPPORTED:
            raise UnsupportedInputError(input_path)

        report = RunReport(input_path=input_path)
        if kind is InputKind.ALREADY_COMPRESSED:
            logger.info(f"Skipping {input_path}: already compressed")
            report.skipped = True
            return report

        self.check_staging_root(input_path)

        self.monitor.start()
        try:
            await self._dispatch(input_path, kind, report)
        finally:
            self.monitor.stop()
            report.cleanup_error = self.cleanup_staging()

        report.metrics = self.monitor.snapshot()
        self.monitor.log_report()
        logger.info(f"Run finished: {report.successful}/{report.total} verified")
        return report

    async def _dispatch(self, input_path: Path, kind: InputKind, report: RunReport) -> None:
        config = self.config
        jobs = self.walker.iter_jobs(input_path, kind)

        progress_bar = tqdm(
            desc="Verifying files",
            unit="files",
            disable=not config.show_progress,
        )

        with ParallelProcessor(num_workers=config.resolved_workers(),
                               queue_size=config.queue_size()) as processor:
            logger.info(f"Dispatching jobs to {processor.num_workers} workers")
            try:
                async for status in processor.process_jobs(jobs, self.file_pipeline.run):
                    report.statuses.append(status)
                    progress_bar.update(1)
            except OrchestratorError as e:
                logger.error(f"Enumeration aborted: {e}")
                report.walk_error = e
            finally:
                progress_bar.close()

            if processor.dispatched != report.total:
                logger.error(f"Dispatched {processor.dispatched} jobs but collected "
                             f"{report.total} statuses")

    def check_staging_root(self, input_path: Path) -> None:
        """
        Refuse a staging root that would overwrite or delete user files.

        The input must not be the staging root or lie below it, since staged
        copies would land on the sources and cleanup would remove them along
        with their artifacts. A staging root that already exists is only
        adopted when it is an empty directory.
        """
        staging = self.staging_root
        staging_real = Path(os.path.realpath(staging))
        input_real = Path(os.path.realpath(input_path))

        if input_real == staging_real or staging_real in input_real.parents:
            raise StagingConflictError(staging, f"input {input_path} lies inside it")

        if not os.path.lexists(staging):
            return
        if staging.is_symlink() or not staging.is_dir():
            raise StagingConflictError(staging, "path exists and is not a directory")
        try:
            has_entries = any(staging.iterdir())
        except OSError as e:
            raise StagingConflictError(staging, "cannot inspect existing directory", cause=e) from e
        if has_entries:
            raise StagingConflictError(staging, "directory already exists and is not empty")
        logger.warning(f"Reusing empty staging directory {staging}")

    def cleanup_staging(self) -> Optional[OSError]:
        """Remove the staging root recursively; returns the error, if any"""
        if not self.staging_root.exists():
            return None
        try:
            shutil.rmtree(self.staging_root)
            logger.debug(f"Removed staging directory {self.staging_root}")
        except OSError as e:
            logger.error(f"Failed to remove staging directory {self.staging_root}: {e}")
            return e
        return None
