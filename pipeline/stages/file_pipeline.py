"""
Per-file compress -> stage -> decompress -> verify sequence.
"""

import logging
import time
from contextlib import nullcontext
from pathlib import Path
from typing import Optional

from base_classes import Job, Outcome, Status
from pipeline_configs import PipelineConfig
from pipeline_errors import JobError, StageMkdirError
from .compression import GzipCodec
from .verification import Verifier

logger = logging.getLogger(__name__)


class FilePipeline:
    """
    Runs the fixed four-step sequence for one Job and turns the first
    failure into a Status.

    ``run`` is safe to call from several threads at once: it holds no
    mutable state besides the optional monitor, which locks internally.
    """

    def __init__(self,
                 config: Optional[PipelineConfig] = None,
                 codec: Optional[GzipCodec] = None,
                 verifier: Optional[Verifier] = None,
                 monitor=None):
        self.config = config or PipelineConfig()
        self.codec = codec or GzipCodec(
            chunk_size=self.config.chunk_size,
            compression_level=self.config.compression_level,
        )
        self.verifier = verifier or Verifier(chunk_size=self.config.chunk_size)
        self.monitor = monitor

    def run(self, job: Job) -> Status:
        """Process one Job; always returns exactly one Status"""
        start = time.perf_counter()
        original_size = 0
        compressed_size = 0
        digest = None
        compressed_written = False

        try:
            # Step 1: compress to the sibling artifact
            with self._timed('compress'):
                result = self.codec.compress(job.source_path, job.compressed_path)
            compressed_written = True
            original_size = result.bytes_read
            compressed_size = result.bytes_written

            # Step 2: staging directory
            self._make_stage_dir(job.staged_path.parent)

            # Step 3: decompress into staging
            with self._timed('decompress'):
                self.codec.decompress(job.compressed_path, job.staged_path)

            # Step 4: verify
            with self._timed('verify'):
                comparison = self.verifier.compare(job.source_path, job.staged_path)
            digest = comparison.original_digest

            if comparison.matches:
                outcome, message = Outcome.OK, ""
            else:
                outcome = Outcome.MISMATCH
                message = (f"digest mismatch: original {comparison.original_digest}, "
                           f"decompressed {comparison.candidate_digest}")

        except JobError as e:
            outcome, message = e.outcome, str(e)
            logger.debug(f"Job error context: {e.log_context()}")

        status = Status(
            source_path=job.source_path,
            outcome=outcome,
            error_message=message,
            original_size=original_size,
            compressed_size=compressed_size,
            digest=digest,
            duration=time.perf_counter() - start,
        )

        if status.succeeded:
            logger.debug(f"Verified {job.source_path} ({original_size} -> {compressed_size} bytes)")
        else:
            logger.warning(f"Job failed: {status.describe()}")
            if self.config.remove_partial_artifacts and compressed_written:
                self._remove_artifact(job.compressed_path)

        if self.monitor is not None:
            self.monitor.record_status(status)
        return status

    def _make_stage_dir(self, directory: Path) -> None:
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StageMkdirError(f"cannot create staging directory {directory}", cause=e,
                                  details={'path': str(directory)}) from e

    def _remove_artifact(self, path: Path) -> None:
        try:
            path.unlink(missing_ok=True)
            logger.info(f"Removed partial artifact {path}")
        except OSError as e:
            logger.warning(f"Failed to remove partial artifact {path}: {e}")

    def _timed(self, stage: str):
        if self.monitor is None:
            return nullcontext()
        return self.monitor.time_stage(stage)
