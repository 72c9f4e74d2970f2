"""
Pipeline Configurations
=======================

Settings for the compress-verify pipeline and a few ready-made presets.
"""

import logging
import os
import zlib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_STAGING_DIR = Path('decompressed')
MAX_DEFAULT_WORKERS = 8


def default_worker_count() -> int:
    """Pool width used when none is configured: min(number of CPUs, 8)"""
    return max(1, min(os.cpu_count() or 1, MAX_DEFAULT_WORKERS))


@dataclass
class PipelineConfig:
    """Configuration settings for the compress-verify pipeline"""

    # Processing settings
    num_workers: Optional[int] = None
    queue_factor: int = 2

    # I/O settings
    chunk_size: int = 64 * 1024     # 64KB
    compression_level: int = zlib.Z_DEFAULT_COMPRESSION

    # Output settings
    staging_dir: Path = field(default_factory=lambda: DEFAULT_STAGING_DIR)
    remove_partial_artifacts: bool = False
    show_progress: bool = True

    def __post_init__(self) -> None:
        """Validate configuration parameters"""
        if not str(self.staging_dir).strip():
            raise ValueError("staging_dir must not be empty")
        self.staging_dir = Path(self.staging_dir)
        # The staging root is removed recursively at the end of a run
        if self.staging_dir in (Path('.'), Path('..')) or str(self.staging_dir) == self.staging_dir.anchor:
            raise ValueError("staging_dir must be a dedicated directory")

        if self.num_workers is not None and self.num_workers <= 0:
            raise ValueError("num_workers must be positive")
        if self.queue_factor <= 0:
            raise ValueError("queue_factor must be positive")
        if self.chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        if self.compression_level < -1 or self.compression_level > 9:
            raise ValueError("compression_level must be between -1 and 9")

    def resolved_workers(self) -> int:
        """Effective worker pool width"""
        return self.num_workers or default_worker_count()

    def queue_size(self) -> int:
        """Bound of the job queue between the walker and the workers"""
        return self.resolved_workers() * self.queue_factor


class ConfigPresets:
    """Pre-configured settings for common use cases"""

    @staticmethod
    def default() -> PipelineConfig:
        return PipelineConfig()

    @staticmethod
    def single_worker() -> PipelineConfig:
        """
        Sequential processing
        - One worker, deterministic scheduling
        - No progress bar
        """
        return PipelineConfig(num_workers=1, queue_factor=1, show_progress=False)

    @staticmethod
    def low_memory() -> PipelineConfig:
        """
        Optimized for systems with limited memory
        - Two workers
        - Small copy buffers
        """
        return PipelineConfig(num_workers=2, queue_factor=1, chunk_size=16 * 1024)
