"""
Base Classes for the Compress-Verify Pipeline
=============================================

Contains the core data structures passed between the walker, the workers
and the orchestrator.
"""

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


COMPRESSED_SUFFIX = '.gz'


class InputKind(Enum):
    """Classification of the path handed to the orchestrator"""
    REGULAR_FILE = "regular_file"
    DIRECTORY = "directory"
    ALREADY_COMPRESSED = "already_compressed"
    MISSING = "missing"
    UNSUPPORTED = "unsupported"


class Outcome(Enum):
    """Per-job result tag"""
    OK = "ok"
    COMPRESS_FAILED = "compress_failed"
    STAGE_MKDIR_FAILED = "stage_mkdir_failed"
    DECOMPRESS_FAILED = "decompress_failed"
    DIGEST_FAILED = "digest_failed"
    MISMATCH = "mismatch"


def is_compressed_name(path) -> bool:
    """True if the file name carries the gzip suffix"""
    return os.fspath(path).endswith(COMPRESSED_SUFFIX)


@dataclass(frozen=True)
class Job:
    """One file's worth of work, from compression through verification"""
    source_path: Path
    relative_path: Path
    compressed_path: Path
    staged_path: Path

    @classmethod
    def create(cls, source_path: Path, relative_path: Path, staging_root: Path) -> 'Job':
        source_path = Path(source_path)
        relative_path = Path(relative_path)
        if relative_path.is_absolute() or '..' in relative_path.parts:
            raise ValueError(f"relative_path must stay inside the staging root: {relative_path}")
        return cls(
            source_path=source_path,
            relative_path=relative_path,
            compressed_path=Path(os.fspath(source_path) + COMPRESSED_SUFFIX),
            staged_path=Path(staging_root) / relative_path,
        )


@dataclass(frozen=True)
class Status:
    """Immutable outcome record for a single Job"""
    source_path: Path
    outcome: Outcome
    error_message: str = ""
    # Informational only
    original_size: int = 0
    compressed_size: int = 0
    digest: Optional[str] = None
    duration: float = 0.0

    @property
    def succeeded(self) -> bool:
        return self.outcome is Outcome.OK

    def describe(self) -> str:
        """Single human-readable line for reports"""
        if self.succeeded:
            return f"{self.source_path}: ok"
        return f"{self.source_path}: {self.outcome.value}: {self.error_message}"
