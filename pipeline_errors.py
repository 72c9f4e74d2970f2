"""
Error Kinds for the Compress-Verify Pipeline
============================================

Job-level errors terminate a single Job and map onto a Status outcome.
Orchestrator-level errors abort the run (or its enumeration) as a whole.
"""

import time
import traceback
from typing import Any, Dict, Optional

from base_classes import Outcome


class PipelineError(Exception):
    """Base class for all pipeline errors"""

    error_code: str = "pipeline_error"

    def __init__(self, message: str, cause: Optional[BaseException] = None,
                 details: Optional[Dict[str, Any]] = None):
        """
        Initialize a pipeline error.

        Args:
            message: Error description
            cause: Original exception that caused this error
            details: Additional error context (paths, sizes)
        """
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.details = details or {}
        self.timestamp = time.time()
        self.traceback = traceback.format_exc() if cause else None

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message} ({type(self.cause).__name__}: {self.cause})"
        return self.message

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(message={self.message!r}, "
                f"cause={self.cause!r}, error_code={self.error_code!r}, "
                f"details={self.details!r})")

    def log_context(self) -> Dict[str, Any]:
        """Get error context for structured logging"""
        return {
            'error_type': type(self).__name__,
            'error_code': self.error_code,
            'message': str(self),
            'timestamp': self.timestamp,
            'details': self.details,
            'cause': str(self.cause) if self.cause else None
        }


class JobError(PipelineError):
    """Failure confined to a single Job"""

    outcome: Outcome = Outcome.COMPRESS_FAILED

    @property
    def error_code(self) -> str:
        return self.outcome.value


class CompressError(JobError):
    outcome = Outcome.COMPRESS_FAILED


class StageMkdirError(JobError):
    outcome = Outcome.STAGE_MKDIR_FAILED


class DecompressError(JobError):
    outcome = Outcome.DECOMPRESS_FAILED


class DigestError(JobError):
    """Raised when a file cannot be read for hashing"""

    outcome = Outcome.DIGEST_FAILED

    def __init__(self, path, cause: Optional[BaseException] = None):
        super().__init__(f"cannot digest {path}", cause=cause, details={'path': str(path)})
        self.path = path


class OrchestratorError(PipelineError):
    """Failure that concerns the run rather than a single Job"""


class MissingInputError(OrchestratorError):
    error_code = "missing_input"

    def __init__(self, path):
        super().__init__(f"input path does not exist: {path}", details={'path': str(path)})
        self.path = path


class UnsupportedInputError(OrchestratorError):
    error_code = "unsupported_input"

    def __init__(self, path):
        super().__init__(f"input is neither a regular file nor a directory: {path}",
                         details={'path': str(path)})
        self.path = path


class WalkError(OrchestratorError):
    error_code = "walk_failed"

    def __init__(self, path, cause: Optional[BaseException] = None):
        super().__init__(f"failed to enumerate {path}", cause=cause, details={'path': str(path)})
        self.path = path


class StagingConflictError(OrchestratorError):
    """The staging root cannot be used without touching user files"""
    error_code = "staging_conflict"

    def __init__(self, path, reason: str, cause: Optional[BaseException] = None):
        super().__init__(f"cannot use staging directory {path}: {reason}",
                         cause=cause, details={'path': str(path)})
        self.path = path
