"""
Input classification and job enumeration.
"""

import logging
import os
import stat
from pathlib import Path
from typing import Iterator, Optional

from base_classes import InputKind, Job, is_compressed_name
from pipeline_errors import MissingInputError, UnsupportedInputError, WalkError

logger = logging.getLogger(__name__)


def classify_input(path: Path) -> InputKind:
    """Classify the orchestrator's input by stat plus a suffix test"""
    try:
        st = os.stat(path)
    except (FileNotFoundError, NotADirectoryError):
        return InputKind.MISSING
    except OSError as e:
        raise WalkError(path, cause=e) from e

    if stat.S_ISDIR(st.st_mode):
        return InputKind.DIRECTORY
    if stat.S_ISREG(st.st_mode):
        if is_compressed_name(path):
            return InputKind.ALREADY_COMPRESSED
        return InputKind.REGULAR_FILE
    return InputKind.UNSUPPORTED


class Walker:
    """Enumerates Jobs for a single file or a directory tree"""

    def __init__(self, staging_root: Path):
        self.staging_root = Path(staging_root)

    def iter_jobs(self, input_path: Path, kind: Optional[InputKind] = None) -> Iterator[Job]:
        """
        Yield one Job per eligible file under ``input_path``.

        Raises:
            MissingInputError: the input does not exist
            UnsupportedInputError: the input is neither a file nor a directory
            WalkError: a directory entry could not be read; enumeration stops
        """
        input_path = Path(input_path)
        kind = kind or classify_input(input_path)

        if kind is InputKind.MISSING:
            raise MissingInputError(input_path)
        if kind is InputKind.UNSUPPORTED:
            raise UnsupportedInputError(input_path)
        if kind is InputKind.ALREADY_COMPRESSED:
            return
        if kind is InputKind.REGULAR_FILE:
            yield Job.create(input_path, Path(input_path.name), self.staging_root)
            return

        yield from self._walk_directory(input_path)

    def _walk_directory(self, root: Path) -> Iterator[Job]:
        staging_real = os.path.realpath(self.staging_root)

        def on_error(error: OSError):
            raise WalkError(error.filename or root, cause=error) from error

        for dirpath, dirnames, filenames in os.walk(root, onerror=on_error):
            # Never descend into our own staging output
            dirnames[:] = sorted(
                d for d in dirnames
                if os.path.realpath(os.path.join(dirpath, d)) != staging_real
            )

            for name in sorted(filenames):
                if is_compressed_name(name):
                    logger.debug(f"Skipping already compressed {os.path.join(dirpath, name)}")
                    continue

                file_path = os.path.join(dirpath, name)
                try:
                    st = os.lstat(file_path)
                except OSError as e:
                    raise WalkError(file_path, cause=e) from e

                if not stat.S_ISREG(st.st_mode):
                    logger.debug(f"Skipping non-regular file {file_path}")
                    continue

                relative_path = Path(os.path.relpath(file_path, root))
                yield Job.create(Path(file_path), relative_path, self.staging_root)
