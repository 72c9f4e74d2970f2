"""
SHA-256 file digests.
"""

import hashlib
import logging
from pathlib import Path

from pipeline_errors import DigestError

logger = logging.getLogger(__name__)

EMPTY_SHA256 = 'e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855'


def digest_file(file_path: Path, chunk_size: int = 64 * 1024) -> str:
    """Stream a file through SHA-256 and return the lowercase hex digest"""
    hasher = hashlib.sha256()

    try:
        # Read in chunks to handle large files
        with open(file_path, 'rb') as f:
            while chunk := f.read(chunk_size):
                hasher.update(chunk)
    except OSError as e:
        raise DigestError(file_path, cause=e) from e

    return hasher.hexdigest()
