"""
Round-trip verification by digest comparison.
"""

import hmac
import logging
from dataclasses import dataclass
from pathlib import Path

from .digest import digest_file

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DigestComparison:
    original_digest: str
    candidate_digest: str

    @property
    def matches(self) -> bool:
        return hmac.compare_digest(self.original_digest, self.candidate_digest)


class Verifier:
    """Compares two files by SHA-256; digest equality is the only check made"""

    def __init__(self, chunk_size: int = 64 * 1024):
        self.chunk_size = chunk_size

    def compare(self, original: Path, candidate: Path) -> DigestComparison:
        """
        Digest both files.

        Raises:
            DigestError: naming whichever path could not be read
        """
        comparison = DigestComparison(
            original_digest=digest_file(original, self.chunk_size),
            candidate_digest=digest_file(candidate, self.chunk_size),
        )
        if not comparison.matches:
            logger.debug(f"Digest mismatch: {original}={comparison.original_digest} "
                         f"{candidate}={comparison.candidate_digest}")
        return comparison

    def verify(self, original: Path, candidate: Path) -> bool:
        return self.compare(original, candidate).matches


def verify(original, candidate) -> bool:
    """True iff both files digest successfully to the same value"""
    return Verifier().verify(Path(original), Path(candidate))
