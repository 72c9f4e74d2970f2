"""
Unit tests for the SHA-256 digester and the verifier
"""

import hashlib
import os

import pytest

from base_classes import Outcome
from pipeline.stages.digest import EMPTY_SHA256, digest_file
from pipeline.stages.verification import DigestComparison, Verifier, verify
from pipeline_errors import DigestError


class TestDigestFile:

    def test_known_value(self, temp_dir):
        path = temp_dir / "hello"
        path.write_bytes(b"hello, world\n")

        assert digest_file(path) == hashlib.sha256(b"hello, world\n").hexdigest()

    def test_empty_file(self, temp_dir):
        path = temp_dir / "empty"
        path.write_bytes(b"")

        assert digest_file(path) == EMPTY_SHA256

    def test_lowercase_hex(self, temp_dir):
        path = temp_dir / "data"
        path.write_bytes(os.urandom(1000))

        digest = digest_file(path)

        assert len(digest) == 64
        assert digest == digest.lower()
        int(digest, 16)

    def test_chunk_size_does_not_change_result(self, temp_dir):
        path = temp_dir / "data"
        path.write_bytes(os.urandom(100_000))

        assert digest_file(path, chunk_size=7) == digest_file(path)

    def test_missing_file(self, temp_dir):
        missing = temp_dir / "missing"

        with pytest.raises(DigestError) as exc_info:
            digest_file(missing)

        assert exc_info.value.outcome is Outcome.DIGEST_FAILED
        assert str(missing) in str(exc_info.value)
        assert exc_info.value.details['path'] == str(missing)


class TestVerifier:

    def test_identical_files(self, temp_dir):
        data = os.urandom(4096)
        (temp_dir / "a").write_bytes(data)
        (temp_dir / "b").write_bytes(data)

        assert verify(temp_dir / "a", temp_dir / "b") is True

    def test_different_files_same_length(self, temp_dir):
        (temp_dir / "a").write_bytes(b"a" * 100)
        (temp_dir / "b").write_bytes(b"b" * 100)

        comparison = Verifier().compare(temp_dir / "a", temp_dir / "b")

        assert comparison.matches is False
        assert comparison.original_digest != comparison.candidate_digest

    def test_missing_candidate_names_offending_path(self, temp_dir):
        (temp_dir / "a").write_bytes(b"data")
        candidate = temp_dir / "gone"

        with pytest.raises(DigestError) as exc_info:
            Verifier().verify(temp_dir / "a", candidate)

        assert exc_info.value.path == candidate

    def test_comparison_matches_property(self):
        assert DigestComparison(EMPTY_SHA256, EMPTY_SHA256).matches
        assert not DigestComparison(EMPTY_SHA256, "0" * 64).matches
