"""
Shared fixtures for the compress-verify test suite.
"""

import os
import shutil
import tempfile
from pathlib import Path

import pytest

from pipeline_configs import PipelineConfig


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    tmp_dir = Path(tempfile.mkdtemp())
    yield tmp_dir
    shutil.rmtree(tmp_dir, ignore_errors=True)


@pytest.fixture
def workdir(temp_dir, monkeypatch):
    """Run the test from inside temp_dir so ./decompressed lands there."""
    monkeypatch.chdir(temp_dir)
    return temp_dir


@pytest.fixture
def quiet_config():
    """Default configuration without a progress bar."""
    return PipelineConfig(show_progress=False)


@pytest.fixture
def sample_tree(temp_dir):
    """
    Directory with a/x.txt (100 x 'A'), b/y.txt (1 MiB pseudo-random)
    and a pre-existing b/z.txt.gz.
    """
    root = temp_dir / "tree"
    (root / "a").mkdir(parents=True)
    (root / "b").mkdir(parents=True)
    (root / "a" / "x.txt").write_bytes(b"A" * 100)
    (root / "b" / "y.txt").write_bytes(os.urandom(1024 * 1024))
    (root / "b" / "z.txt.gz").write_bytes(b"pre-existing, not touched")
    return root
