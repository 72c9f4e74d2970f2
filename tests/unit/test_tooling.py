"""
Unit tests for the test runner and packaging metadata
"""

import ast
import sys
from argparse import Namespace
from pathlib import Path

import pytest

from run_tests import COVERED_MODULES, build_command

PROJECT_ROOT = Path(__file__).resolve().parents[2]


def runner_args(**overrides):
    values = dict(suite="all", verbose=False, fast=False, test=None, coverage=False)
    values.update(overrides)
    return Namespace(**values)


class TestBuildCommand:

    def test_defaults(self):
        assert build_command(runner_args()) == [sys.executable, "-m", "pytest", "tests/"]

    @pytest.mark.parametrize('suite, path', [
        ("unit", "tests/unit"),
        ("integration", "tests/integration"),
    ])
    def test_suite_selection(self, suite, path):
        assert build_command(runner_args(suite=suite))[3] == path

    def test_filters(self):
        cmd = build_command(runner_args(verbose=True, fast=True, test="staging"))

        assert cmd[4:] == ["-v", "-m", "not slow", "-k", "staging"]

    def test_coverage_names_project_modules(self):
        cmd = build_command(runner_args(coverage=True))

        assert [c for c in cmd if c.startswith("--cov=")] == \
            [f"--cov={m}" for m in COVERED_MODULES]
        assert "--cov=." not in cmd


def setup_keywords():
    tree = ast.parse((PROJECT_ROOT / "setup.py").read_text())
    call = next(node for node in ast.walk(tree)
                if isinstance(node, ast.Call) and getattr(node.func, 'id', None) == 'setup')
    return {kw.arg: kw.value for kw in call.keywords}


class TestPackagingMetadata:

    def test_author_names_this_project(self):
        assert ast.literal_eval(setup_keywords()['author']) == "gzip-compress-verify contributors"

    def test_only_test_extra_is_declared(self):
        extras = ast.literal_eval(setup_keywords()['extras_require'])

        assert list(extras) == ["test"]
        assert "pytest-asyncio" in extras["test"]
