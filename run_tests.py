#!/usr/bin/env python3
"""
Test runner for gzip-compress-verify.

Thin wrapper around pytest: picks the unit or integration suite, optionally
skips the slow concurrency test and collects coverage for the project modules.
"""

import argparse
import subprocess
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent

COVERED_MODULES = [
    'base_classes',
    'compress',
    'compress_verify_pipeline',
    'pipeline',
    'pipeline_configs',
    'pipeline_errors',
    'pipeline_monitoring',
]

SUITES = {
    'all': 'tests/',
    'unit': 'tests/unit',
    'integration': 'tests/integration',
}


def build_command(args) -> list:
    cmd = [sys.executable, "-m", "pytest", SUITES[args.suite]]

    if args.verbose:
        cmd.append("-v")
    if args.fast:
        cmd.extend(["-m", "not slow"])
    if args.test:
        cmd.extend(["-k", args.test])
    if args.coverage:
        cmd.extend(f"--cov={module}" for module in COVERED_MODULES)
        cmd.append("--cov-report=term-missing")

    return cmd


def main():
    parser = argparse.ArgumentParser(description="Run the gzip-compress-verify test suite")
    parser.add_argument("suite", nargs="?", choices=sorted(SUITES), default="all",
                        help="Which tests to run (default: all)")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Verbose test output")
    parser.add_argument("-f", "--fast", action="store_true",
                        help="Skip tests marked slow")
    parser.add_argument("-k", "--test", metavar="PATTERN",
                        help="Only run tests matching PATTERN")
    parser.add_argument("-c", "--coverage", action="store_true",
                        help="Report coverage for the project modules")
    args = parser.parse_args()

    cmd = build_command(args)
    print(f"Running: {' '.join(cmd)}")
    sys.exit(subprocess.run(cmd, cwd=PROJECT_ROOT).returncode)


if __name__ == "__main__":
    main()
