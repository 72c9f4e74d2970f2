#!/usr/bin/env python3
"""
Command-line front end: compress a file or directory with gzip and verify
every artifact by SHA-256 round-trip.
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from compress_verify_pipeline import CompressVerifyPipeline, RunReport
from pipeline_configs import DEFAULT_STAGING_DIR, PipelineConfig
from pipeline_errors import OrchestratorError

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='compress-verify',
        description="Compress files with gzip and verify each archive decompresses to the original",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  compress-verify --input report.csv          # Compress and verify one file
  compress-verify --input ./data              # Every file under ./data
  compress-verify --input ./data --workers 2  # Limit parallelism
        """
    )

    parser.add_argument('--input', dest='input_path', metavar='PATH',
                        help='File or directory to compress')
    parser.add_argument('--staging-dir', default=str(DEFAULT_STAGING_DIR), metavar='DIR',
                        help='Scratch directory for decompressed copies (default: ./decompressed)')
    parser.add_argument('--workers', type=int, default=None, metavar='N',
                        help='Worker pool width (default: min(CPUs, 8))')
    parser.add_argument('--remove-partial', action='store_true',
                        help='Delete FILE.gz when verification of FILE fails')
    parser.add_argument('--no-progress', action='store_true',
                        help='Disable the progress bar')

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    verbosity.add_argument('-q', '--quiet', action='store_true', help='Only log warnings and errors')

    return parser


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    level = logging.INFO
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr,
    )


def print_report(report: RunReport) -> None:
    if report.skipped:
        print(f"Skipping {report.input_path}: already compressed")
        return

    for line in report.summary_lines():
        print(line)

    if report.walk_error is not None:
        print(f"Error: {report.walk_error}")
    if report.cleanup_error is not None:
        print(f"Warning: failed to remove staging directory: {report.cleanup_error}")
    if report.metrics is not None and report.successful:
        print(report.metrics.summary_line())


async def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point; returns the process exit code"""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.input_path:
        print("Input file path is required.", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return EXIT_USAGE

    configure_logging(args.verbose, args.quiet)

    try:
        config = PipelineConfig(
            num_workers=args.workers,
            staging_dir=args.staging_dir,
            remove_partial_artifacts=args.remove_partial,
            show_progress=not args.no_progress,
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE

    pipeline = CompressVerifyPipeline(config)

    try:
        report = await pipeline.run(args.input_path)
    except OrchestratorError as e:
        print(f"Error: {e}")
        return EXIT_FAILED

    print_report(report)
    return EXIT_OK if report.success else EXIT_FAILED


def run() -> None:
    """Console script entry point"""
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        sys.exit(EXIT_INTERRUPTED)


if __name__ == "__main__":
    run()
