#!/usr/bin/env python3
"""
Setup configuration for the gzip compress-verify utility.
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read the contents of README file
this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text()

# Read requirements from requirements.txt
requirements = []
if (this_directory / "requirements.txt").exists():
    requirements = (this_directory / "requirements.txt").read_text().strip().split('\n')
    requirements = [req.strip() for req in requirements if req.strip() and not req.startswith('#')]

setup(
    name="gzip-compress-verify",
    version="1.0.0",
    author="gzip-compress-verify contributors",
    description="Compress files with gzip and verify every archive by SHA-256 round-trip",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=['pipeline', 'pipeline.*']),
    py_modules=[
        'base_classes',
        'compress',
        'compress_verify_pipeline',
        'pipeline_configs',
        'pipeline_errors',
        'pipeline_monitoring',
        'run_tests',
    ],
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: System Administrators",
        "Topic :: System :: Archiving :: Compression",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.8",
    install_requires=requirements,
    extras_require={
        "test": [
            "pytest>=7.0",
            "pytest-cov",
            "pytest-asyncio",
            "pytest-mock",
        ],
    },
    entry_points={
        "console_scripts": [
            "compress-verify=compress:run",
            "run-compress-verify-tests=run_tests:main",
        ],
    },
    keywords=[
        "gzip",
        "compression",
        "verification",
        "sha256",
        "backup",
        "integrity",
    ],
)
