"""
Pipeline stages for the compress-verify system.
"""

from .compression import CopyResult, GzipCodec, compress_file, decompress_file
from .digest import digest_file
from .file_pipeline import FilePipeline
from .verification import DigestComparison, Verifier, verify

__all__ = [
    'CopyResult',
    'GzipCodec',
    'compress_file',
    'decompress_file',
    'digest_file',
    'FilePipeline',
    'DigestComparison',
    'Verifier',
    'verify',
]
