"""
Compress-verify pipeline modules.
"""

# Import pipeline stages
from .stages.compression import GzipCodec
from .stages.file_pipeline import FilePipeline
from .stages.verification import Verifier
from .walker import Walker, classify_input
from .workers.parallel_processor import ParallelProcessor

__all__ = [
    'GzipCodec',
    'FilePipeline',
    'Verifier',
    'Walker',
    'classify_input',
    'ParallelProcessor',
]
