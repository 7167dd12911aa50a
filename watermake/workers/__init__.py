"""
Workers Module - Batch Processing
=================================
Sequential processing of whole directories on top of the core renderer.

Components:
- BatchWorker: Directory walk, mtime ordering and sequential renaming
"""

from .batch_worker import (
    BatchConfig,
    BatchResult,
    BatchWorker,
    collect_image_files,
    is_image_file,
    process_directory,
    sequence_filename,
)

__all__ = [
    "BatchConfig",
    "BatchResult",
    "BatchWorker",
    "collect_image_files",
    "is_image_file",
    "process_directory",
    "sequence_filename",
]
