"""
Watermake Package
=================
A command-line tool for stamping text watermarks onto images.

Modules:
    - config: Constants and the WatermarkRequest value
    - core: Font lookup and watermark rendering
    - workers: Sequential directory (batch) processing
    - cli: argparse entry point

Usage:
    from watermake import TextWatermarker, WatermarkRequest
    from watermake.workers import BatchWorker, BatchConfig
"""

__version__ = "1.0.0"
__app_name__ = "Watermake"

from .config import WatermarkRequest
# Core exports
from .core import FontResolver, TextWatermarker, add_watermark
# Error exports
from .errors import (
    DecodeError,
    FontLoadError,
    ImageIOError,
    UnsupportedFormatError,
    ValidationError,
    WatermarkError,
)
# Worker exports
from .workers import BatchConfig, BatchResult, BatchWorker, process_directory

__all__ = [
    # Version info
    "__version__",
    "__app_name__",

    # Config
    "WatermarkRequest",

    # Core
    "FontResolver",
    "TextWatermarker",
    "add_watermark",

    # Workers
    "BatchConfig",
    "BatchResult",
    "BatchWorker",
    "process_directory",

    # Errors
    "WatermarkError",
    "UnsupportedFormatError",
    "DecodeError",
    "FontLoadError",
    "ImageIOError",
    "ValidationError",
]
