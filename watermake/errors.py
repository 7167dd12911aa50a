"""
Watermake Exceptions
====================
Every failure raised by the watermarking code derives from WatermarkError,
so callers can catch a single type per file.
"""


class WatermarkError(Exception):
    """Base class for watermarking failures."""


class UnsupportedFormatError(WatermarkError):
    """The image format is recognized but cannot be processed."""


class DecodeError(WatermarkError):
    """The source bytes could not be decoded into an image."""


class FontLoadError(WatermarkError):
    """A font file exists but could not be parsed. Never fatal."""


class ImageIOError(WatermarkError, OSError):
    """Reading, writing, or creating a directory failed."""


class ValidationError(WatermarkError, ValueError):
    """A watermark parameter is outside its accepted range."""
