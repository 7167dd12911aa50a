"""
Core Module - Watermark Rendering
=================================
Font lookup and text watermark rendering. No CLI or file-walking logic.
"""

from .fonts import FontResolver
from .visible import (
    TextWatermarker,
    add_watermark,
    compute_placement,
    pick_color,
    resolve_output_path,
    shadow_color,
)

__all__ = [
    "FontResolver",
    "TextWatermarker",
    "add_watermark",
    "compute_placement",
    "pick_color",
    "resolve_output_path",
    "shadow_color",
]
