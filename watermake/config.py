"""
Watermake Configuration
=======================
Constants shared by the renderer, the batch worker and the CLI, plus the
immutable WatermarkRequest value describing one watermarking operation.
"""

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional, Tuple

from .errors import ValidationError

# Extensions are matched case-sensitively, including the leading dot
SUPPORTED_EXTENSIONS = frozenset({
    ".jpg", ".jpeg", ".png", ".bmp", ".gif", ".tiff", ".webp",
})
UNSUPPORTED_EXTENSIONS = frozenset({".webp"})
# Replacement suffix for outputs derived from unsupported inputs
FALLBACK_EXTENSION = ".jpg"

POSITIONS = ("top-left", "top-right", "bottom-left", "bottom-right", "center")
DEFAULT_POSITION = "bottom-right"

MARGIN = 10
JPEG_QUALITY = 90
SHADOW_DARKEN = 100
DEFAULT_COLOR = (255, 255, 255)

OUTPUT_SUFFIX = "_watermark"
DEFAULT_BATCH_DIRNAME = "watermarked"

# Font lookup
FONT_ENV_VAR = "WATERMAKE_FONT"
CUSTOM_FONT_PATH = "./SimHei.ttf"
SYSTEM_FONT_PATHS = (
    "/System/Library/Fonts/PingFang.ttc",               # macOS
    "/Library/Fonts/Arial.ttf",                         # macOS
    "/System/Library/Fonts/Helvetica.ttc",              # macOS
    "C:/Windows/Fonts/simhei.ttf",                      # Windows
    "C:/Windows/Fonts/arial.ttf",                       # Windows
    "/usr/share/fonts/truetype/freefont/FreeSans.ttf",  # Linux
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",  # Linux
)
GENERIC_FONT_NAMES = ("DejaVuSans.ttf", "Arial.ttf", "FreeSans.ttf")


def custom_font_path() -> str:
    """Custom font location, overridable through the environment."""
    return os.getenv(FONT_ENV_VAR, CUSTOM_FONT_PATH)


@dataclass(frozen=True)
class WatermarkRequest:
    """
    Everything needed to watermark one image.

    Attributes:
        source_path: Image to read (the input directory for batch templates).
        text: Watermark text.
        output_path: Destination file. None derives one next to the source.
        position: Anchor name, one of POSITIONS.
        opacity: Text alpha, 0-255.
        font_size: Font size in pixels, must be positive.
        random_color: Pick a random RGB color instead of white.
        shadow_offset: (dx, dy) pixel offset of the drop shadow.
        shadow_opacity: Shadow alpha, 0-255. 0 hides the shadow.
    """
    source_path: Path
    text: str = "Watermark"
    output_path: Optional[Path] = None
    position: str = DEFAULT_POSITION
    opacity: int = 128
    font_size: int = 30
    random_color: bool = True
    shadow_offset: Tuple[int, int] = (2, 2)
    shadow_opacity: int = 100

    def validate(self) -> None:
        """
        Check every numeric and enumerated parameter.

        Raises:
            ValidationError: On the first invalid parameter found.
        """
        if not 0 <= self.opacity <= 255:
            raise ValidationError("Opacity must be between 0 and 255")

        if not 0 <= self.shadow_opacity <= 255:
            raise ValidationError("Shadow opacity must be between 0 and 255")

        if self.font_size <= 0:
            raise ValidationError("Font size must be greater than 0")

        if self.position not in POSITIONS:
            raise ValidationError(
                f"Invalid position '{self.position}', "
                f"expected one of: {', '.join(POSITIONS)}"
            )

    def for_file(self, source_path: Path, output_path: Optional[Path]) -> "WatermarkRequest":
        """Copy of this request aimed at another source and output."""
        return replace(self, source_path=Path(source_path), output_path=output_path)
