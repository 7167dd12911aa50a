"""
Visible Watermark Renderer
==========================
Draws a single line of text with a drop shadow onto an image using
PIL/Pillow.

Technical Notes:
- The text is anchored at one of five named positions with a fixed margin
- Shadow and text are drawn on separate RGBA layers and alpha-composited,
  so the shadow blends under the text instead of being overwritten by it
- ``.png`` outputs are encoded as PNG, everything else as JPEG (quality 90)
- ``.webp`` sources are recognized but rejected
"""

import io
import logging
from pathlib import Path
from typing import Optional, Tuple, Union

import numpy as np
from PIL import Image, ImageDraw

from ..config import (
    DEFAULT_COLOR,
    FALLBACK_EXTENSION,
    JPEG_QUALITY,
    MARGIN,
    OUTPUT_SUFFIX,
    SHADOW_DARKEN,
    UNSUPPORTED_EXTENSIONS,
    WatermarkRequest,
)
from ..errors import DecodeError, ImageIOError, UnsupportedFormatError
from .fonts import Font, FontResolver

logger = logging.getLogger(__name__)

Color = Tuple[int, int, int]


def compute_placement(
        width: int,
        height: int,
        text_width: int,
        text_height: int,
        position: str,
        margin: int = MARGIN
) -> Tuple[float, float]:
    """
    Top-left coordinate of the text box for a named anchor.

    Any unrecognized position is treated as bottom-right.
    """
    if position == "top-left":
        return margin, margin
    if position == "top-right":
        return width - text_width - margin, margin
    if position == "bottom-left":
        return margin, height - text_height - margin
    if position == "center":
        return (width - text_width) / 2, (height - text_height) / 2
    return width - text_width - margin, height - text_height - margin


def pick_color(random_color: bool, rng: np.random.Generator) -> Color:
    """Random RGB color (each channel uniform in 0-255), or white."""
    if not random_color:
        return DEFAULT_COLOR
    r, g, b = rng.integers(0, 256, size=3)
    return int(r), int(g), int(b)


def shadow_color(color: Color) -> Color:
    """Darker variant of a color, used for the drop shadow."""
    return tuple(max(0, channel - SHADOW_DARKEN) for channel in color)


def text_bbox(font: Font, text: str) -> Tuple[int, int, int, int]:
    """Ink bounding box of the text when drawn at the origin."""
    temp_img = Image.new("RGBA", (1, 1), (0, 0, 0, 0))
    temp_draw = ImageDraw.Draw(temp_img)
    return temp_draw.textbbox((0, 0), text, font=font)


def measure_text(font: Font, text: str) -> Tuple[int, int]:
    """Rendered (width, height) of the text."""
    left, top, right, bottom = text_bbox(font, text)
    return right - left, bottom - top


def resolve_output_path(
        source_path: Union[str, Path],
        output_path: Optional[Union[str, Path]] = None
) -> Path:
    """
    Work out where the watermarked image is written.

    Without an explicit output the result sits next to the source as
    ``<stem>_watermark<ext>``. Unsupported extensions (webp) are replaced
    by ``.jpg`` in both the derived and the explicit case.
    """
    source_path = Path(source_path)

    if not output_path:
        suffix = source_path.suffix
        if suffix in UNSUPPORTED_EXTENSIONS:
            suffix = FALLBACK_EXTENSION
        return source_path.with_name(f"{source_path.stem}{OUTPUT_SUFFIX}{suffix}")

    output_path = Path(output_path)
    if output_path.suffix in UNSUPPORTED_EXTENSIONS:
        return output_path.with_suffix(FALLBACK_EXTENSION)
    return output_path


def encode_image(image: Image.Image, suffix: str) -> bytes:
    """
    Encode an image for the given file suffix.

    Args:
        image: Image to encode, any mode.
        suffix: Output file suffix; ``.png`` selects PNG, anything else JPEG.

    Returns:
        The encoded bytes.
    """
    buffer = io.BytesIO()
    if suffix == ".png":
        image.save(buffer, format="PNG")
    else:
        # JPEG has no alpha channel, flatten onto white
        if image.mode == "RGBA":
            rgb_image = Image.new("RGB", image.size, (255, 255, 255))
            rgb_image.paste(image, mask=image.split()[3])
        else:
            rgb_image = image.convert("RGB")
        rgb_image.save(buffer, format="JPEG", quality=JPEG_QUALITY)
    return buffer.getvalue()


def decode_image(data: bytes) -> Image.Image:
    """
    Decode raw file bytes.

    Raises:
        DecodeError: If Pillow does not recognize or cannot read the data.
    """
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as e:
        raise DecodeError(f"Failed to decode image: {e}") from e
    return image


def _draw_text_layer(
        base_image: Image.Image,
        text: str,
        font: Font,
        xy: Tuple[float, float],
        fill: Tuple[int, int, int, int]
) -> Image.Image:
    layer = Image.new("RGBA", base_image.size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(layer)
    draw.text(xy, text, font=font, fill=fill)
    return Image.alpha_composite(base_image, layer)


class TextWatermarker:
    """
    Adds a positioned text watermark with a drop shadow to images.

    The random generator is injected so colors can be reproduced with a
    fixed seed; one instance is meant to serve a whole run.
    """

    def __init__(
            self,
            fonts: Optional[FontResolver] = None,
            rng: Optional[np.random.Generator] = None
    ):
        """
        Initialize the TextWatermarker.

        Args:
            fonts: Font resolver. Defaults to the standard resolver chain.
            rng: Random generator for color selection. Defaults to an
                 unseeded numpy generator.
        """
        self.fonts = fonts if fonts is not None else FontResolver()
        self.rng = rng if rng is not None else np.random.default_rng()

    def apply(self, image: Image.Image, request: WatermarkRequest) -> Image.Image:
        """
        Draw the shadow and the text onto an image.

        Args:
            image: PIL Image to watermark. Not modified.
            request: Watermark parameters.

        Returns:
            New RGBA image with the watermark composited.
        """
        base_image = image if image.mode == "RGBA" else image.convert("RGBA")
        font = self.fonts.get_font(request.font_size)

        text_width, text_height = measure_text(font, request.text)
        x, y = compute_placement(
            base_image.width, base_image.height,
            text_width, text_height,
            request.position
        )
        left, top = text_bbox(font, request.text)[:2]

        color = pick_color(request.random_color, self.rng)
        dark = shadow_color(color)
        dx, dy = request.shadow_offset

        # Offset by the bbox origin so the ink box lands on (x, y)
        result = _draw_text_layer(
            base_image, request.text, font,
            (x + dx - left, y + dy - top),
            (*dark, request.shadow_opacity)
        )
        return _draw_text_layer(
            result, request.text, font,
            (x - left, y - top),
            (*color, request.opacity)
        )

    def render(self, request: WatermarkRequest) -> Tuple[Path, bytes]:
        """
        Watermark the request's source image and encode the result.

        Returns:
            Tuple of (resolved output path, encoded image bytes).

        Raises:
            UnsupportedFormatError: For ``.webp`` sources.
            ValidationError: If a parameter is out of range.
            ImageIOError: If the source cannot be read.
            DecodeError: If the source is not a readable image.
        """
        source_path = Path(request.source_path)
        if source_path.suffix in UNSUPPORTED_EXTENSIONS:
            raise UnsupportedFormatError(
                f"{source_path.suffix} images are not supported yet: {source_path}"
            )

        request.validate()

        try:
            data = source_path.read_bytes()
        except OSError as e:
            raise ImageIOError(f"Cannot read image {source_path}: {e}") from e

        with decode_image(data) as image:
            result = self.apply(image, request)

        output_path = resolve_output_path(source_path, request.output_path)
        return output_path, encode_image(result, output_path.suffix)

    def process(self, request: WatermarkRequest) -> Path:
        """
        Watermark one image and write it to disk.

        Returns:
            Path of the written file.
        """
        output_path, data = self.render(request)

        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ImageIOError(f"Cannot create output directory {output_path.parent}: {e}") from e

        try:
            output_path.write_bytes(data)
        except OSError as e:
            raise ImageIOError(f"Cannot write output file {output_path}: {e}") from e

        logger.info("Processed: %s", output_path)
        return output_path


# Convenience function for simple usage
def add_watermark(request: WatermarkRequest, seed: Optional[int] = None) -> Path:
    """Watermark a single image with a fresh watermarker."""
    watermarker = TextWatermarker(rng=np.random.default_rng(seed))
    return watermarker.process(request)
