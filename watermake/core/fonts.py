"""
Font Resolution
===============
Finds a font for the watermark text by trying an ordered list of resolvers:

1. The custom font file (``./SimHei.ttf`` or ``$WATERMAKE_FONT``)
2. Well-known platform font paths, first existing file wins
3. A generic sans-serif face from Pillow's font search path
4. Pillow's built-in default font, which always succeeds

A font that exists but fails to load is logged and skipped, never raised.
"""

import logging
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from PIL import ImageFont

from ..config import GENERIC_FONT_NAMES, SYSTEM_FONT_PATHS, custom_font_path
from ..errors import FontLoadError

logger = logging.getLogger(__name__)

Font = ImageFont.FreeTypeFont
Resolver = Callable[[int], Optional[Font]]


def load_font_file(path: str, size: int) -> Font:
    """
    Load a TrueType/OpenType font file.

    Raises:
        FontLoadError: If Pillow cannot parse the file.
    """
    try:
        return ImageFont.truetype(path, size)
    except OSError as e:
        raise FontLoadError(f"Cannot load font {path}: {e}") from e


class FontResolver:
    """
    Prioritized font lookup with a per-size cache.

    The resolver list can be replaced, which is how tests force a
    particular step of the chain.
    """

    def __init__(
            self,
            custom_path: Optional[str] = None,
            system_paths: Sequence[str] = SYSTEM_FONT_PATHS,
            generic_names: Sequence[str] = GENERIC_FONT_NAMES,
            resolvers: Optional[List[Resolver]] = None
    ):
        self._custom_path = custom_path
        self._system_paths = tuple(system_paths)
        self._generic_names = tuple(generic_names)
        self._cached_fonts: dict[int, Font] = {}

        if resolvers is None:
            resolvers = [
                self._from_custom_path,
                self._from_system_paths,
                self._from_generic_face,
            ]
        self.resolvers = resolvers

    def _load_existing(self, path: str, size: int) -> Optional[Font]:
        if not Path(path).is_file():
            return None
        try:
            return load_font_file(path, size)
        except FontLoadError as e:
            logger.warning("%s, trying next font", e)
            return None

    def _from_custom_path(self, size: int) -> Optional[Font]:
        return self._load_existing(self._custom_path or custom_font_path(), size)

    def _from_system_paths(self, size: int) -> Optional[Font]:
        for path in self._system_paths:
            if Path(path).is_file():
                # First existing candidate wins, even if it fails to parse
                return self._load_existing(path, size)
        return None

    def _from_generic_face(self, size: int) -> Optional[Font]:
        for name in self._generic_names:
            try:
                return ImageFont.truetype(name, size)
            except OSError:
                continue
        logger.warning("Could not load the configured fonts, using fallback font")
        return None

    @staticmethod
    def _builtin_default(size: int) -> Font:
        logger.warning("No fallback font available, using built-in font")
        return ImageFont.load_default(size)

    def get_font(self, size: int) -> Font:
        """
        Get or resolve the font for the given size.

        Args:
            size: Font size in pixels.

        Returns:
            The first font any resolver produced, else the built-in default.
        """
        if size not in self._cached_fonts:
            font = None
            for resolver in self.resolvers:
                font = resolver(size)
                if font is not None:
                    break
            if font is None:
                font = self._builtin_default(size)
            logger.debug("Resolved font %s at size %d", getattr(font, "path", "<built-in>"), size)
            self._cached_fonts[size] = font

        return self._cached_fonts[size]

    def clear_cache(self) -> None:
        self._cached_fonts.clear()
