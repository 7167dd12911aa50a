"""
Command Line Interface
======================
Usage:
    watermark <input-path> [-t text] [-o output] [-p position] [-a opacity]
              [-s fontSize] [-n] [-sox dx] [-soy dy] [-sa shadowOpacity]

A file input is watermarked to ``-o`` (or ``<name>_watermark<ext>``);
a directory input is processed in batch mode into ``-o`` (or
``<dir>/watermarked``). All parameters are validated before any file is
opened.
"""

import argparse
import logging
import stat
import sys
from pathlib import Path
from typing import List, Optional

import numpy as np

from . import __version__
from .config import DEFAULT_POSITION, POSITIONS, WatermarkRequest
from .core.fonts import FontResolver
from .core.visible import TextWatermarker
from .errors import ValidationError, WatermarkError
from .workers.batch_worker import BatchConfig, BatchWorker, is_image_file

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="watermark",
        description="Add a text watermark with a drop shadow to an image or a directory of images.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("input_path", nargs="?", help="Image file or directory")
    parser.add_argument("-t", dest="text", default="Watermark", help="Watermark text")
    parser.add_argument(
        "-o", dest="output",
        help="Output file (single image) or directory (batch mode)",
    )
    parser.add_argument(
        "-p", dest="position", default=DEFAULT_POSITION,
        help=f"Watermark position: {', '.join(POSITIONS)}",
    )
    parser.add_argument("-a", dest="opacity", type=int, default=128, help="Text opacity (0-255)")
    parser.add_argument("-s", dest="size", type=int, default=30, help="Font size")
    parser.add_argument(
        "-n", dest="no_random_color", action="store_true",
        help="Use white instead of a random color",
    )
    parser.add_argument("-sox", dest="shadow_offset_x", type=int, default=2, help="Shadow X offset")
    parser.add_argument("-soy", dest="shadow_offset_y", type=int, default=2, help="Shadow Y offset")
    parser.add_argument(
        "-sa", dest="shadow_opacity", type=int, default=100,
        help="Shadow opacity (0-255)",
    )
    parser.add_argument("--font", help="Custom TTF/OTF font file tried before system fonts")
    parser.add_argument("--seed", type=int, help="Seed for random watermark colors")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def request_from_args(args: argparse.Namespace) -> WatermarkRequest:
    """Build the watermark request described by parsed arguments."""
    return WatermarkRequest(
        source_path=Path(args.input_path),
        text=args.text,
        output_path=Path(args.output) if args.output else None,
        position=args.position,
        opacity=args.opacity,
        font_size=args.size,
        random_color=not args.no_random_color,
        shadow_offset=(args.shadow_offset_x, args.shadow_offset_y),
        shadow_opacity=args.shadow_opacity,
    )


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
        stream=sys.stderr,
    )
    logger.debug("Arguments: %s", vars(args))

    if not args.input_path:
        logger.error("Please specify an input image or directory")
        parser.print_help()
        return 1

    request = request_from_args(args)
    try:
        request.validate()
    except ValidationError as e:
        logger.error(str(e))
        return 1

    input_path = request.source_path
    try:
        file_info = input_path.stat()
    except OSError as e:
        logger.error("Cannot access %s: %s", input_path, e)
        return 1
    is_dir = stat.S_ISDIR(file_info.st_mode)

    watermarker = TextWatermarker(
        fonts=FontResolver(custom_path=args.font),
        rng=np.random.default_rng(args.seed),
    )

    if is_dir:
        config = BatchConfig(input_dir=input_path, template=request, output_dir=request.output_path)
        try:
            BatchWorker(config, watermarker=watermarker).run()
        except WatermarkError as e:
            logger.error("Error processing directory: %s", e)
            return 1
        return 0

    if not is_image_file(input_path.name):
        logger.error("Input file is not a supported image format: %s", input_path)
        return 1

    try:
        watermarker.process(request)
    except WatermarkError as e:
        logger.error("Error processing file: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
