"""
Batch Worker - Directory Watermarking
=====================================
Applies the text watermark to every supported image under a directory.

Workflow:
1. Walk the input directory recursively and collect supported images
2. Sort them by modification time, oldest first
3. For each image, write a watermarked copy named after its position
   in that order
4. Log per-file failures and keep going

Naming Convention:
- ``1.jpg``, ``2.png``, ``3.jpg`` ... (1-based index + original extension)
- ``.webp`` sources are named ``<n>.jpg``
"""

import logging
import os
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional

from ..config import (
    DEFAULT_BATCH_DIRNAME,
    FALLBACK_EXTENSION,
    SUPPORTED_EXTENSIONS,
    UNSUPPORTED_EXTENSIONS,
    WatermarkRequest,
)
from ..core.visible import TextWatermarker
from ..errors import ImageIOError, WatermarkError

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, str], None]


def is_image_file(filename: str) -> bool:
    """Whether the file extension (case-sensitive) is a supported image type."""
    return Path(filename).suffix in SUPPORTED_EXTENSIONS


def _raise_walk_error(error: OSError) -> None:
    raise error


def collect_image_files(root: Path) -> List[Path]:
    """
    Find all supported images below a directory, oldest first.

    Args:
        root: Directory to walk recursively.

    Returns:
        Regular image files sorted by modification time. Ties keep the
        lexical walk order. Entries that cannot be stat'ed (dangling
        symlinks) are logged and skipped.

    Raises:
        ImageIOError: If any part of the tree cannot be listed.
    """
    mtimes: dict[Path, int] = {}
    try:
        for dirpath, dirnames, filenames in os.walk(root, onerror=_raise_walk_error):
            dirnames.sort()
            for filename in sorted(filenames):
                if not is_image_file(filename):
                    continue
                path = Path(dirpath) / filename
                try:
                    file_info = path.stat()
                except OSError as e:
                    logger.warning("Skipping %s: %s", path, e)
                    continue
                if stat.S_ISREG(file_info.st_mode):
                    mtimes[path] = file_info.st_mtime_ns
    except OSError as e:
        raise ImageIOError(f"Failed to walk directory {root}: {e}") from e

    return sorted(mtimes, key=mtimes.__getitem__)


def sequence_filename(index: int, source_path: Path) -> str:
    """Output name for the index-th (1-based) file of a batch."""
    suffix = source_path.suffix
    if suffix in UNSUPPORTED_EXTENSIONS:
        suffix = FALLBACK_EXTENSION
    return f"{index}{suffix}"


@dataclass(frozen=True)
class BatchConfig:
    """Configuration for a directory run."""
    input_dir: Path
    template: WatermarkRequest
    output_dir: Optional[Path] = None


@dataclass
class BatchResult:
    """Result of processing a single image."""
    source_path: Path
    output_path: Optional[Path] = None
    success: bool = False
    error_message: str = ""


class BatchWorker:
    """
    Sequential watermarking of a directory tree.

    Each file gets exactly one attempt. Only enumeration and creation of
    the default output directory can fail the whole run.
    """

    def __init__(
            self,
            config: BatchConfig,
            watermarker: Optional[TextWatermarker] = None,
            progress: Optional[ProgressCallback] = None
    ):
        """
        Initialize the batch worker.

        Args:
            config: BatchConfig with input, output and watermark settings.
            watermarker: Renderer shared by every file of the run.
            progress: Optional callback receiving (current, total, file_name).
        """
        self.config = config
        self.watermarker = watermarker if watermarker is not None else TextWatermarker()
        self.progress = progress

    def _prepare_output_dir(self) -> Path:
        if self.config.output_dir:
            return Path(self.config.output_dir)

        output_dir = Path(self.config.input_dir) / DEFAULT_BATCH_DIRNAME
        logger.debug("Creating output directory: %s", output_dir)
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ImageIOError(f"Failed to create output directory {output_dir}: {e}") from e
        logger.info("Saving output files to: %s", output_dir)
        return output_dir

    def _process_single_image(self, index: int, image_path: Path, output_dir: Path) -> BatchResult:
        """
        Watermark one file, converting failures into a result.

        Args:
            index: 1-based position of the file in the batch.
            image_path: Source image.
            output_dir: Directory receiving the output.

        Returns:
            BatchResult with processing outcome.
        """
        result = BatchResult(source_path=image_path)
        output_path = output_dir / sequence_filename(index, image_path)
        request = self.config.template.for_file(image_path, output_path)

        try:
            result.output_path = self.watermarker.process(request)
            result.success = True
        except (WatermarkError, OSError) as e:
            result.error_message = str(e)
            logger.error("Error processing %s: %s", image_path, e)

        return result

    def run(self) -> List[BatchResult]:
        """
        Process every image of the input directory.

        Returns:
            One BatchResult per enumerated image, in processing order.

        Raises:
            ImageIOError: If the directory cannot be enumerated or the
                          default output directory cannot be created.
        """
        image_files = collect_image_files(Path(self.config.input_dir))
        output_dir = self._prepare_output_dir()

        results: List[BatchResult] = []
        total = len(image_files)
        if total == 0:
            logger.warning("No supported images found in %s", self.config.input_dir)
            return results

        for idx, image_path in enumerate(image_files, start=1):
            if self.progress is not None:
                self.progress(idx, total, image_path.name)
            results.append(self._process_single_image(idx, image_path, output_dir))

        succeeded = sum(1 for r in results if r.success)
        logger.info("Batch finished: %d/%d images watermarked", succeeded, total)
        return results


def process_directory(
        input_dir: Path,
        template: WatermarkRequest,
        output_dir: Optional[Path] = None,
        watermarker: Optional[TextWatermarker] = None
) -> List[BatchResult]:
    """Watermark every supported image below ``input_dir``."""
    config = BatchConfig(input_dir=Path(input_dir), template=template, output_dir=output_dir)
    return BatchWorker(config, watermarker=watermarker).run()
