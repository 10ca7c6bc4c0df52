"""
Image collection for PixMix.

Finds image files, orders them by name the way people expect (img2 before
img10) and reads their natural sizes.
"""

import re
import logging
from pathlib import Path
from typing import Iterable, List, Tuple, Union

from PIL import Image, ImageOps

from .core import RectangleItem


SUPPORTED_FORMATS = {'.png', '.jpg', '.jpeg', '.gif', '.bmp', '.webp', '.tif', '.tiff'}

_DIGITS = re.compile(r'(\d+)')

logger = logging.getLogger(__name__)


def natural_sort_key(name: str) -> tuple:
    """Case-insensitive key that compares runs of digits as numbers."""
    parts = _DIGITS.split(name.casefold())
    # (0, n) for numbers and (1, s) for text keeps mixed parts comparable
    return tuple((0, int(part), part) if part.isdigit() else (1, 0, part) for part in parts if part != '')


def _add_once(files: List[Path], seen: set, path: Path) -> None:
    key = path.resolve()
    if key in seen:
        logger.debug(f"Skipping duplicate path: {path}")
        return
    seen.add(key)
    files.append(path)


def find_image_files(paths: Iterable[Union[str, Path]]) -> Tuple[List[Path], List[str]]:
    """
    Expand files and folders into a sorted list of image files.

    Folders are scanned one level deep. A file reached twice (for example a
    folder and a file inside it) is listed once. Paths that do not exist are
    reported as errors; files with other extensions are skipped.
    """
    files = []
    errors = []
    seen = set()

    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            for child in path.iterdir():
                if child.is_file() and child.suffix.lower() in SUPPORTED_FORMATS:
                    _add_once(files, seen, child)
        elif path.is_file():
            if path.suffix.lower() in SUPPORTED_FORMATS:
                _add_once(files, seen, path)
            else:
                logger.debug(f"Skipping non-image file: {path}")
        else:
            errors.append(f"Path does not exist: {path}")

    files.sort(key=lambda p: natural_sort_key(p.name))
    return files, errors


def collect_images(paths: Iterable[Union[str, Path]]) -> Tuple[List[RectangleItem], List[str]]:
    """
    Read every image under the given paths into layout items.

    Args:
        paths: Image files and/or folders containing images

    Returns:
        Tuple of (items in display order, error messages)
    """
    files, errors = find_image_files(paths)
    items = []

    for i, file_path in enumerate(files, start=1):
        try:
            with Image.open(file_path) as img:
                # sizes as displayed, after EXIF rotation
                width, height = ImageOps.exif_transpose(img).size
            item = RectangleItem(width, height, file_path.name, len(items), file_path)
        except (OSError, ValueError, Image.DecompressionBombError) as e:
            logger.error(f"Cannot read image {file_path.name}: {e}")
            errors.append(f"Cannot read image: {file_path.name} - {e}")
            continue

        items.append(item)
        logger.info(f"Loaded {i}/{len(files)}: {file_path.name} ({width}x{height})")

    return items, errors
