"""
Shatter — Input Guards
Checks an image file before its pixels are decoded. The header is read
through Pillow so an oversized image is refused before any allocation.
"""

import os
import shutil
from pathlib import Path

from core import codec

MAX_FILE_MB = 100          # Maximum input file size
MIN_DISK_GB = 0.1          # Minimum free disk space for output
ALLOWED_EXTENSIONS = frozenset(codec.SUFFIX_FORMATS)


class SafetyError(Exception):
    """Raised when an input file fails a preflight check."""
    pass


def _nearest_existing_dir(path) -> Path:
    path = Path(path).resolve()
    while not path.is_dir() and path != path.parent:
        path = path.parent
    return path


def free_disk_gb(path) -> float:
    """Free space on the volume that would hold `path`, which may not exist yet."""
    return shutil.disk_usage(_nearest_existing_dir(path)).free / (1024 ** 3)


def preflight(input_path, output_dir=None) -> dict:
    """Check an input image before decoding it.

    Returns:
        dict with path, size_mb, extension, format, width, height.

    Raises:
        FileNotFoundError: input missing or not a regular file.
        SafetyError: wrong type, too big on disk or in pixels, or no room
            for the output.
        DecodeError: the header isn't a readable image.
    """
    real_path = os.path.realpath(input_path)
    if not os.path.isfile(real_path):
        raise FileNotFoundError(f"Input file not found: {input_path}")

    ext = Path(real_path).suffix.lower()
    if ext not in ALLOWED_EXTENSIONS:
        raise SafetyError(
            f"Image type '{ext}' not allowed. Supported: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
        )

    size_mb = os.path.getsize(real_path) / (1024 * 1024)
    if size_mb > MAX_FILE_MB:
        raise SafetyError(f"Input file is {size_mb:.0f}MB, exceeds {MAX_FILE_MB}MB limit.")

    fmt, width, height = codec.read_header(real_path)
    try:
        codec.check_dimensions(width, height)
    except codec.DecodeError as e:
        raise SafetyError(str(e)) from e

    if output_dir is not None:
        free_gb = free_disk_gb(output_dir)
        if free_gb < MIN_DISK_GB:
            raise SafetyError(
                f"Only {free_gb:.2f}GB free disk space, need {MIN_DISK_GB}GB minimum."
            )

    return {
        "path": real_path,
        "size_mb": size_mb,
        "extension": ext,
        "format": fmt,
        "width": width,
        "height": height,
    }
