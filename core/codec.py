"""
Shatter — Image Codec
Converts between encoded image bytes and RGBA pixel buffers.
Pillow does all the format work; this module only normalizes modes and errors.
"""

import io
import logging
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from core.buffer import PixelBuffer

logger = logging.getLogger(__name__)

MAX_PIXELS = 100_000_000     # Decompression bomb guard (~10k x 10k)
DEFAULT_JPEG_QUALITY = 80    # Whole-image JPEG output quality

LOSSY_FORMATS = {"JPEG", "WEBP"}
# No alpha channel in these; alpha is dropped before saving
OPAQUE_FORMATS = {"JPEG", "BMP"}

FORMAT_ALIASES = {
    "JPG": "JPEG",
    "TIF": "TIFF",
}

SUFFIX_FORMATS = {
    ".png": "PNG",
    ".jpg": "JPEG",
    ".jpeg": "JPEG",
    ".webp": "WEBP",
    ".bmp": "BMP",
    ".gif": "GIF",
    ".tif": "TIFF",
    ".tiff": "TIFF",
}


class CodecError(Exception):
    """Base class for image codec failures."""
    pass


class DecodeError(CodecError):
    """Raised when input bytes are not a readable image."""
    pass


class EncodeError(CodecError):
    """Raised when a buffer cannot be written in the requested format."""
    pass


def normalize_format(fmt: str) -> str:
    """Map a user-facing format name ('png', 'jpg', ...) to Pillow's name."""
    name = str(fmt).strip().upper().lstrip(".")
    return FORMAT_ALIASES.get(name, name)


def format_for_path(path) -> str:
    """Infer the output format from a file suffix."""
    suffix = Path(path).suffix.lower()
    if suffix not in SUFFIX_FORMATS:
        raise EncodeError(
            f"Can't infer image format from '{suffix or path}'. "
            f"Supported: {', '.join(sorted(SUFFIX_FORMATS))}"
        )
    return SUFFIX_FORMATS[suffix]


def check_dimensions(width: int, height: int):
    """Raise DecodeError if an image of this size is over MAX_PIXELS."""
    if width * height > MAX_PIXELS:
        raise DecodeError(f"Image is {width}x{height}, exceeds {MAX_PIXELS} pixel limit")


def read_header(path) -> tuple:
    """(format, width, height) from an image file's header. Pixels aren't decoded."""
    try:
        with Image.open(path) as img:
            return img.format, img.width, img.height
    except (UnidentifiedImageError, OSError, SyntaxError,
            Image.DecompressionBombError) as e:
        raise DecodeError(f"Can't decode image: {e}") from e


def decode(data: bytes) -> PixelBuffer:
    """Decode image bytes into an RGBA buffer.

    Raises:
        DecodeError: empty, malformed, unsupported, or oversized input.
    """
    if not data:
        raise DecodeError("No image data")
    try:
        img = Image.open(io.BytesIO(data))
        w, h = img.size
        check_dimensions(w, h)
        img.load()
    except DecodeError:
        raise
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError,
            Image.DecompressionBombError) as e:
        raise DecodeError(f"Can't decode image: {e}") from e

    buffer = PixelBuffer.from_image(img)
    if buffer.size != (w, h):
        raise DecodeError(f"Decoded {buffer.size}, header said {(w, h)}")
    logger.debug("Decoded %s image %dx%d (mode %s)", img.format, w, h, img.mode)
    return buffer


def encode(buffer: PixelBuffer, fmt: str = "PNG", quality: int | None = None) -> bytes:
    """Encode a buffer to bytes.

    Args:
        buffer: Pixels to write.
        fmt: Pillow format name (case-insensitive, 'jpg' accepted).
        quality: 1-100, only used for lossy formats. Defaults to
            DEFAULT_JPEG_QUALITY for those.

    Raises:
        EncodeError: unknown format, bad quality, or Pillow failure.
    """
    fmt = normalize_format(fmt)
    Image.init()
    if fmt not in Image.SAVE:
        raise EncodeError(f"Unknown output format: {fmt}")

    img = buffer.to_image()
    if fmt in OPAQUE_FORMATS:
        img = img.convert("RGB")

    save_kwargs = {}
    if fmt in LOSSY_FORMATS:
        if quality is None:
            quality = DEFAULT_JPEG_QUALITY
        quality = int(quality)
        if not 1 <= quality <= 100:
            raise EncodeError(f"Quality must be 1-100, got {quality}")
        save_kwargs["quality"] = quality

    out = io.BytesIO()
    try:
        img.save(out, format=fmt, **save_kwargs)
    except (OSError, ValueError, KeyError) as e:
        raise EncodeError(f"Can't encode {buffer} as {fmt}: {e}") from e
    return out.getvalue()


def load_image(path) -> PixelBuffer:
    """Read and decode an image file."""
    return decode(Path(path).read_bytes())


def save_image(buffer: PixelBuffer, path, fmt: str | None = None,
               quality: int | None = None) -> Path:
    """Encode a buffer and write it to disk. Format defaults to the path suffix.

    Nothing is written if encoding fails.
    """
    path = Path(path)
    fmt = normalize_format(fmt) if fmt else format_for_path(path)
    data = encode(buffer, fmt, quality)
    path.write_bytes(data)
    logger.debug("Wrote %s (%d bytes)", path, len(data))
    return path
