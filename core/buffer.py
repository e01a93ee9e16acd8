"""
Shatter — Pixel Buffer
RGBA8 pixel grid shared by every effect, plus the 16-bit channel helpers.
"""

import numpy as np
from PIL import Image

# 16-bit reference range used by the compositing effects
MAXC = (1 << 16) - 1


def widen(value):
    """Scale an 8-bit channel value (or array) into the 16-bit range."""
    if isinstance(value, np.ndarray):
        return value.astype(np.int64) * 257
    return int(value) * 257


def c(value):
    """Rescale an accumulated 16-bit-range intensity into a clamped 8-bit channel.

    Works on plain ints and on numpy arrays (returns uint8 for arrays).
    """
    if isinstance(value, np.ndarray):
        scaled = np.rint(value.astype(np.float64) * 255.0 / MAXC)
        return np.clip(scaled, 0, 255).astype(np.uint8)
    scaled = int(round(value * 255.0 / MAXC))
    return max(0, min(255, scaled))


class PixelBuffer:
    """A width x height grid of RGBA pixels, row-major, origin top-left.

    Backed by a (height, width, 4) uint8 array available as ``pixels``.
    Effects may operate on ``pixels`` directly; ``get_pixel``/``put_pixel``
    are the bounds-checked single-pixel accessors.
    """

    def __init__(self, pixels: np.ndarray):
        if not isinstance(pixels, np.ndarray):
            raise ValueError("PixelBuffer needs a numpy array")
        if pixels.ndim != 3 or pixels.shape[2] != 4:
            raise ValueError(f"Expected (H, W, 4) array, got shape {pixels.shape}")
        if pixels.dtype != np.uint8:
            raise ValueError(f"Expected uint8 pixels, got {pixels.dtype}")
        self.pixels = pixels

    @classmethod
    def blank(cls, width: int, height: int, color=(0, 0, 0, 0)) -> "PixelBuffer":
        """Create a buffer filled with a single color."""
        if width <= 0 or height <= 0:
            raise ValueError(f"Buffer dimensions must be positive, got {width}x{height}")
        pixels = np.empty((height, width, 4), dtype=np.uint8)
        pixels[:, :] = _check_pixel(color)
        return cls(pixels)

    @classmethod
    def from_image(cls, img: Image.Image) -> "PixelBuffer":
        """Convert any Pillow image to an RGBA buffer."""
        if img.mode != "RGBA":
            img = img.convert("RGBA")
        return cls(np.array(img, dtype=np.uint8))

    def to_image(self) -> Image.Image:
        return Image.fromarray(self.pixels)

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def size(self) -> tuple:
        """(width, height), Pillow order."""
        return self.width, self.height

    def _check_coords(self, x: int, y: int):
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(
                f"Pixel ({x}, {y}) outside {self.width}x{self.height} buffer"
            )

    def get_pixel(self, x: int, y: int) -> tuple:
        self._check_coords(x, y)
        return tuple(int(v) for v in self.pixels[y, x])

    def put_pixel(self, x: int, y: int, pixel):
        self._check_coords(x, y)
        self.pixels[y, x] = _check_pixel(pixel)

    def copy(self) -> "PixelBuffer":
        return PixelBuffer(self.pixels.copy())

    def __eq__(self, other):
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return np.array_equal(self.pixels, other.pixels)

    def __repr__(self):
        return f"PixelBuffer({self.width}x{self.height})"


def _check_pixel(pixel) -> tuple:
    values = tuple(int(v) for v in pixel)
    if len(values) != 4:
        raise ValueError(f"Pixel needs 4 channels (RGBA), got {len(values)}")
    for v in values:
        if not 0 <= v <= 255:
            raise ValueError(f"Channel value {v} outside 0-255")
    return values
