"""
Shatter — Glitch Session
Owns the two buffers of a run: the decoded input (never written) and the
output that every effect mutates in sequence.
"""

import logging
from pathlib import Path

from core.buffer import PixelBuffer
from core.codec import decode, encode, save_image
from core.safety import preflight

logger = logging.getLogger(__name__)


class GlitchSession:
    """Input/output buffer pair for one glitch run."""

    def __init__(self, input_buffer: PixelBuffer):
        # Private read-only copy; the caller keeps a writable buffer
        self.input = input_buffer.copy()
        self.input.pixels.flags.writeable = False
        self.output = input_buffer.copy()

    @classmethod
    def from_bytes(cls, data: bytes) -> "GlitchSession":
        """Decode image bytes. Raises DecodeError."""
        return cls(decode(data))

    @classmethod
    def open(cls, path, output_dir=None) -> "GlitchSession":
        """Preflight and decode an image file.

        Raises:
            FileNotFoundError, SafetyError, DecodeError
        """
        info = preflight(path, output_dir)
        session = cls.from_bytes(Path(info["path"]).read_bytes())
        logger.debug("Opened %s (%s, %.2fMB, %dx%d)", info["path"], info["format"],
                     info["size_mb"], session.width, session.height)
        return session

    @property
    def width(self) -> int:
        return self.input.width

    @property
    def height(self) -> int:
        return self.input.height

    def reset(self):
        """Make the output a fresh pixel-for-pixel copy of the input."""
        self.output.pixels[:] = self.input.pixels

    def apply(self, effect_name: str, rng=None, **params) -> PixelBuffer:
        """Apply a registry effect (or 'all') to the output in place."""
        from effects import apply_effect
        return apply_effect(self, effect_name, rng=rng, **params)

    def apply_all(self, rng=None) -> PixelBuffer:
        from effects import apply_all
        return apply_all(self, rng=rng)

    def encode(self, fmt: str = "PNG", quality: int | None = None) -> bytes:
        """Encode the output buffer. Raises EncodeError."""
        return encode(self.output, fmt, quality)

    def save(self, path, fmt: str | None = None, quality: int | None = None) -> Path:
        """Write the output buffer to disk. Raises EncodeError."""
        return save_image(self.output, path, fmt, quality)

    def __repr__(self):
        return f"GlitchSession({self.width}x{self.height})"
