"""
Shatter — Destruction Effects
Codec-level damage: recompress the image and wash the artifacts back over it.
"""

import logging

from PIL import Image

from core.buffer import PixelBuffer
from core.codec import decode, encode
from core.rng import ensure_rng

logger = logging.getLogger(__name__)


def compression_ghost(session, rng=None):
    """Overlay a low-quality JPEG copy of the image under a translucent white wash.

    Quality is drawn from 1-10 and the white opacity from 0-255. The white
    layer is composited over the recompressed pixels, and that result is
    composited over the output (standard src-over).

    Args:
        session: GlitchSession (output is modified).
        rng: numpy RandomState. None = unseeded.

    Raises:
        EncodeError / DecodeError: the JPEG round trip failed.
    """
    rng = ensure_rng(rng)
    output = session.output
    quality = rng.randint(1, 11)
    opacity = rng.randint(0, 256)
    logger.debug("compression_ghost quality=%d opacity=%d", quality, opacity)

    compressed = decode(encode(output, "JPEG", quality))
    if compressed.size != output.size:
        raise ValueError(
            f"Recompressed image is {compressed.size}, expected {output.size}"
        )

    white = Image.new("RGBA", output.size, (255, 255, 255, opacity))
    overlay = Image.alpha_composite(compressed.to_image(), white)
    result = Image.alpha_composite(output.to_image(), overlay)

    output.pixels[:] = PixelBuffer.from_image(result).pixels
    return output
