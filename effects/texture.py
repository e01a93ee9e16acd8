"""
Shatter — Texture Effects
Per-pixel color noise.
"""

import numpy as np

from core.rng import ensure_rng


def noise(session, rng=None, r: float = 0.75, g: float = 0.75,
          b: float = 0.75, a: float = 0.2):
    """Blend independent random color into every pixel.

    Args:
        session: GlitchSession (output is modified).
        rng: numpy RandomState. None = unseeded.
        r, g, b: Strength of the random target value per channel (0.0-1.0).
        a: Maximum per-pixel blend fraction (0.0-1.0). Alpha itself is untouched.

    Each RGB channel becomes orig * (1 - blend) + random * 255 * blend.
    """
    strengths = {"r": r, "g": g, "b": b, "a": a}
    for name, value in strengths.items():
        value = float(value)
        if not 0.0 <= value <= 1.0:
            raise ValueError(f"noise '{name}' must be 0.0-1.0, got {value}")
        strengths[name] = value

    rng = ensure_rng(rng)
    pixels = session.output.pixels
    h, w = pixels.shape[:2]

    targets = np.stack([
        rng.random_sample((h, w)) * strengths["r"],
        rng.random_sample((h, w)) * strengths["g"],
        rng.random_sample((h, w)) * strengths["b"],
    ], axis=2)
    blend = (rng.random_sample((h, w)) * strengths["a"])[:, :, np.newaxis]

    result = pixels[:, :, :3].astype(np.float64) * (1.0 - blend) + targets * 255.0 * blend
    pixels[:, :, :3] = np.clip(result, 0, 255).astype(np.uint8)

    return session.output
