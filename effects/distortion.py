"""
Shatter — Distortion Effects
Band transposes, half-life streaks, and the prism burst.
"""

import logging

import numpy as np

from core.buffer import MAXC, c, widen
from core.rng import ensure_rng

logger = logging.getLogger(__name__)


def transpose_input(session, height: int = 50, width: int = 100,
                    transpose: bool = True):
    """Roll alternating horizontal bands of the input sideways into the output.

    Args:
        session: GlitchSession (reads input, writes output).
        height: Band height in rows.
        width: Cyclic shift in columns. Output (x, y) takes input ((x + width) mod W, y).
        transpose: Whether the first band is shifted. Toggles after every band.

    Stops at the first shifted band that would run past the bottom edge;
    the rows below it keep their current output.
    """
    height = int(height)
    width = int(width)
    if height <= 0:
        raise ValueError(f"Band height must be positive, got {height}")

    src = session.input.pixels
    dst = session.output.pixels
    bounds_height = src.shape[0]
    cursor = 0

    while cursor < bounds_height:
        if transpose:
            nxt = cursor + height
            if nxt > bounds_height:
                break
            dst[cursor:nxt] = np.roll(src[cursor:nxt], -width, axis=1)
            cursor = nxt
        else:
            cursor += height
        transpose = not transpose

    return session.output


def vertical_transpose_input(session, width: int = 30, height: int = 80,
                             transpose: bool = True):
    """Roll alternating vertical stripes of the input up into the output.

    Args:
        session: GlitchSession (reads input, writes output).
        width: Stripe width in columns.
        height: Cyclic shift in rows. Output (x, y) takes input (x, (y + height) mod H).
        transpose: Whether the first stripe is shifted. Toggles after every stripe.

    Stops at the first shifted stripe that would run past the right edge.
    """
    width = int(width)
    height = int(height)
    if width <= 0:
        raise ValueError(f"Stripe width must be positive, got {width}")

    src = session.input.pixels
    dst = session.output.pixels
    bounds_width = src.shape[1]
    cursor = 0

    while cursor < bounds_width:
        if transpose:
            nxt = cursor + width
            if nxt > bounds_width:
                break
            dst[:, cursor:nxt] = np.roll(src[:, cursor:nxt], -height, axis=0)
            cursor = nxt
        else:
            cursor += width
        transpose = not transpose

    return session.output


def half_life_right(session, rng=None, strikes: int = 1000, length: int = 1000):
    """Smear random pixels rightward with an exponentially decaying color.

    Each strike starts at a random pixel and walks right, blending the running
    color 75/25 with whatever is already there and writing the result back.

    Args:
        session: GlitchSession (output is modified).
        rng: numpy RandomState. None = unseeded.
        strikes: Number of streaks.
        length: Maximum streak length in pixels. Negative = to the right edge.
    """
    rng = ensure_rng(rng)
    strikes = int(strikes)
    length = int(length)
    pixels = session.output.pixels
    bounds_height, bounds_width = pixels.shape[:2]

    for _ in range(strikes):
        x = rng.randint(0, bounds_width)
        y = rng.randint(0, bounds_height)
        streak_end = bounds_width if length < 0 else min(x + length, bounds_width)
        if streak_end <= x:
            continue

        # Only pixels behind the walk are rewritten, so the 25% share of
        # each pixel underneath can be taken from the row up front
        underneath = widen(pixels[y, x:streak_end]) // 4
        kc = pixels[y, x].copy()
        for i, quarter in enumerate(underneath):
            kc = c(widen(kc) * 3 // 4 + quarter)
            pixels[y, x + i] = kc

    return session.output


def prism_burst(session, rng=None):
    """Chromatic burst: each channel sampled from a different diagonal neighbour.

    Red comes from down-right, green from down-left, blue from up-right and
    alpha from up-left, all clamped at the edges. The sample is composited
    with the original pixel using a random 16-bit weight. Samples are read
    from the buffer as it was when the burst started.

    Args:
        session: GlitchSession (output is modified).
        rng: numpy RandomState. None = unseeded.
    """
    rng = ensure_rng(rng)
    pixels = session.output.pixels
    bounds_height, bounds_width = pixels.shape[:2]

    offset = rng.randint(1, max(1, bounds_height // 10) + 1)
    alpha = rng.randint(0, MAXC + 1)
    logger.debug("prism_burst offset=%d alpha=%d", offset, alpha)

    src = widen(pixels)
    ys = np.arange(bounds_height)
    xs = np.arange(bounds_width)
    y_down = np.minimum(ys + offset, bounds_height - 1)
    y_up = np.maximum(ys - offset, 0)
    x_right = np.minimum(xs + offset, bounds_width - 1)
    x_left = np.maximum(xs - offset, 0)

    sampled = np.empty_like(src)
    sampled[:, :, 0] = src[:, :, 0][np.ix_(y_down, x_right)]
    sampled[:, :, 1] = src[:, :, 1][np.ix_(y_down, x_left)]
    sampled[:, :, 2] = src[:, :, 2][np.ix_(y_up, x_right)]
    sampled[:, :, 3] = src[:, :, 3][np.ix_(y_up, x_left)]

    a = MAXC - (src[:, :, 3] * alpha // MAXC)
    out = (sampled * a[:, :, np.newaxis] + src * alpha) // MAXC
    pixels[:] = c(out)

    return session.output
