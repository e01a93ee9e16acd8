"""
Shatter — Channel Shift Effects
Rotates the RGB channel order of every pixel. Alpha is untouched.
"""

import numpy as np

# Source channel for each output channel (R, G, B)
_LEFT_ORDER = [1, 2, 0]    # (R, G, B) -> (G, B, R)
_RIGHT_ORDER = [2, 0, 1]   # (R, G, B) -> (B, R, G)


def _rotate_channels(pixels: np.ndarray, order: list) -> None:
    pixels[:, :, :3] = pixels[:, :, order]


def channel_shift_left(session):
    """Rotate channels left: (R, G, B) becomes (G, B, R)."""
    _rotate_channels(session.output.pixels, _LEFT_ORDER)
    return session.output


def channel_shift_right(session):
    """Rotate channels right: (R, G, B) becomes (B, R, G).

    Undoes channel_shift_left exactly.
    """
    _rotate_channels(session.output.pixels, _RIGHT_ORDER)
    return session.output
