"""
Shatter — Band Transpose Tests
Horizontal bands and vertical stripes: alternation, cyclic roll, early stop.

Run with: pytest tests/test_transpose.py -v
"""

import os
import sys

import numpy as np
import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from conftest import _make_session, _make_test_pixels
from effects.distortion import transpose_input, vertical_transpose_input


def _corners():
    """2x2 buffer with four distinct opaque colors."""
    pixels = np.zeros((2, 2, 4), dtype=np.uint8)
    pixels[0, 0] = [255, 0, 0, 255]
    pixels[0, 1] = [0, 255, 0, 255]
    pixels[1, 0] = [0, 0, 255, 255]
    pixels[1, 1] = [255, 255, 0, 255]
    return pixels


class TestVerticalTranspose:

    def test_two_by_two_rolls_first_column_only(self):
        original = _corners()
        session = _make_session(original)
        vertical_transpose_input(session, width=1, height=1, transpose=True)
        out = session.output.pixels
        # Column 0 rolled by one row (cyclic)
        np.testing.assert_array_equal(out[0, 0], original[1, 0])
        np.testing.assert_array_equal(out[1, 0], original[0, 0])
        # Column 1 skipped: flag toggled after column 0
        np.testing.assert_array_equal(out[:, 1], original[:, 1])

    def test_stripes_alternate(self):
        original = _make_test_pixels(64, 48)
        session = _make_session(original)
        vertical_transpose_input(session, width=8, height=5, transpose=True)
        out = session.output.pixels
        for start in range(0, 64, 8):
            stripe = slice(start, start + 8)
            if (start // 8) % 2 == 0:
                np.testing.assert_array_equal(out[:, stripe], np.roll(original[:, stripe], -5, axis=0))
            else:
                np.testing.assert_array_equal(out[:, stripe], original[:, stripe])

    def test_starting_flag_false_skips_first_stripe(self):
        original = _make_test_pixels(64, 48)
        session = _make_session(original)
        vertical_transpose_input(session, width=8, height=5, transpose=False)
        out = session.output.pixels
        np.testing.assert_array_equal(out[:, :8], original[:, :8])
        np.testing.assert_array_equal(out[:, 8:16], np.roll(original[:, 8:16], -5, axis=0))

    def test_partial_trailing_stripe_left_alone(self):
        original = _make_test_pixels(10, 12)
        session = _make_session(original)
        # Stripes: [0,4) shifted, [4,8) skipped, [8,12) would overflow -> stop
        vertical_transpose_input(session, width=4, height=3, transpose=True)
        out = session.output.pixels
        np.testing.assert_array_equal(out[:, :4], np.roll(original[:, :4], -3, axis=0))
        np.testing.assert_array_equal(out[:, 4:], original[:, 4:])

    def test_rejects_zero_width(self, gradient_session):
        with pytest.raises(ValueError):
            vertical_transpose_input(gradient_session, width=0, height=3)


class TestHorizontalTranspose:

    def test_bands_roll_left_by_width(self):
        original = _make_test_pixels(20, 12)
        session = _make_session(original)
        transpose_input(session, height=3, width=7, transpose=True)
        out = session.output.pixels
        for y in range(12):
            if (y // 3) % 2 == 0:
                for x in range(20):
                    np.testing.assert_array_equal(out[y, x], original[y, (x + 7) % 20])
            else:
                np.testing.assert_array_equal(out[y], original[y])

    def test_shift_larger_than_width_wraps(self):
        original = _make_test_pixels(20, 6)
        a = _make_session(original)
        b = _make_session(original)
        transpose_input(a, height=2, width=7)
        transpose_input(b, height=2, width=27)
        np.testing.assert_array_equal(a.output.pixels, b.output.pixels)

    def test_early_stop_when_band_overflows(self):
        original = _make_test_pixels(16, 10)
        session = _make_session(original)
        # Bands: [0,4) shifted, [4,8) skipped, [8,12) overflows -> rows 8-9 untouched
        transpose_input(session, height=4, width=3, transpose=True)
        out = session.output.pixels
        np.testing.assert_array_equal(out[:4], np.roll(original[:4], -3, axis=1))
        np.testing.assert_array_equal(out[4:], original[4:])

    def test_band_taller_than_image_is_noop(self, gradient_session):
        before = gradient_session.output.pixels.copy()
        transpose_input(gradient_session, height=1000, width=5)
        np.testing.assert_array_equal(gradient_session.output.pixels, before)

    def test_reads_from_input_not_output(self):
        original = _make_test_pixels(16, 8)
        session = _make_session(original)
        session.output.pixels[:] = 0
        transpose_input(session, height=2, width=1, transpose=True)
        out = session.output.pixels
        np.testing.assert_array_equal(out[0:2], np.roll(original[0:2], -1, axis=1))
        # Skipped band keeps what the output already held
        assert out[2:4].max() == 0

    def test_rejects_zero_height(self, gradient_session):
        with pytest.raises(ValueError):
            transpose_input(gradient_session, height=0, width=3)


class TestTransposeProperties:

    @pytest.mark.parametrize("fn,kwargs", [
        (transpose_input, {"height": 5, "width": 11, "transpose": True}),
        (vertical_transpose_input, {"width": 6, "height": 9, "transpose": False}),
    ])
    def test_deterministic_and_shape_preserving(self, fn, kwargs):
        a = _make_session(_make_test_pixels())
        b = _make_session(_make_test_pixels())
        fn(a, **kwargs)
        fn(b, **kwargs)
        assert a.output.pixels.shape == a.input.pixels.shape
        np.testing.assert_array_equal(a.output.pixels, b.output.pixels)

    def test_horizontal_rows_are_permutations(self):
        original = _make_test_pixels(30, 20)
        session = _make_session(original)
        transpose_input(session, height=4, width=13)
        out = session.output.pixels
        for y in range(20):
            assert sorted(map(tuple, out[y])) == sorted(map(tuple, original[y]))

    def test_vertical_columns_are_permutations(self):
        original = _make_test_pixels(30, 20)
        session = _make_session(original)
        vertical_transpose_input(session, width=5, height=7)
        out = session.output.pixels
        for x in range(30):
            assert sorted(map(tuple, out[:, x])) == sorted(map(tuple, original[:, x]))
