"""
Shatter — Randomness Source
Stochastic effects take an explicit generator so tests can seed them.
"""

import numpy as np


def make_rng(seed: int | None = None) -> np.random.RandomState:
    """Create a generator. seed=None draws fresh OS entropy (every run differs)."""
    if seed is not None:
        seed = int(seed)
        if not 0 <= seed < 2 ** 32:
            raise ValueError(f"Seed must be 0 to 2**32 - 1, got {seed}")
    return np.random.RandomState(seed)


def ensure_rng(rng=None) -> np.random.RandomState:
    """Return rng unchanged, or a fresh unseeded generator when None."""
    if rng is None:
        return make_rng()
    return rng
