"""
Shatter — Effects Registry
Maps effect names to functions and default params, and dispatches them.
Every effect is a function: (session, [rng,] **params) -> PixelBuffer,
mutating session.output in place.
"""

import logging

from core.rng import ensure_rng
from effects.channelshift import channel_shift_left, channel_shift_right
from effects.distortion import (
    transpose_input,
    vertical_transpose_input,
    half_life_right,
    prism_burst,
)
from effects.texture import noise
from effects.destruction import compression_ghost

logger = logging.getLogger(__name__)


def copy_input(session):
    """Reset the output to a plain copy of the input."""
    session.reset()
    return session.output


# Master registry: name -> function, default params, description
EFFECTS = {
    # === UTILITY ===
    "copy": {
        "fn": copy_input,
        "category": "utility",
        "params": {},
        "stochastic": False,
        "description": "No effect, re-encode the input as-is",
    },

    # === GLITCH ===
    "transpose_input": {
        "fn": transpose_input,
        "category": "glitch",
        "params": {"height": 50, "width": 100, "transpose": True},
        "stochastic": False,
        "description": "Roll alternating horizontal bands sideways (torn scanlines)",
    },
    "vertical_transpose_input": {
        "fn": vertical_transpose_input,
        "category": "glitch",
        "params": {"width": 30, "height": 80, "transpose": True},
        "stochastic": False,
        "description": "Roll alternating vertical stripes upward",
    },

    # === COLOR ===
    "channel_shift_left": {
        "fn": channel_shift_left,
        "category": "color",
        "params": {},
        "stochastic": False,
        "description": "Rotate RGB channels left (R,G,B -> G,B,R)",
    },
    "channel_shift_right": {
        "fn": channel_shift_right,
        "category": "color",
        "params": {},
        "stochastic": False,
        "description": "Rotate RGB channels right (R,G,B -> B,R,G)",
    },

    # === DISTORTION ===
    "half_life_right": {
        "fn": half_life_right,
        "category": "distortion",
        "params": {"strikes": 1000, "length": 1000},
        "stochastic": True,
        "description": "Random light streaks smeared rightward with decaying color (length<0 = to edge)",
    },
    "prism_burst": {
        "fn": prism_burst,
        "category": "distortion",
        "params": {},
        "stochastic": True,
        "description": "Chromatic burst: each channel pulled from a different diagonal",
    },

    # === TEXTURE ===
    "noise": {
        "fn": noise,
        "category": "texture",
        "params": {"r": 0.75, "g": 0.75, "b": 0.75, "a": 0.2},
        "stochastic": True,
        "description": "Per-pixel random color blended in (a = max blend fraction)",
    },

    # === DESTRUCTION ===
    "compression_ghost": {
        "fn": compression_ghost,
        "category": "destruction",
        "params": {},
        "stochastic": True,
        "description": "Low-quality JPEG copy washed back over the image with translucent white",
    },
}

# Pseudo-effect name that runs ALL_SEQUENCE
ALL_EFFECT = "all"

# Fixed order for the "all" pass; each step sees the previous step's output
ALL_SEQUENCE = [
    "transpose_input",
    "vertical_transpose_input",
    "channel_shift_left",
    "channel_shift_right",
    "half_life_right",
    "prism_burst",
    "noise",
    "compression_ghost",
]

# Category display order and labels
CATEGORIES = {
    "glitch": "GLITCH",
    "color": "COLOR",
    "distortion": "DISTORTION",
    "texture": "TEXTURE",
    "destruction": "DESTRUCTION",
    "utility": "UTILITY",
}


def effect_names() -> list[str]:
    """All names accepted by apply_effect, including 'all'."""
    return list(EFFECTS.keys()) + [ALL_EFFECT]


def get_effect(name: str):
    """Get an effect by name. Returns (fn, default_params).

    Raises ValueError if effect doesn't exist.
    """
    if name not in EFFECTS:
        available = ", ".join(sorted(EFFECTS.keys()))
        raise ValueError(f"Unknown effect: {name}. Available: {available}")
    entry = EFFECTS[name]
    return entry["fn"], entry["params"].copy()


def describe_effect(name: str) -> dict:
    """Listing record for one registry entry."""
    entry = EFFECTS[name]
    return {
        "name": name,
        "category": entry["category"],
        "description": entry["description"],
        "params": dict(entry["params"]),
        "stochastic": entry["stochastic"],
    }


def list_effects(category: str | None = None) -> list[dict]:
    """Effects in category display order (registry order within a category)."""
    order = list(CATEGORIES)
    names = sorted(EFFECTS, key=lambda n: order.index(EFFECTS[n]["category"]))
    return [describe_effect(n) for n in names
            if category is None or EFFECTS[n]["category"] == category]


def search_effects(query: str) -> list[dict]:
    """Effects whose name, category and description together contain every word of query."""
    words = query.lower().split()
    results = []
    for record in list_effects():
        text = " ".join((record["name"], record["category"], record["description"])).lower()
        if all(w in text for w in words):
            results.append(record)
    return results


def apply_effect(session, effect_name: str, rng=None, **params):
    """Apply a named effect to the session's output buffer.

    Args:
        session: GlitchSession whose output is mutated in place.
        effect_name: Registry name, or 'all' for the full sequence.
        rng: numpy RandomState for stochastic effects. None = unseeded.
        **params: Overrides for the effect's default params.

    Returns:
        The session's output buffer.
    """
    if effect_name == ALL_EFFECT:
        if params:
            raise ValueError(f"'{ALL_EFFECT}' takes no params, got: {', '.join(sorted(params))}")
        return apply_all(session, rng=rng)

    fn, defaults = get_effect(effect_name)
    unknown = set(params) - set(defaults)
    if unknown:
        valid = ", ".join(sorted(defaults)) or "none"
        raise ValueError(
            f"Unknown param(s) for {effect_name}: {', '.join(sorted(unknown))}. Valid: {valid}"
        )
    merged = {**defaults, **params}

    logger.debug("Applying %s %s", effect_name, merged)
    if EFFECTS[effect_name]["stochastic"]:
        return fn(session, rng=ensure_rng(rng), **merged)
    return fn(session, **merged)


def apply_all(session, rng=None):
    """Run every effect in ALL_SEQUENCE with default params, sharing one generator."""
    rng = ensure_rng(rng)
    for name in ALL_SEQUENCE:
        apply_effect(session, name, rng=rng)
    return session.output
