#!/usr/bin/env python3
"""
Shatter — Image Glitch Engine
CLI entry point. Also importable as a library.

Usage:
    python shatter.py apply photo.png --effect prism_burst
    python shatter.py apply photo.png --effect transpose_input --params height=20 width=40
    python shatter.py apply photo.png --effect all --seed 7 --format jpeg
    python shatter.py list-effects
    python shatter.py info noise
    python shatter.py search streak
"""

import sys
import os
import math
import logging
import argparse
from pathlib import Path

# Add project root to path so imports work
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from core.codec import CodecError, normalize_format
from core.rng import make_rng
from core.safety import SafetyError
from core.session import GlitchSession
from effects import (
    list_effects, search_effects, describe_effect, effect_names,
    EFFECTS, CATEGORIES, ALL_EFFECT, ALL_SEQUENCE,
)

__version__ = "0.1.0"

DEFAULT_OUTPUT_DIR = "pngs"
OUTPUT_FORMATS = {"png": "PNG", "jpeg": "JPEG"}
OUTPUT_SUFFIXES = {"PNG": ".png", "JPEG": ".jpg"}


def _coerce_param(effect: str, key: str, raw: str):
    """Parse a --params value as the type of the effect's default for that key."""
    defaults = EFFECTS[effect]["params"]
    if key not in defaults:
        valid = ", ".join(defaults) or "none"
        raise ValueError(f"{effect} has no param '{key}'. Valid: {valid}")

    default = defaults[key]
    text = raw.strip().lower()
    if isinstance(default, bool):
        if text in ("true", "yes", "on", "1"):
            return True
        if text in ("false", "no", "off", "0"):
            return False
        raise ValueError(f"{key} expects true/false, got '{raw}'")

    try:
        value = type(default)(text)
    except ValueError:
        raise ValueError(f"{key} expects {type(default).__name__}, got '{raw}'") from None
    if not math.isfinite(value):
        raise ValueError(f"{key} must be finite, got '{raw}'")
    return value


def _parse_params(effect: str, pairs) -> dict:
    if pairs and effect == ALL_EFFECT:
        raise ValueError(f"'{ALL_EFFECT}' runs every effect with its defaults and takes no params")
    params = {}
    for p in pairs or []:
        if "=" not in p:
            raise ValueError(f"Param must be key=value, got '{p}'")
        key, val = p.split("=", 1)
        params[key.strip()] = _coerce_param(effect, key.strip(), val)
    return params


def _format_params(params: dict) -> str:
    return " ".join(f"{k}={str(v).lower() if isinstance(v, bool) else v}"
                    for k, v in params.items())


def _suggest(name: str) -> str:
    matches = [n for n in effect_names() if name in n]
    if matches:
        return f"Unknown effect: {name}. Did you mean: {', '.join(matches)}?"
    return f"Unknown effect: {name}. Use 'shatter list-effects' to see all."


def output_path_for(effect: str, output_dir, fmt: str) -> Path:
    """Output file path: <output_dir>/output_<effect>.<ext>."""
    return Path(output_dir) / f"output_{effect}{OUTPUT_SUFFIXES[fmt]}"


def cmd_apply(args):
    """Glitch an image with one effect (or 'all') and write the result."""
    if args.effect not in effect_names():
        print(_suggest(args.effect), file=sys.stderr)
        print("No image saved due to invalid effect.", file=sys.stderr)
        return 1

    params = _parse_params(args.effect, args.params)
    fmt = normalize_format(OUTPUT_FORMATS[args.format])
    output_dir = Path(args.output_dir)

    session = GlitchSession.open(args.file, output_dir=output_dir)
    print(f"Loaded {args.file} ({session.width}x{session.height})")

    if args.effect == ALL_EFFECT:
        print(f"Applying: {' > '.join(ALL_SEQUENCE)}")
    else:
        print(f"Applying: {args.effect} {_format_params({**EFFECTS[args.effect]['params'], **params})}")
    session.apply(args.effect, rng=make_rng(args.seed), **params)

    quality = args.quality if fmt == "JPEG" else None
    output_dir.mkdir(parents=True, exist_ok=True)
    path = session.save(output_path_for(args.effect, output_dir, fmt), fmt, quality)
    print(f"Output: {path}")
    return 0


def _print_effects(records, with_params=True):
    """One line per effect under category headings; '*' marks random effects."""
    heading = None
    for r in records:
        if r["category"] != heading:
            heading = r["category"]
            print(f"\n{CATEGORIES[heading]}")
        mark = "*" if r["stochastic"] else " "
        print(f" {mark} {r['name']:26s} {r['description']}")
        if with_params and r["params"]:
            print(f"   {'':26s} {_format_params(r['params'])}")


def cmd_list_effects(args):
    _print_effects(list_effects(args.category), with_params=not args.compact)
    print("\n* random, use --seed to repeat")
    if args.category is None:
        print(f"'{ALL_EFFECT}' runs: {' > '.join(ALL_SEQUENCE)}")
    return 0


def cmd_info(args):
    name = args.effect_name
    if name not in EFFECTS:
        print(_suggest(name))
        return 1
    _print_effects([describe_effect(name)])
    params = _format_params(EFFECTS[name]["params"])
    print(f"\n  shatter apply photo.png -e {name}" + (f" --params {params}" if params else ""))
    return 0


def cmd_search(args):
    query = " ".join(args.query)
    results = search_effects(query)
    if not results:
        print(f"No effects matching '{query}'.")
        return 0
    _print_effects(results, with_params=False)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shatter",
        description="Shatter — Image Glitch Engine",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command")

    # apply
    p = sub.add_parser("apply", help="Apply an effect to an image")
    p.add_argument("file", help="Input image")
    p.add_argument("-e", "--effect", required=True, help=f"Effect name, or '{ALL_EFFECT}'")
    p.add_argument("--params", nargs="*", help="Effect params as key=value pairs")
    p.add_argument("--seed", type=int, help="Random seed (default: different every run)")
    p.add_argument("-o", "--output-dir", default=DEFAULT_OUTPUT_DIR, help="Output directory")
    p.add_argument("--format", choices=sorted(OUTPUT_FORMATS), default="png", help="Output format")
    p.add_argument("--quality", type=int, default=None, help="JPEG quality 1-100 (default 80)")

    # list-effects
    p = sub.add_parser("list-effects", help="List all available effects")
    p.add_argument("--category", choices=list(CATEGORIES), help="Filter by category")
    p.add_argument("--compact", action="store_true", help="Hide default params")

    # info
    p = sub.add_parser("info", help="Show detailed info about an effect")
    p.add_argument("effect_name", help="Effect name")

    # search
    p = sub.add_parser("search", help="Search effects by name or description")
    p.add_argument("query", nargs="+", help="Search words (all must match)")

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    commands = {
        "apply": cmd_apply,
        "list-effects": cmd_list_effects,
        "info": cmd_info,
        "search": cmd_search,
    }

    if args.command not in commands:
        parser.print_help()
        return 0
    try:
        return commands[args.command](args)
    except (SafetyError, CodecError, ValueError, OSError) as e:
        logging.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
