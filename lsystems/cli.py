"""cli.py

Command-line runner.

Run:
  python -m lsystems render example/koch.json koch.svg
  python -m lsystems validate example/koch.json
  python -m lsystems examples --list
  python -m lsystems examples dragon-curve --output-dir renders
  python -m lsystems --help

Set LSYSTEMS_DEBUG=1 (or pass -v) for debug logging.
"""

from __future__ import annotations

import argparse
import itertools
import logging
import os
import sys

from .atoms import from_string
from .config import (
    build_rule_table,
    compute_figure,
    debug_enabled,
    initial_pen_state,
    load_config,
)
from .errors import ConfigError, LSystemError
from .examples import ALL_EXAMPLES
from .productions import stream_expand
from .svg import write_svg
from .turtle import execute

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s: %(name)s: %(message)s"


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose or debug_enabled() else logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT)


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="lsystems",
        description="Expand L-systems and draw them with a turtle as SVG.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    p.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging."
    )

    sub = p.add_subparsers(dest="cmd", required=True)

    pr = sub.add_parser("render", help="Render a JSON figure config to SVG.")
    pr.add_argument("config", help="Path to the input JSON config.")
    pr.add_argument("output", help="Path to write the SVG output.")

    pv = sub.add_parser(
        "validate", help="Validate a JSON config and print a brief summary."
    )
    pv.add_argument("config", help="Path to the input JSON config.")

    pe = sub.add_parser("examples", help="List or render the built-in examples.")
    pe.add_argument("names", nargs="*", help="Examples to render.")
    pe.add_argument("--list", action="store_true", help="List the examples.")
    pe.add_argument("--all", action="store_true", help="Render every example.")
    pe.add_argument(
        "--output-dir",
        default="example-renders",
        help="Directory for rendered examples (default: example-renders).",
    )

    return p


# -------------------------
# Commands
# -------------------------


def cmd_render(config_path: str, output_path: str) -> None:
    logger.debug("rendering %s -> %s", config_path, output_path)
    cfg = load_config(config_path)
    segments = compute_figure(cfg)
    write_svg(
        segments,
        output_path,
        width=cfg.width,
        height=cfg.height,
        style=cfg.style,
        title=cfg.name,
    )


_VALIDATE_SYMBOL_LIMIT = 10_000


def cmd_validate(config_path: str) -> None:
    cfg = load_config(config_path)

    print(f"name: {cfg.name}")
    print(f"axiom length: {len(cfg.axiom)}")
    print(f"iterations: {cfg.iterations}")
    print(f"rules: {len(cfg.rules)}")
    print(
        "turtle: "
        f"angle={cfg.angle} step={cfg.step} "
        f"start=({cfg.start_x},{cfg.start_y},{cfg.facing}deg)"
    )
    commands = "standard" if cfg.commands is None else str(len(cfg.commands))
    print(f"commands: {commands}")
    print(f"canvas: {cfg.width}x{cfg.height} padding={cfg.padding} fit={cfg.fit}")

    # Run a bounded expansion + interpretation to catch render-time failures
    # (unbalanced push/pop, no drawable geometry, exponential blow-up).
    raw = stream_expand(cfg.productions, from_string(cfg.axiom), cfg.iterations)
    bounded = list(itertools.islice(raw, _VALIDATE_SYMBOL_LIMIT))
    truncated = len(bounded) == _VALIDATE_SYMBOL_LIMIT
    rules = build_rule_table(cfg.commands, step=cfg.step, angle=cfg.angle)
    final = execute(bounded, rules, initial_pen_state(cfg))
    sym_label = f"{len(bounded)}+" if truncated else str(len(bounded))
    print(f"symbols (sampled): {sym_label}")
    print(f"segments: {final.line_count}")
    if truncated:
        print(
            f"warning: expansion exceeds {_VALIDATE_SYMBOL_LIMIT} symbols; "
            "geometry stats are based on the first portion only"
        )
    if final.line_count == 0:
        raise ConfigError("Config produces no drawable geometry")


def cmd_examples(
    names: list[str], list_only: bool, render_all: bool, output_dir: str
) -> None:
    if list_only or not (names or render_all):
        print("examples:")
        for name in ALL_EXAMPLES:
            print(name)
        return

    chosen = list(ALL_EXAMPLES) if render_all else names
    unknown = [n for n in chosen if n not in ALL_EXAMPLES]
    if unknown:
        raise ConfigError(f"example(s) not found: {', '.join(unknown)}")

    for name in chosen:
        print(f"running example: {name}...")
        drawing = ALL_EXAMPLES[name]()
        write_svg(
            drawing.segments,
            os.path.join(output_dir, f"{name}.svg"),
            width=drawing.width,
            height=drawing.height,
            style=drawing.style,
            title=drawing.title,
        )


def main(argv: list[str] | None = None) -> int:
    ap = build_argparser()
    args = ap.parse_args(argv)
    configure_logging(args.verbose)

    try:
        if args.cmd == "render":
            cmd_render(args.config, args.output)
        elif args.cmd == "validate":
            cmd_validate(args.config)
        elif args.cmd == "examples":
            cmd_examples(args.names, args.list, args.all, args.output_dir)
        else:
            raise AssertionError("unreachable")
    except ConfigError as e:
        print(f"Config error: {e}", file=sys.stderr)
        return 2
    except LSystemError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except OSError as e:
        print(f"File error: {e}", file=sys.stderr)
        return 2
    return 0
