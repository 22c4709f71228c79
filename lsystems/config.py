"""config.py

JSON figure descriptions: an L-system, its turtle interpretation and the
canvas it should be fitted to.

Minimal example (Koch curve):

    {
      "axiom": "F",
      "iterations": 4,
      "rules": {"F": "F+F--F+F"},
      "turtle": {"angle": 60, "step": 10}
    }

Without turtle.commands the standard alphabet is used (F, f, +, -, [, ]).
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from functools import partial
from typing import Any, cast

from .atoms import Atom, as_atom, from_string
from .errors import ConfigError, _require
from .fitting import fit_line_segments
from .productions import ProductionTable, nth_step, stream_expand
from .turtle import (
    LineSegment,
    PenState,
    Rule,
    execute,
    forward,
    move,
    new_pen_state,
    pen_down,
    pen_up,
    pop_pos_and_angle,
    push_pos_and_angle,
    rotate,
    standard_rule_set,
)

logger = logging.getLogger(__name__)

DEBUG_ENV_VAR = "LSYSTEMS_DEBUG"


# -------------------------
# Validation
# -------------------------


def _as_float(x: Any, path: str) -> float:
    _require(
        isinstance(x, (int, float)) and not isinstance(x, bool),
        f"{path} must be a number",
    )
    return float(x)


def _as_int(x: Any, path: str) -> int:
    _require(
        isinstance(x, int) and not isinstance(x, bool), f"{path} must be an integer"
    )
    return int(x)


def _as_str(x: Any, path: str) -> str:
    _require(isinstance(x, str), f"{path} must be a string")
    return cast(str, x)


def _as_bool(x: Any, path: str) -> bool:
    _require(isinstance(x, bool), f"{path} must be a boolean")
    return cast(bool, x)


def _as_dict(x: Any, path: str) -> dict[str, Any]:
    _require(isinstance(x, dict), f"{path} must be an object")
    return cast(dict[str, Any], x)


# -------------------------
# Config model
# -------------------------


@dataclass(frozen=True)
class Style:
    stroke: str = "#000"
    stroke_width: float = 1.0
    background: str | None = "white"
    linecap: str = "round"


@dataclass(frozen=True)
class FigureConfig:
    name: str
    axiom: str
    iterations: int
    rules: dict[str, str]

    angle: float
    step: float
    start_x: int
    start_y: int
    facing: float

    # symbol -> action dict; None means the standard rule set
    commands: dict[str, dict[str, Any]] | None

    width: int
    height: int
    padding: float
    fit: bool
    style: Style

    max_length: int | None = None

    @property
    def productions(self) -> ProductionTable:
        return ProductionTable(self.rules)


def parse_config(obj: Any) -> FigureConfig:
    obj = _as_dict(obj, "root")

    name = _as_str(obj.get("name", "L-system"), "name")
    axiom = _as_str(obj.get("axiom", ""), "axiom")
    _require(len(axiom) > 0, "axiom must be non-empty")

    iterations = _as_int(obj.get("iterations", 0), "iterations")
    _require(iterations >= 0, "iterations must be >= 0")

    rules_obj = _as_dict(obj.get("rules", {}), "rules")
    rules: dict[str, str] = {}
    for k, v in rules_obj.items():
        _require(len(k) == 1, "rules keys must be single-character strings")
        rules[k] = _as_str(v, f"rules['{k}']")

    turtle = _as_dict(obj.get("turtle", {}), "turtle")
    angle = _as_float(turtle.get("angle", 90), "turtle.angle")
    step = _as_float(turtle.get("step", 10), "turtle.step")
    _require(step > 0, "turtle.step must be > 0")

    start = _as_dict(turtle.get("start", {}), "turtle.start")
    start_x = _as_int(start.get("x", 0), "turtle.start.x")
    start_y = _as_int(start.get("y", 0), "turtle.start.y")
    facing = _as_float(start.get("facing", 0), "turtle.start.facing")

    commands: dict[str, dict[str, Any]] | None = None
    if "commands" in turtle:
        commands_obj = _as_dict(turtle["commands"], "turtle.commands")
        commands = {}
        for sym, action in commands_obj.items():
            _require(
                len(sym) == 1,
                "turtle.commands keys must be single-character strings",
            )
            commands[sym] = _as_dict(action, f"turtle.commands['{sym}']")
        # fail on bad actions now rather than halfway through a render
        build_rule_table(commands, step=step, angle=angle)

    canvas = _as_dict(obj.get("canvas", {}), "canvas")
    width = _as_int(canvas.get("width", 600), "canvas.width")
    height = _as_int(canvas.get("height", 600), "canvas.height")
    _require(width > 0, "canvas.width must be > 0")
    _require(height > 0, "canvas.height must be > 0")
    padding = _as_float(canvas.get("padding", 50), "canvas.padding")
    _require(padding >= 0, "canvas.padding must be >= 0")
    _require(
        max(width, height) - 2 * padding > 0,
        "canvas.padding leaves no room for the figure",
    )
    fit = _as_bool(canvas.get("fit", True), "canvas.fit")

    style_obj = _as_dict(obj.get("style", {}), "style")
    background = style_obj.get("background", "white")
    if background is not None:
        background = _as_str(background, "style.background")
    style = Style(
        stroke=_as_str(style_obj.get("stroke", "#000"), "style.stroke"),
        stroke_width=_as_float(
            style_obj.get("stroke_width", 1.0), "style.stroke_width"
        ),
        background=background,
        linecap=_as_str(style_obj.get("linecap", "round"), "style.linecap"),
    )

    max_length = obj.get("max_length")
    if max_length is not None:
        max_length = _as_int(max_length, "max_length")
        _require(max_length > 0, "max_length must be > 0")

    return FigureConfig(
        name=name,
        axiom=axiom,
        iterations=iterations,
        rules=rules,
        angle=angle,
        step=step,
        start_x=start_x,
        start_y=start_y,
        facing=facing,
        commands=commands,
        width=width,
        height=height,
        padding=padding,
        fit=fit,
        style=style,
        max_length=max_length,
    )


def load_json(path: str) -> dict[str, Any]:
    with open(path, encoding="utf-8") as f:
        try:
            return cast(dict[str, Any], json.load(f))
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in {path}: {e}") from e


def load_config(path: str) -> FigureConfig:
    return parse_config(load_json(path))


def debug_enabled(environ: Mapping[str, str] | None = None) -> bool:
    """True when LSYSTEMS_DEBUG is set to anything but an empty/false value."""
    value = (os.environ if environ is None else environ).get(DEBUG_ENV_VAR, "")
    return value.strip().lower() not in ("", "0", "false", "no")


# -------------------------
# Command tables
# -------------------------


def _action_rule(
    sym: str, action: Mapping[str, Any], step: float, angle: float
) -> Rule:
    atype = action.get("type")
    _require(
        isinstance(atype, str), f"command for '{sym}' must have string field 'type'"
    )

    if atype == "forward":
        draw = action.get("draw", True)
        _require(
            isinstance(draw, bool),
            f"forward command for '{sym}' field 'draw' must be a boolean",
        )
        dist = step * _as_float(action.get("step", 1), f"command '{sym}'.step")
        return partial(forward if draw else move, distance=dist)

    if atype == "turn":
        direction = action.get("direction")
        _require(
            direction in (-1, 1) and not isinstance(direction, bool),
            f"turn command for '{sym}' must have direction -1 or 1",
        )
        mult = _as_float(action.get("angle", 1), f"command '{sym}'.angle")
        # +1 turns counter-clockwise on screen, like the standard '+'
        return partial(rotate, by_angle=-direction * mult * angle)

    if atype == "turn_abs":
        deg = _as_float(action.get("angle"), f"command '{sym}'.angle")
        return partial(rotate, by_angle=deg)

    simple: dict[str, Rule] = {
        "push": push_pos_and_angle,
        "pop": pop_pos_and_angle,
        "pen_up": pen_up,
        "pen_down": pen_down,
        "noop": lambda s: s,
    }
    if atype in simple:
        return simple[atype]

    raise ConfigError(f"Unknown command type '{atype}' for symbol '{sym}'")


def build_rule_table(
    commands: Mapping[str, Mapping[str, Any]] | None, *, step: float, angle: float
) -> dict[Atom, Rule]:
    """Turn a JSON command table into a turtle rule table.

    Action types:
      - {"type": "forward", "draw": true|false, "step": <multiplier>}
      - {"type": "turn", "direction": +1|-1, "angle": <multiplier>}
      - {"type": "turn_abs", "angle": <degrees, positive is clockwise>}
      - {"type": "push"}, {"type": "pop"}
      - {"type": "pen_up"}, {"type": "pen_down"}
      - {"type": "noop"}
    """
    if commands is None:
        return standard_rule_set(step, angle)
    return {
        as_atom(sym): _action_rule(sym, action, step, angle)
        for sym, action in commands.items()
    }


# -------------------------
# Pipeline
# -------------------------


def initial_pen_state(cfg: FigureConfig) -> PenState:
    return new_pen_state(cfg.start_x, cfg.start_y, facing=cfg.facing)


def compute_figure(cfg: FigureConfig) -> list[LineSegment]:
    """Expand, interpret and (if cfg.fit) fit the configured figure."""
    table = cfg.productions
    axiom = from_string(cfg.axiom)
    if cfg.max_length is not None:
        # materialize generation by generation so the bound is checked early
        symbols: Any = nth_step(
            table, axiom, cfg.iterations, max_length=cfg.max_length
        )
    else:
        symbols = stream_expand(table, axiom, cfg.iterations)

    rules = build_rule_table(cfg.commands, step=cfg.step, angle=cfg.angle)
    final = execute(symbols, rules, initial_pen_state(cfg))
    segments = list(final.lines)
    logger.info("%s: %d segments", cfg.name, len(segments))

    if not cfg.fit:
        return segments
    return fit_line_segments(cfg.width, cfg.height, segments, padding=cfg.padding)
