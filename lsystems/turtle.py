"""turtle.py

Turtle graphics over L-system sequences.

The central value is the PenState from new_pen_state(): the pen position and
facing, whether the pen is down, a stack for saving and restoring position
and facing, and the line segments drawn so far. Every operation returns a new
PenState; none mutates its argument.

Coordinates are screen coordinates: (0, 0) is top left, x grows rightward and
y grows downward. Facing is measured in degrees clockwise from north, so a
pen facing 0 moves toward decreasing y.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field, replace
from typing import Any, NamedTuple

from .atoms import Atom, AtomLike, as_atom, as_sequence
from .errors import (
    ConfigError,
    InterpretationError,
    StackUnderflowError,
    _require,
)

logger = logging.getLogger(__name__)

Point = tuple[float, float]

DEG_TO_RAD = math.pi / 180.0


class LineSegment(NamedTuple):
    start: Point
    end: Point


class PosAndAngle(NamedTuple):
    x: float
    y: float
    facing: float


def new_line_segment(
    from_x: float, from_y: float, to_x: float, to_y: float
) -> LineSegment:
    return LineSegment((from_x, from_y), (to_x, to_y))


@dataclass(frozen=True, eq=False, repr=False)
class _Link:
    """Cell of an immutable singly linked list; head is the newest item."""

    head: Any
    tail: _Link | None


def _unwind(link: _Link | None) -> tuple[Any, ...]:
    items = []
    while link is not None:
        items.append(link.head)
        link = link.tail
    items.reverse()
    return tuple(items)


@dataclass(frozen=True, eq=False)
class PenState:
    x: float
    y: float
    facing: float = 0.0
    pen_is_down: bool = True
    continue_segment: bool = False
    # newest line / newest snapshot first; shared between successive states
    line_chain: _Link | None = field(default=None, repr=False)
    stack_chain: _Link | None = field(default=None, repr=False)
    line_count: int = 0
    stack_depth: int = 0

    @property
    def position(self) -> Point:
        return (self.x, self.y)

    @property
    def lines(self) -> tuple[LineSegment, ...]:
        """Segments in the order they were drawn."""
        return _unwind(self.line_chain)

    @property
    def stack(self) -> tuple[PosAndAngle, ...]:
        """Saved snapshots, bottom first."""
        return _unwind(self.stack_chain)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PenState):
            return NotImplemented
        return (
            get_pos_and_angle(self) == get_pos_and_angle(other)
            and self.pen_is_down == other.pen_is_down
            and self.continue_segment == other.continue_segment
            and self.lines == other.lines
            and self.stack == other.stack
        )


def new_pen_state(
    x: int, y: int, *, facing: float = 0.0, pen_is_down: bool = True
) -> PenState:
    """Create a pen at integer screen position (x, y)."""
    for label, v in (("x", x), ("y", y)):
        _require(
            isinstance(v, int) and not isinstance(v, bool),
            f"{label} must be an integer, got {v!r}",
        )
    _require(
        isinstance(facing, (int, float)) and not isinstance(facing, bool),
        f"facing must be a number, got {facing!r}",
    )
    return PenState(x=x, y=y, facing=facing, pen_is_down=bool(pen_is_down))


def get_pos_and_angle(pen_state: PenState) -> PosAndAngle:
    return PosAndAngle(pen_state.x, pen_state.y, pen_state.facing)


# -------------------------
# Pen operations
# -------------------------


def forward(pen_state: PenState, distance: float) -> PenState:
    """Move the pen along its facing, drawing if the pen is down.

    A forward move that directly follows another drawn forward move extends
    the previous segment instead of starting a new one.
    """
    rad = pen_state.facing * DEG_TO_RAD
    new_x = pen_state.x + math.sin(rad) * distance
    new_y = pen_state.y - math.cos(rad) * distance

    if not pen_state.pen_is_down:
        return replace(pen_state, x=new_x, y=new_y, continue_segment=False)

    chain = pen_state.line_chain
    count = pen_state.line_count
    if pen_state.continue_segment and chain is not None:
        last = chain.head
        chain = _Link(LineSegment(last.start, (new_x, new_y)), chain.tail)
    else:
        chain = _Link(
            new_line_segment(pen_state.x, pen_state.y, new_x, new_y), chain
        )
        count += 1

    return replace(
        pen_state,
        x=new_x,
        y=new_y,
        line_chain=chain,
        line_count=count,
        continue_segment=True,
    )


def move(pen_state: PenState, distance: float) -> PenState:
    """Move forward without drawing, leaving the pen as it was."""
    moved = forward(pen_up(pen_state), distance)
    return replace(moved, pen_is_down=pen_state.pen_is_down)


def rotate(pen_state: PenState, by_angle: float) -> PenState:
    return replace(
        pen_state, facing=pen_state.facing + by_angle, continue_segment=False
    )


def pen_up(pen_state: PenState) -> PenState:
    """Forward will only move the pen, without drawing."""
    return replace(pen_state, pen_is_down=False)


def pen_down(pen_state: PenState) -> PenState:
    return replace(pen_state, pen_is_down=True)


def push_pos_and_angle(pen_state: PenState) -> PenState:
    return replace(
        pen_state,
        stack_chain=_Link(get_pos_and_angle(pen_state), pen_state.stack_chain),
        stack_depth=pen_state.stack_depth + 1,
        continue_segment=False,
    )


def pop_pos_and_angle(pen_state: PenState) -> PenState:
    """Restore the most recently pushed position and facing."""
    if pen_state.stack_chain is None:
        raise StackUnderflowError(
            "pop with an empty stack (unbalanced push/pop in the rules)"
        )
    saved = pen_state.stack_chain.head
    return replace(
        pen_state,
        x=saved.x,
        y=saved.y,
        facing=saved.facing,
        stack_chain=pen_state.stack_chain.tail,
        stack_depth=pen_state.stack_depth - 1,
        continue_segment=False,
    )


# -------------------------
# Interpreter
# -------------------------

Rule = Callable[[PenState], PenState]
RuleTable = Mapping[AtomLike, Rule]


def execute(
    state: AtomLike | Iterable[AtomLike], rules: RuleTable, pen_state: PenState
) -> PenState:
    """Run every atom of state through its rule, in order.

    Atoms without a rule leave the pen unchanged. state may be any iterable
    of atoms, including the generator returned by stream_expand; a plain
    string is read one character at a time.

    Any exception raised by a rule is re-raised as InterpretationError with
    the atom and its position.
    """
    table: dict[Atom, Rule] = {as_atom(k): fn for k, fn in rules.items()}
    if isinstance(state, (Atom, int)):
        state = as_sequence(state)

    for index, item in enumerate(state):
        atom = as_atom(item)
        fn = table.get(atom)
        if fn is None:
            continue
        try:
            pen_state = fn(pen_state)
        except InterpretationError:
            # a rule that itself calls execute already located the failure
            raise
        except Exception as e:
            raise InterpretationError(atom, index, e) from e

    logger.debug(
        "executed sequence: %d segments, stack depth %d",
        pen_state.line_count,
        pen_state.stack_depth,
    )
    return pen_state


def standard_rule_set(distance: float, angle: float) -> dict[Atom, Rule]:
    """The usual turtle alphabet.

    F draws forward, f moves forward without drawing, + turns
    counter-clockwise and - clockwise by angle, [ and ] push and pop the
    pen position and facing.
    """
    for label, v in (("distance", distance), ("angle", angle)):
        if not isinstance(v, (int, float)) or isinstance(v, bool):
            raise ConfigError(f"{label} must be a number, got {v!r}")
    return {
        Atom.char("F"): lambda s: forward(s, distance),
        Atom.char("f"): lambda s: move(s, distance),
        Atom.char("+"): lambda s: rotate(s, -angle),
        Atom.char("-"): lambda s: rotate(s, angle),
        Atom.char("["): push_pos_and_angle,
        Atom.char("]"): pop_pos_and_angle,
    }
