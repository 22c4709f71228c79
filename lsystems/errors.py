"""Exceptions raised by the rewriting engine, the turtle and the fitter."""

from __future__ import annotations

from typing import Any


class LSystemError(Exception):
    pass


class ConfigError(LSystemError, ValueError):
    """Invalid construction or configuration, rejected at the boundary."""


class StackUnderflowError(LSystemError, IndexError):
    """A pop with no matching push."""


class DegenerateGeometryError(LSystemError, ValueError):
    """Geometry that cannot be normalized (no segments, or zero extent)."""


class GrowthLimitError(LSystemError):
    def __init__(self, generation: int, length: int, limit: int) -> None:
        super().__init__(
            f"generation {generation} has {length} symbols, "
            f"exceeding max_length={limit}"
        )
        self.generation = generation
        self.length = length
        self.limit = limit


class InterpretationError(LSystemError):
    """A rule failed while executing a sequence.

    Carries the offending atom and its position so a malformed rule table
    can be located.
    """

    def __init__(self, atom: Any, index: int, cause: Exception) -> None:
        super().__init__(f"symbol {atom!r} at position {index}: {cause}")
        self.atom = atom
        self.index = index
        self.cause = cause


def _require(cond: bool, msg: str) -> None:
    if not cond:
        raise ConfigError(msg)
