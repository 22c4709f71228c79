"""productions.py

Production tables and the rewriting engine.

Each generation replaces every atom of the previous one by its production
(atoms without a production map to themselves). Sequence length usually
grows exponentially with the generation count; the engine does not cap it,
but nth_step accepts a max_length bound for callers that need one.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Generator, Iterable, Iterator, Mapping

from .atoms import (
    Atom,
    AtomLike,
    SymbolSequence,
    as_atom,
    as_sequence,
    from_string,
)
from .errors import ConfigError, GrowthLimitError, _require

logger = logging.getLogger(__name__)

State = AtomLike | Iterable[AtomLike]


def _replacement(value: State) -> SymbolSequence:
    # a string on the right-hand side is a compact rule ("F+F--F+F"), not a
    # literal atom; "" erases the symbol
    if isinstance(value, str):
        return from_string(value)
    return as_sequence(value)


class ProductionTable(Mapping[Atom, SymbolSequence]):
    """Immutable mapping from atoms to their replacement sequences."""

    __slots__ = ("_rules",)

    def __init__(self, rules: Mapping[AtomLike, State] | None = None) -> None:
        self._rules: dict[Atom, SymbolSequence] = {}
        for k, v in (rules or {}).items():
            self._rules[as_atom(k)] = _replacement(v)

    @classmethod
    def from_mapping(cls, rules: Mapping[AtomLike, State]) -> ProductionTable:
        return cls(rules)

    def add(self, source: AtomLike, target: State) -> ProductionTable:
        """Return a new table with source -> target added."""
        table = ProductionTable()
        table._rules = dict(self._rules)
        table._rules[as_atom(source)] = _replacement(target)
        return table

    def lookup(self, atom: Atom) -> SymbolSequence:
        return self._rules.get(atom, (atom,))

    def __getitem__(self, key: AtomLike) -> SymbolSequence:
        try:
            atom = as_atom(key)
        except ConfigError as e:
            raise KeyError(key) from e
        return self._rules[atom]

    def __iter__(self) -> Iterator[Atom]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        body = ", ".join(
            f"{k.text}->{''.join(a.text for a in v)}" for k, v in self._rules.items()
        )
        return f"ProductionTable({body})"


def _as_table(
    productions: ProductionTable | Mapping[AtomLike, State],
) -> ProductionTable:
    if isinstance(productions, ProductionTable):
        return productions
    return ProductionTable(productions)


def step(
    productions: ProductionTable | Mapping[AtomLike, State], state: State
) -> SymbolSequence:
    """Return the next generation of state.

    A plain str state is a single atom ("FX" is one literal atom and is
    only rewritten by a production keyed on "FX"). Pass from_string("FX")
    to rewrite it character by character.
    """
    table = _as_table(productions)
    out: list[Atom] = []
    for atom in as_sequence(state):
        out.extend(table.lookup(atom))
    return tuple(out)


def nth_step(
    productions: ProductionTable | Mapping[AtomLike, State],
    state: State,
    n: int,
    *,
    max_length: int | None = None,
) -> SymbolSequence:
    """Return generation n of state; generation 0 is state itself.

    state is normalized as in step, so a multi-character str is one atom.
    Raises GrowthLimitError as soon as a generation is longer than
    max_length, when one is given.
    """
    _require(
        isinstance(n, int) and not isinstance(n, bool), "n must be an integer"
    )
    _require(n >= 0, "n must be >= 0")
    if max_length is not None:
        _require(max_length >= 0, "max_length must be >= 0")

    table = _as_table(productions)
    current = as_sequence(state)
    for generation in range(1, n + 1):
        current = step(table, current)
        logger.debug("generation %d: %d symbols", generation, len(current))
        if max_length is not None and len(current) > max_length:
            raise GrowthLimitError(generation, len(current), max_length)
    return current


def generations(
    productions: ProductionTable | Mapping[AtomLike, State], state: State
) -> Generator[SymbolSequence, None, None]:
    """Yield state, step(state), step(step(state)), ... forever."""
    table = _as_table(productions)
    current = as_sequence(state)
    while True:
        yield current
        current = step(table, current)


def bind_productions(
    productions: ProductionTable | Mapping[AtomLike, State],
) -> Callable[[State], SymbolSequence]:
    """Return a step function with the productions already applied."""
    table = _as_table(productions)

    def bound_step(state: State) -> SymbolSequence:
        return step(table, state)

    return bound_step


def stream_expand(
    productions: ProductionTable | Mapping[AtomLike, State], state: State, n: int
) -> Generator[Atom, None, None]:
    """Yield the atoms of generation n in order without building it.

    Uses an explicit stack of (sequence, index, depth) frames, so memory is
    bounded by n times the longest replacement.
    """
    _require(
        isinstance(n, int) and not isinstance(n, bool), "n must be an integer"
    )
    _require(n >= 0, "n must be >= 0")
    table = _as_table(productions)

    stack: list[tuple[SymbolSequence, int, int]] = [(as_sequence(state), 0, 0)]

    while stack:
        seq, i, d = stack.pop()
        if i >= len(seq):
            continue

        atom = seq[i]
        stack.append((seq, i + 1, d))

        if d < n and atom in table:
            # replacement on top of the continuation keeps left-to-right order
            stack.append((table.lookup(atom), 0, d + 1))
        else:
            yield atom
