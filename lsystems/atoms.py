"""atoms.py

Symbols of an L-system and the sequences built from them.

An Atom is a small tagged value: a single character, a short name, an
integer or a literal string. All four kinds can be mixed in one production
table, e.g. the binary tree ``{1: (1, 1), 0: (1, "[", 0, "]", 0)}``.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Literal

from .errors import ConfigError, _require

AtomKind = Literal["char", "name", "int", "str"]

_KINDS = ("char", "name", "int", "str")


@dataclass(frozen=True, order=True)
class Atom:
    kind: AtomKind
    value: str | int

    def __post_init__(self) -> None:
        _require(self.kind in _KINDS, f"unknown atom kind {self.kind!r}")
        if self.kind == "int":
            _require(
                isinstance(self.value, int) and not isinstance(self.value, bool),
                f"integer atom needs an int, got {self.value!r}",
            )
            return
        _require(
            isinstance(self.value, str),
            f"{self.kind} atom needs a string, got {self.value!r}",
        )
        if self.kind == "char":
            _require(
                len(self.value) == 1,
                f"char atom must be exactly one character, got {self.value!r}",
            )
        elif self.kind == "name":
            _require(len(self.value) > 0, "name atom must be non-empty")

    @classmethod
    def char(cls, c: str) -> Atom:
        return cls("char", c)

    @classmethod
    def name(cls, s: str) -> Atom:
        return cls("name", s)

    @classmethod
    def integer(cls, n: int) -> Atom:
        return cls("int", n)

    @classmethod
    def literal(cls, s: str) -> Atom:
        return cls("str", s)

    @property
    def text(self) -> str:
        return str(self.value)

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"Atom.{_CTOR[self.kind]}({self.value!r})"


_CTOR = {"char": "char", "name": "name", "int": "integer", "str": "literal"}

AtomLike = Atom | str | int
SymbolSequence = tuple[Atom, ...]


def as_atom(x: AtomLike) -> Atom:
    """Coerce a plain value to an Atom.

    One-character strings become char atoms, longer strings literal atoms,
    ints integer atoms. Name atoms must be built explicitly.
    """
    if isinstance(x, Atom):
        return x
    if isinstance(x, bool):
        raise ConfigError(f"cannot use a boolean as a symbol: {x!r}")
    if isinstance(x, int):
        return Atom.integer(x)
    if isinstance(x, str):
        _require(len(x) > 0, "cannot use an empty string as a symbol")
        return Atom.char(x) if len(x) == 1 else Atom.literal(x)
    raise ConfigError(f"cannot use {type(x).__name__} {x!r} as a symbol")


def as_sequence(x: AtomLike | Iterable[AtomLike]) -> SymbolSequence:
    """Normalize a bare atom or an iterable of atoms to a SymbolSequence.

    A string counts as a single atom here; use from_string to split one.
    """
    if isinstance(x, (Atom, str, int)):
        return (as_atom(x),)
    if isinstance(x, tuple) and all(isinstance(a, Atom) for a in x):
        return x
    return tuple(as_atom(a) for a in x)


# -------------------------
# Serialization
# -------------------------


def from_string(s: str) -> SymbolSequence:
    """One char atom per character of s."""
    return tuple(Atom.char(c) for c in s)


def to_string(seq: AtomLike | Iterable[AtomLike]) -> str:
    """Concatenate the textual form of every atom in seq."""
    return "".join(a.text for a in as_sequence(seq))


def names_from_string(s: str) -> SymbolSequence:
    return tuple(Atom.name(c) for c in s)


def combine_names(*atoms: AtomLike) -> Atom | None:
    """Join atoms into a single name atom, e.g. a, b, cd -> abcd."""
    if not atoms:
        return None
    return Atom.name("".join(as_atom(a).text for a in atoms))
