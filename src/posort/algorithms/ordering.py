"""
Partial-order comparison primitives shared by the sorting algorithms.

Python has no separate "partial compare" protocol: a pair of values is ordered
through the rich comparison operators, and a pair for which none of `<`, `>`,
`==` holds is *incomparable* (the behavior of floating-point NaN).

Public API (stable):
    Ordering                       LESS / EQUAL / GREATER
    partial_cmp(a, b) -> Ordering | None
    default_probe(default=None) -> Callable[[T], bool]
    self_probe(x) -> bool
    PROBES                         name -> probe factory, for config-driven callers

Probes answer "is this element incomparable with everything?". They are used
by the sorter to decide which element of an incomparable pair to quarantine.

- `default_probe` compares the element against a neutral value of its own type
  (`type(x)()`, e.g. 0.0 for float) or an explicit `default`. NaN fails that
  comparison; ordinary numbers do not.
- `self_probe` compares the element against itself. NaN is the canonical value
  that is not equal to itself.
"""

from __future__ import annotations

import enum
from typing import Any, Callable, Dict, Optional

__all__ = [
    "Ordering",
    "Probe",
    "partial_cmp",
    "default_probe",
    "self_probe",
    "PROBES",
    "resolve_probe",
]

Probe = Callable[[Any], bool]


class Ordering(enum.IntEnum):
    LESS = -1
    EQUAL = 0
    GREATER = 1


def partial_cmp(a: Any, b: Any) -> Optional[Ordering]:
    """
    Compare `a` with `b` under a partial order.

    Returns
    -------
    Ordering | None
        LESS, GREATER or EQUAL when the pair is ordered; None when the pair is
        incomparable.

    Raises
    ------
    TypeError
        Propagated unchanged when the operands cannot be compared at all
        (e.g. `1 < "a"`). That is an invalid element type, not incomparability.
    """
    if a < b:
        return Ordering.LESS
    if a > b:
        return Ordering.GREATER
    if a == b:
        return Ordering.EQUAL
    return None


def _neutral_of(x: Any) -> Any:
    try:
        return type(x)()
    except TypeError as e:
        raise TypeError(
            f"cannot build a default value for {type(x).__name__!r}; "
            "pass default=... or use another probe"
        ) from e


def default_probe(default: Any = None) -> Probe:
    """
    Build a probe that tests an element against a default/neutral value.

    If `default` is None the neutral value is derived from each element's type
    as `type(x)()`.
    """

    def probe(x: Any) -> bool:
        neutral = _neutral_of(x) if default is None else default
        return partial_cmp(x, neutral) is None

    return probe


def self_probe(x: Any) -> bool:
    """True iff `x` is incomparable with itself (NaN-like)."""
    return partial_cmp(x, x) is None


PROBES: Dict[str, Callable[..., Probe]] = {
    "default": default_probe,
    "self": lambda default=None: self_probe,
}


def resolve_probe(name: str, default: Any = None) -> Probe:
    """Look up a probe by its config name ("default" or "self")."""
    if name not in PROBES:
        raise ValueError(f"Unknown probe: {name!r}. Supported: {sorted(PROBES)}")
    return PROBES[name](default)
