"""
Oracle for partial-order sorting correctness.

Ground truth is built from Python's built-in `sorted()`, which is stable:
drop the incomparable elements, sort the rest. The expected sorted-prefix
length is the number of comparable elements.

Public API (stable):
    oracle_partition(a, is_incomparable=None) -> (list, int)
    equals_oracle(a, out, result, is_incomparable=None) -> bool

Conventions:
- The oracle never mutates its input.
- `is_incomparable` defaults to `self_probe` (NaN-like values).
"""

from __future__ import annotations

from typing import Any, List, Optional, Sequence, Tuple

from posort.algorithms.ordering import Probe, self_probe

ORACLE_NAME: str = "python_sorted_timsort"

__all__ = ["ORACLE_NAME", "oracle_partition", "equals_oracle"]


def oracle_partition(
    a: Sequence[Any], is_incomparable: Optional[Probe] = None
) -> Tuple[List[Any], int]:
    """
    Return (sorted comparable elements, number of incomparable elements).

    Only meaningful when the comparable elements form a total order, which is
    the case for numbers with NaN mixed in.
    """
    probe = is_incomparable or self_probe
    comparable = [x for x in a if not probe(x)]
    return sorted(comparable), len(a) - len(comparable)


def equals_oracle(
    a: Sequence[Any],
    out: Sequence[Any],
    result: int,
    is_incomparable: Optional[Probe] = None,
) -> bool:
    """True iff `out[:result]` is exactly the oracle prefix and `result` its length."""
    prefix, _ = oracle_partition(a, is_incomparable)
    return result == len(prefix) and list(out[:result]) == prefix
