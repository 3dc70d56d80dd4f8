"""
In-place bubble sort over partially ordered elements.

Incomparable elements (e.g. NaN) are quarantined at the tail of the sequence
instead of breaking the sort. The call returns the length of the leading,
totally ordered run.

Public API (stable):
    sort(a, *, config=None, default=None, is_incomparable=None) -> int

Config keys:
    "probe": "default" | "self"
        How to tell which element of an incomparable pair is the
        incomparable-with-everything one. "default" (the default) compares the
        element with a neutral value of its type; "self" compares it with
        itself. A callable passed as `is_incomparable` takes precedence.

Guarantees:
    - a[:result] is non-decreasing and every adjacent pair in it is comparable.
    - Elements that compare equal keep their input order (stable).
    - a[result:] holds the quarantined elements, in unspecified order.
    - The sequence is permuted, never filtered.

Complexity: O(n^2) worst case, O(n) for already-sorted input with no
incomparable elements. O(1) extra space.
"""

from __future__ import annotations

from typing import Any, Dict, MutableSequence, Optional

from .ordering import Ordering, Probe, partial_cmp, resolve_probe

__all__ = ["sort"]


def sort(
    a: MutableSequence[Any],
    *,
    config: Optional[Dict[str, Any]] = None,
    default: Any = None,
    is_incomparable: Optional[Probe] = None,
) -> int:
    """
    Sort `a` in place and return the sorted-prefix length.

    Parameters
    ----------
    a : MutableSequence
        Sequence to reorder. Mutated in place.
    config : dict | None
        See module docstring.
    default : Any
        Neutral value for the "default" probe. None derives it as `type(x)()`.
    is_incomparable : Callable[[T], bool] | None
        Explicit incomparability predicate; overrides `config["probe"]`.

    Returns
    -------
    int
        Number of leading elements in verified total order, 0 <= result <= len(a).
    """
    probe = _select_probe(config, default, is_incomparable)

    n = len(a)
    if n == 0:
        return 0

    # a[boundary + 1:] is the quarantine
    boundary = n - 1
    moved = True
    while moved:
        moved = False
        j = 0
        while j < boundary:
            order = partial_cmp(a[j], a[j + 1])
            if order is Ordering.GREATER:
                a[j], a[j + 1] = a[j + 1], a[j]
                moved = True
                j += 1
            elif order is None:
                victim = j if probe(a[j]) else j + 1
                _quarantine(a, victim, boundary)
                boundary -= 1
                moved = True
                # a new element now sits at j + 1: re-examine the same j
            else:
                j += 1

    # A lone survivor was never compared in the final pass.
    if boundary == 0 and probe(a[0]):
        return 0
    return boundary + 1


def _quarantine(a: MutableSequence[Any], victim: int, boundary: int) -> None:
    """Move a[victim] to a[boundary], shifting the elements in between left by one."""
    for k in range(victim, boundary):
        a[k], a[k + 1] = a[k + 1], a[k]


def _select_probe(
    config: Optional[Dict[str, Any]], default: Any, is_incomparable: Optional[Probe]
) -> Probe:
    if config is None:
        config = {}
    elif not isinstance(config, dict):
        raise ValueError("config must be a dict if provided")

    if is_incomparable is not None:
        return is_incomparable
    return resolve_probe(config.get("probe", "default"), default)
