"""
Property helpers for validating partial-order sorting results.

Used by the test suite and usable as sanity checks around the benchmark runner.

Public API (stable):
    is_nondecreasing(xs) -> bool
    first_nondecreasing_violation_index(xs) -> int | None
    is_permutation(a, b) -> bool
    permutation_counter_diff(a, b) -> dict
    is_partitioned(out, result, is_incomparable=None) -> bool
    is_stable(before, after, key, tag) -> bool
    assert_no_mutation(before, after) -> None

Notes
-----
- "Non-decreasing" here means every adjacent pair is comparable and ordered.
  An incomparable pair counts as a violation.
- Multiset checks treat all NaN values as one value: NaN != NaN, so a plain
  Counter would count two distinct NaN objects as different keys.
- Stability needs a tag that does not take part in the ordering, e.g. an id
  field that the element's comparison operators ignore.
"""

from __future__ import annotations

import math
from collections import Counter
from typing import Any, Callable, Dict, Hashable, Optional, Sequence

from posort.algorithms.ordering import Ordering, Probe, partial_cmp, self_probe

__all__ = [
    "is_nondecreasing",
    "first_nondecreasing_violation_index",
    "is_permutation",
    "permutation_counter_diff",
    "is_partitioned",
    "is_stable",
    "assert_no_mutation",
]

_NAN_KEY = ("__nan__",)


def is_nondecreasing(xs: Sequence[Any]) -> bool:
    """Return True iff every adjacent pair is comparable and xs[i] <= xs[i+1]."""
    return first_nondecreasing_violation_index(xs) is None


def first_nondecreasing_violation_index(xs: Sequence[Any]) -> int | None:
    """
    Return the first index i where xs[i] > xs[i+1] or the pair is incomparable,
    or None if the sequence is non-decreasing.
    """
    for i in range(len(xs) - 1):
        order = partial_cmp(xs[i], xs[i + 1])
        if order is None or order is Ordering.GREATER:
            return i
    return None


def _multiset_key(x: Any) -> Hashable:
    if isinstance(x, float) and math.isnan(x):
        return _NAN_KEY
    return x


def permutation_counter_diff(a: Sequence[Any], b: Sequence[Any]) -> Dict[Any, int]:
    """
    Return a dict of value -> count difference (count_a - count_b).

    Empty dict means `a` and `b` have identical multiplicities. NaN values are
    reported under a single key.
    """
    diff = Counter(map(_multiset_key, a))
    diff.subtract(Counter(map(_multiset_key, b)))
    return {k: d for k, d in diff.items() if d != 0}


def is_permutation(a: Sequence[Any], b: Sequence[Any]) -> bool:
    """Return True iff `a` and `b` hold the same multiset of values."""
    return len(a) == len(b) and not permutation_counter_diff(a, b)


def is_partitioned(
    out: Sequence[Any], result: int, is_incomparable: Optional[Probe] = None
) -> bool:
    """
    Return True iff no element before `result` is incomparable and every
    element from `result` on is.
    """
    probe = is_incomparable or self_probe
    if not 0 <= result <= len(out):
        return False
    head_ok = not any(probe(x) for x in out[:result])
    tail_ok = all(probe(x) for x in out[result:])
    return head_ok and tail_ok


def is_stable(
    before: Sequence[Any],
    after: Sequence[Any],
    key: Callable[[Any], Hashable],
    tag: Callable[[Any], Hashable],
) -> bool:
    """
    Return True iff, for every ordering key, the tags of the elements sharing
    that key appear in `after` in the same order as in `before`.

    `key` must capture every field the ordering looks at; `tag` identifies the
    element and must not take part in the ordering.
    """
    def tags_by_key(xs: Sequence[Any]) -> Dict[Hashable, list]:
        groups: Dict[Hashable, list] = {}
        for x in xs:
            groups.setdefault(key(x), []).append(tag(x))
        return groups

    return tags_by_key(before) == tags_by_key(after)


def assert_no_mutation(before: Sequence[Any], after: Sequence[Any]) -> None:
    """
    Assert that two sequences are element-wise identical (NaN matches NaN).

    Raises AssertionError naming the first differing index.
    """
    if len(before) != len(after):
        raise AssertionError(
            f"Input mutated: length changed from {len(before)} to {len(after)}"
        )
    for i, (x, y) in enumerate(zip(before, after)):
        if _multiset_key(x) != _multiset_key(y):
            raise AssertionError(f"Input mutated at index {i}: before={x}, after={y}")
