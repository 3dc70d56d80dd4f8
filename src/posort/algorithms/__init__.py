"""
Sorting algorithms.

Each algorithm module exposes `sort(a, *, config=None)`, sorts `a` in place
and returns the sorted-prefix length. The benchmark runner resolves algorithms
by module name (e.g. "bubble_sort").
"""

from .ordering import PROBES, Ordering, default_probe, partial_cmp, self_probe

__all__ = ["Ordering", "partial_cmp", "default_probe", "self_probe", "PROBES"]
