"""
posort: in-place bubble sort for partially ordered data.

    from posort import sort

    xs = [float("nan"), 3.0, 1.0]
    k = sort(xs)        # xs == [1.0, 3.0, nan], k == 2
"""

from .algorithms.bubble_sort import sort
from .algorithms.ordering import Ordering, default_probe, partial_cmp, self_probe

__version__ = "0.1.0"

__all__ = ["sort", "Ordering", "partial_cmp", "default_probe", "self_probe"]
