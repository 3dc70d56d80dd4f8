"""
Dataset generators for partial-order sorting experiments.

Base distributions (integer valued):
- "random":        uniform over an inclusive params["range"] (required).
- "nearly_sorted": [0, 1, ..., n-1] degraded by ceil(swap_frac * n) random swaps.
- "few_uniques":   at most k distinct values from an optional inclusive range.
- "small_range":   uniform over [min_val, max_val] (default [0, 255]).
- "reversed":      [n-1, ..., 0]; params other than nan_frac and the RNG are unused.

Incomparable values:
    Every distribution accepts params["nan_frac"] in [0.0, 1.0] (default 0.0).
    When positive, the dataset is converted to floats and ceil(nan_frac * n)
    distinct positions, chosen with the caller's RNG, are overwritten with NaN.

Public API (stable):
    make_dataset(n: int, spec: dict, rng: numpy.random.Generator) -> list
"""

from __future__ import annotations

import math
from typing import Any, Dict, List, Tuple

import numpy as np

SUPPORTED_DISTS = {
    "random",
    "nearly_sorted",
    "few_uniques",
    "small_range",
    "reversed",
}
__all__ = ["SUPPORTED_DISTS", "make_dataset"]


def make_dataset(n: int, spec: Dict[str, Any], rng: np.random.Generator) -> List[Any]:
    """
    Generate a dataset according to `spec`, using the provided RNG.

    Parameters
    ----------
    n : int
        Number of elements to generate. Must be >= 0.
    spec : dict
        {"dist": <one of SUPPORTED_DISTS>, "params": {...}}. See module docstring.
    rng : numpy.random.Generator
        Random number generator owned by the caller (seeded upstream).

    Returns
    -------
    list[int] | list[float]
        Integers when nan_frac == 0, floats (some of them NaN) otherwise.

    Raises
    ------
    ValueError
        If inputs are invalid or if the distribution is unsupported.
    """
    if not isinstance(n, int) or isinstance(n, bool):
        raise ValueError("n must be an int")
    if n < 0:
        raise ValueError("n must be nonnegative")
    if not isinstance(spec, dict):
        raise ValueError("spec must be a dict")

    dist = spec.get("dist", None)
    if dist not in SUPPORTED_DISTS:
        raise ValueError(
            f"Unsupported dataset dist: {dist!r}. Supported: {sorted(SUPPORTED_DISTS)}"
        )

    params = spec.get("params") or {}
    nan_frac = _parse_frac(params, "nan_frac", default=0.0)

    base = _make_base(dist, n, params, rng)
    if nan_frac == 0.0 or n == 0:
        return base
    return _inject_nans(base, nan_frac, rng)


def _make_base(dist: str, n: int, params: Dict[str, Any], rng: np.random.Generator) -> List[int]:
    if dist == "random":
        if "range" not in params:
            raise ValueError("random.params.range must be provided as [min, max] (inclusive)")
        lo, hi = _parse_range(params["range"])
        if n == 0:
            return []
        # Generator.integers is half-open; +1 makes hi inclusive
        return rng.integers(lo, hi + 1, size=n, dtype=np.int64).tolist()

    if dist == "nearly_sorted":
        swap_frac = _parse_frac(params, "swap_frac", default=0.05)
        arr = list(range(n))
        num_swaps = math.ceil(swap_frac * n)
        if num_swaps <= 0:
            return arr
        idxs = rng.integers(0, n, size=2 * num_swaps)
        for k in range(num_swaps):
            i, j = int(idxs[2 * k]), int(idxs[2 * k + 1])
            arr[i], arr[j] = arr[j], arr[i]
        return arr

    if dist == "few_uniques":
        k = params.get("k")
        if not isinstance(k, int) or isinstance(k, bool) or k < 1:
            raise ValueError(f"few_uniques.params.k must be an integer >= 1; got {k!r}")
        lo, hi = _parse_range(params.get("range", (0, 4294967295)))
        if n == 0:
            return []
        actual_k = min(k, n, hi - lo + 1)
        # Draw from `rng` only, so the dataset is reproducible from the seed
        chosen: List[int] = []
        seen = set()
        while len(chosen) < actual_k:
            batch = rng.integers(lo, hi + 1, size=2 * (actual_k - len(chosen)))
            for v in map(int, batch):
                if v not in seen:
                    seen.add(v)
                    chosen.append(v)
                    if len(chosen) == actual_k:
                        break
        return [chosen[int(t)] for t in rng.integers(0, actual_k, size=n)]

    if dist == "small_range":
        if "range" in params:
            lo, hi = _parse_range(params["range"])
        else:
            lo, hi = _parse_range((params.get("min_val", 0), params.get("max_val", 255)))
        if n == 0:
            return []
        return rng.integers(lo, hi + 1, size=n, dtype=np.int64).tolist()

    # "reversed"
    return list(range(n - 1, -1, -1))


def _inject_nans(base: List[int], nan_frac: float, rng: np.random.Generator) -> List[float]:
    n = len(base)
    out = [float(v) for v in base]
    num_nans = min(n, math.ceil(nan_frac * n))
    for i in rng.choice(n, size=num_nans, replace=False):
        out[int(i)] = float("nan")
    return out


# ------------------------- helpers ------------------------- #


def _parse_range(spec: Any) -> Tuple[int, int]:
    """Parse an inclusive [min, max] pair of integers."""
    if not isinstance(spec, (list, tuple)) or len(spec) != 2:
        raise ValueError("params.range must be a 2-element list/tuple [min, max]")
    lo_raw, hi_raw = spec
    if not _is_int_like(lo_raw) or not _is_int_like(hi_raw):
        raise ValueError("params.range values must be integers")
    lo, hi = int(lo_raw), int(hi_raw)
    if lo > hi:
        raise ValueError(f"params.range invalid: min > max ({lo} > {hi})")
    return lo, hi


def _parse_frac(params: Dict[str, Any], name: str, default: float) -> float:
    val = params.get(name, default)
    try:
        x = float(val)
    except (TypeError, ValueError) as e:
        raise ValueError(f"params.{name} must be a float in [0.0, 1.0]; got {val!r}") from e
    if not (0.0 <= x <= 1.0):
        raise ValueError(f"params.{name} must be in [0.0, 1.0]; got {x}")
    return x


def _is_int_like(x: Any) -> bool:
    # Python ints and NumPy integer types; bool is excluded
    return isinstance(x, (int, np.integer)) and not isinstance(x, bool)
