"""
Benchmark harness public API.

    from posort.bench import time_sort_call, run_experiment
"""

from .measure import time_sort_call
from .runner import run_experiment

__all__ = ["time_sort_call", "run_experiment"]
