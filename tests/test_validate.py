from __future__ import annotations

import pytest

from posort.validate import (
    assert_no_mutation,
    equals_oracle,
    first_nondecreasing_violation_index,
    is_nondecreasing,
    is_partitioned,
    is_permutation,
    is_stable,
    oracle_partition,
    permutation_counter_diff,
)

NAN = float("nan")


def test_oracle_partition_does_not_mutate() -> None:
    a = [3.0, NAN, 1.0, NAN]
    before = list(a)
    prefix, tail = oracle_partition(a)
    assert prefix == [1.0, 3.0]
    assert tail == 2
    assert_no_mutation(before, a)


def test_equals_oracle() -> None:
    a = [3.0, NAN, 1.0]
    assert equals_oracle(a, [1.0, 3.0, NAN], 2)
    assert not equals_oracle(a, [3.0, 1.0, NAN], 2)
    assert not equals_oracle(a, [1.0, 3.0, NAN], 3)


def test_nondecreasing_treats_incomparable_as_violation() -> None:
    assert is_nondecreasing([])
    assert is_nondecreasing([1, 1, 2])
    assert first_nondecreasing_violation_index([1, 3, 2]) == 1
    assert first_nondecreasing_violation_index([1.0, NAN]) == 0
    assert not is_nondecreasing([1.0, NAN, 2.0])


def test_permutation_with_distinct_nan_objects() -> None:
    assert is_permutation([float("nan"), 1.0], [1.0, float("nan")])
    assert not is_permutation([NAN, 1.0], [1.0, 1.0])
    assert permutation_counter_diff([1, 1, 2], [1, 2, 2]) == {1: 1, 2: -1}


def test_is_partitioned() -> None:
    assert is_partitioned([1.0, 2.0, NAN], 2)
    assert not is_partitioned([1.0, NAN, 2.0], 2)
    assert not is_partitioned([1.0, 2.0, NAN], 3)
    assert not is_partitioned([1.0], 5)


def test_is_stable() -> None:
    before = [(1, "a"), (0, "b"), (1, "c")]
    good = [(0, "b"), (1, "a"), (1, "c")]
    bad = [(0, "b"), (1, "c"), (1, "a")]
    key, tag = (lambda p: p[0]), (lambda p: p[1])
    assert is_stable(before, good, key, tag)
    assert not is_stable(before, bad, key, tag)


def test_assert_no_mutation_reports_index() -> None:
    with pytest.raises(AssertionError, match="index 1"):
        assert_no_mutation([1, 2, 3], [1, 5, 3])
    with pytest.raises(AssertionError, match="length"):
        assert_no_mutation([1], [])
