"""
Stability tests using playing cards.

A card orders by (number, suit); its `id` takes no part in the ordering and
only tracks where each card came from.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import List, Tuple

from hypothesis import given, settings, strategies as st

from posort.algorithms.bubble_sort import sort
from posort.validate import is_nondecreasing, is_stable


class Suit(enum.IntEnum):
    DIAMOND = 0
    CLUB = 1
    HEART = 2
    SPADE = 3


@dataclass(order=True)
class Card:
    id: int = field(default=0, compare=False)
    # range [3, 10)
    number: int = 0
    suit: Suit = Suit.DIAMOND


def make_cards(data: List[Tuple[int, int, Suit]]) -> List[Card]:
    return [Card(id=i, number=n, suit=s) for i, n, s in data]


def as_tuples(cards: List[Card]) -> List[Tuple[int, int, Suit]]:
    return [(c.id, c.number, c.suit) for c in cards]


def test_same_number_orders_by_suit() -> None:
    cards = make_cards([(0, 3, Suit.SPADE), (0, 3, Suit.CLUB), (0, 3, Suit.DIAMOND), (0, 3, Suit.HEART)])
    assert sort(cards) == 4
    assert as_tuples(cards) == [(0, 3, Suit.DIAMOND), (0, 3, Suit.CLUB), (0, 3, Suit.HEART), (0, 3, Suit.SPADE)]


def test_orders_by_number_first() -> None:
    cards = make_cards([(0, 3, Suit.SPADE), (0, 9, Suit.CLUB), (0, 8, Suit.DIAMOND), (0, 5, Suit.HEART)])
    assert sort(cards) == 4
    assert as_tuples(cards) == [(0, 3, Suit.SPADE), (0, 5, Suit.HEART), (0, 8, Suit.DIAMOND), (0, 9, Suit.CLUB)]


def test_equal_cards_keep_input_order() -> None:
    cards = make_cards(
        [(0, 3, Suit.SPADE), (0, 3, Suit.CLUB), (1, 4, Suit.DIAMOND), (0, 4, Suit.HEART), (0, 4, Suit.DIAMOND)]
    )
    assert sort(cards) == 5
    assert as_tuples(cards) == [
        (0, 3, Suit.CLUB),
        (0, 3, Suit.SPADE),
        (1, 4, Suit.DIAMOND),
        (0, 4, Suit.DIAMOND),
        (0, 4, Suit.HEART),
    ]


class _Keyed:
    """Float key with a tag that the comparisons ignore."""

    def __init__(self, key: float = 0.0, tag: int = 0) -> None:
        self.key = key
        self.tag = tag

    def __lt__(self, other: "_Keyed") -> bool:
        return self.key < other.key

    def __gt__(self, other: "_Keyed") -> bool:
        return self.key > other.key

    def __eq__(self, other: object) -> bool:
        return isinstance(other, _Keyed) and self.key == other.key

    __hash__ = None  # type: ignore[assignment]


def test_stability_survives_quarantine() -> None:
    # the second NaN sits inside a run of equal keys and has to be pulled out of it
    nan = float("nan")
    keys = [nan, 1.0, 1.0, nan, 1.0, 0.0]
    items = [_Keyed(k, i) for i, k in enumerate(keys)]
    assert sort(items) == 4
    assert [k.tag for k in items[:4]] == [5, 1, 2, 4]
    assert sorted(k.tag for k in items[4:]) == [0, 3]


cards_strategy = st.lists(
    st.tuples(st.integers(min_value=3, max_value=9), st.sampled_from(list(Suit))),
    min_size=0,
    max_size=40,
)


@settings(deadline=None, max_examples=100)
@given(cards_strategy)
def test_property_cards_stable(data: List[Tuple[int, Suit]]) -> None:
    cards = [Card(id=i, number=n, suit=s) for i, (n, s) in enumerate(data)]
    before = list(cards)
    assert sort(cards) == len(cards)
    assert is_nondecreasing(cards)
    assert is_stable(before, cards, key=lambda c: (c.number, c.suit), tag=lambda c: c.id)
