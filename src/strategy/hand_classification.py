"""
Hand classification for strategy lookups.

Every decision hand falls into exactly one table category: a pair, a soft
total or a hard total (checked in that order).
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

from game_mechanics.card import Card
from game_mechanics.hand_state import HandState


class HandType(Enum):
    """Types of hands for classification."""
    HARD = "H"      # Hard total (no usable ace)
    SOFT = "S"      # Soft total (usable ace)
    PAIR = "P"      # Splittable pair


HARD_CHART_TOTALS = tuple(range(17, 4, -1))
SOFT_CHART_TOTALS = tuple(range(20, 12, -1))
PAIR_CHART_RANKS = ("A", "T", "9", "8", "7", "6", "5", "4", "3", "2")


@dataclass(frozen=True)
class HandClass:
    """Canonical hand classification."""
    type: HandType
    value: int  # Total for H/S, rank value for P
    rank: Optional[str] = None  # Only for pairs

    @property
    def table_key(self):
        """Row key into the matching strategy table"""
        return self.rank if self.type == HandType.PAIR else self.value

    @property
    def label(self) -> str:
        """Chart row label: '16', 'A,7', 'T,T'"""
        if self.type == HandType.PAIR:
            return f"{self.rank},{self.rank}"
        if self.type == HandType.SOFT:
            return f"A,{_rank_for_value(self.value - 11)}"
        return str(self.value)

    def __str__(self) -> str:
        if self.type == HandType.PAIR:
            return f"P_{self.rank}"
        return f"{self.type.value}{self.value}"

    def __repr__(self) -> str:
        return str(self)


def _rank_for_value(value: int) -> str:
    return "T" if value == 10 else str(value)


def _value_for_rank(rank: str) -> int:
    if rank == "A":
        return 11
    if rank == "T":
        return 10
    return int(rank)


class HandClassifier:
    """Classifies hands into canonical hand classes."""

    def classify_hand(self, hand: HandState) -> HandClass:
        if hand.is_pair:
            pair_rank = hand.pair_rank
            return HandClass(HandType.PAIR, _value_for_rank(pair_rank), pair_rank)
        elif hand.is_soft:
            return HandClass(HandType.SOFT, hand.total)
        else:
            return HandClass(HandType.HARD, hand.total)

    def classify_cards(self, cards: Sequence[Card]) -> HandClass:
        return self.classify_hand(HandState.from_cards(cards))

    def chart_classes(self, hand_type: HandType) -> List[HandClass]:
        """Rows of the printed chart for one category, top to bottom."""
        if hand_type == HandType.HARD:
            return [HandClass(HandType.HARD, total) for total in HARD_CHART_TOTALS]
        if hand_type == HandType.SOFT:
            return [HandClass(HandType.SOFT, total) for total in SOFT_CHART_TOTALS]
        return [
            HandClass(HandType.PAIR, _value_for_rank(rank), rank)
            for rank in PAIR_CHART_RANKS
        ]

    def create_example_hand(self, hand_class: HandClass) -> List[Card]:
        """Create a two-card example hand for a given hand class."""
        if hand_class.type == HandType.PAIR:
            return [Card(hand_class.rank, "♠"), Card(hand_class.rank, "♣")]

        elif hand_class.type == HandType.SOFT:
            # Soft total: Ace counted as 11 plus one other card
            needed = hand_class.value - 11
            if needed < 2 or needed > 10:
                raise ValueError(f"Invalid soft total: {hand_class.value}")
            return [Card("A", "♠"), Card(_rank_for_value(needed), "♣")]

        else:  # HARD
            total = hand_class.value
            if total < 5 or total > 20:
                raise ValueError(f"Invalid two-card hard total: {total}")

            if total <= 11:
                # Two distinct cards, so low totals are not mistaken for pairs
                first = total // 2 + 1
                second = total - first
            else:
                first = 10
                second = total - 10
                if second == 10:
                    raise ValueError("Hard 20 only exists as a pair of tens")
            return [Card(_rank_for_value(first), "♠"), Card(_rank_for_value(second), "♣")]
