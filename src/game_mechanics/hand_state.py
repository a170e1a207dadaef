from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple

from .card import Card, rank_value


def hand_total(cards: Iterable[Card]) -> Tuple[int, bool]:
    """
    Total a hand, counting Aces as 11 until that would bust.

    Returns (total, is_soft) where is_soft means at least one Ace still counts 11.
    """
    total = 0
    aces = 0

    for card in cards:
        if card.is_ace:
            aces += 1
        total += rank_value(card)

    # Adjust for aces (make them low if needed)
    while total > 21 and aces > 0:
        total -= 10
        aces -= 1

    return total, aces > 0


@dataclass(frozen=True)
class HandState:
    """Immutable representation of a blackjack hand state"""

    cards: Tuple[Card, ...]
    total: int
    is_soft: bool
    from_split: bool = False

    @property
    def card_count(self) -> int:
        return len(self.cards)

    @property
    def is_busted(self) -> bool:
        return self.total > 21

    @property
    def is_blackjack(self) -> bool:
        """A natural: two cards totalling 21 that did not come from a split"""
        return self.total == 21 and self.card_count == 2 and not self.from_split

    @property
    def is_pair(self) -> bool:
        """Two cards of equal rank value (K and T count as a pair)"""
        return (
            self.card_count == 2
            and rank_value(self.cards[0]) == rank_value(self.cards[1])
        )

    @property
    def pair_rank(self) -> str:
        """Table key for a pair: 'A', 'T' or '2'-'9' (only valid if is_pair is True)"""
        if not self.is_pair:
            raise ValueError("Cannot get pair rank from a non-pair hand")
        return self.cards[0].face_value

    @classmethod
    def from_cards(cls, cards: Sequence[Card], from_split: bool = False) -> "HandState":
        total, is_soft = hand_total(cards)
        return cls(
            cards=tuple(cards),
            total=total,
            is_soft=is_soft,
            from_split=from_split,
        )

    def __str__(self) -> str:
        if self.is_busted:
            return f"Bust {self.total}"
        soft_indicator = "Soft " if self.is_soft else "Hard "
        return f"{soft_indicator}{self.total}"

    def __format__(self, format_spec: str) -> str:
        return format(str(self), format_spec)
