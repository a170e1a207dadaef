import logging
from typing import Iterable, List, Optional, Tuple

import numpy as np

from .card import RANKS, SUITS, Card
from .rules import RESHUFFLE_THRESHOLD

logger = logging.getLogger(__name__)


class ShoeExhaustedError(RuntimeError):
    """A card was requested from an empty shoe."""


class Shoe:
    """
    The cards still to be dealt.

    The top of the shoe is the end of the sequence. ``shuffle`` always starts
    from a fresh copy of the full, ordered deck.
    """

    def __init__(self, full_deck: Iterable[Card]):
        self._full_deck: Tuple[Card, ...] = tuple(full_deck)
        self._cards: List[Card] = list(self._full_deck)

    @classmethod
    def build(cls, decks: int) -> "Shoe":
        """decks full 52-card decks concatenated, unshuffled"""
        full_deck = [
            Card(rank, suit)
            for _ in range(decks)
            for suit in SUITS
            for rank in RANKS
        ]
        return cls(full_deck)

    @classmethod
    def from_cards(cls, cards: Iterable[Card]) -> "Shoe":
        """
        A stacked shoe dealt in the given order (first card is drawn first).

        Shuffling it afterwards shuffles those same cards.
        """
        ordered = list(cards)
        shoe = cls(ordered)
        shoe._cards.reverse()
        return shoe

    @property
    def full_deck(self) -> Tuple[Card, ...]:
        return self._full_deck

    @property
    def cards_remaining(self) -> int:
        return len(self._cards)

    @property
    def needs_reshuffle(self) -> bool:
        return len(self._cards) < RESHUFFLE_THRESHOLD

    def shuffle(self, rng: Optional[np.random.Generator] = None) -> None:
        """Fisher-Yates shuffle of a fresh copy of the full deck."""
        rng = rng if rng is not None else np.random.default_rng()
        cards = list(self._full_deck)
        for i in range(len(cards) - 1, 0, -1):
            j = int(rng.integers(0, i + 1))
            cards[i], cards[j] = cards[j], cards[i]
        self._cards = cards
        logger.debug("Shuffled %d cards", len(cards))

    def draw(self) -> Card:
        if not self._cards:
            raise ShoeExhaustedError(
                f"Shoe of {len(self._full_deck)} cards is empty; "
                f"rounds must not start below {RESHUFFLE_THRESHOLD} cards"
            )
        return self._cards.pop()

    def peek_remaining(self) -> Tuple[Card, ...]:
        """Remaining cards in dealing order"""
        return tuple(reversed(self._cards))

    def __len__(self) -> int:
        return len(self._cards)
