from dataclasses import dataclass
from typing import Iterable

from .card import Card, count_tag

CARDS_PER_DECK = 52
MIN_DECKS_REMAINING = 0.25


@dataclass
class CountState:
    """Hi-Lo running count over every card physically drawn from the shoe."""

    running_count: int = 0

    def observe(self, card: Card) -> int:
        self.running_count += count_tag(card)
        return self.running_count

    def observe_all(self, cards: Iterable[Card]) -> int:
        for card in cards:
            self.observe(card)
        return self.running_count

    def true_count(self, cards_remaining: int) -> float:
        """Running count per deck remaining, never dividing by less than a quarter deck"""
        decks_remaining = max(MIN_DECKS_REMAINING, cards_remaining / CARDS_PER_DECK)
        return self.running_count / decks_remaining

    def reset(self) -> None:
        self.running_count = 0
