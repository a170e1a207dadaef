from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from game_mechanics.action_type import ActionType
from game_mechanics.card import Card
from game_mechanics.hand_state import HandState


class HandResult(Enum):
    WIN = "WIN"
    LOSS = "LOSS"
    PUSH = "PUSH"


@dataclass(frozen=True)
class ActionRecord:
    """First decision taken on a hand"""
    chosen: ActionType
    correct: ActionType

    @property
    def is_incorrect(self) -> bool:
        return self.chosen != self.correct


@dataclass
class PlayerHand:
    """
    One player hand within a round.

    ``lineage`` holds the ids of the hands this one was split from, nearest
    parent last, so results can be attributed back to a mis-played original.
    """

    hand_id: int
    cards: List[Card]
    lineage: Tuple[int, ...] = ()
    is_doubled: bool = False
    is_surrendered: bool = False
    is_split_ace: bool = False
    action_info: Optional[ActionRecord] = None
    result: Optional[HandResult] = None
    final_total: int = 0
    win_amount: float = 0.0

    @property
    def origin_id(self) -> Optional[int]:
        return self.lineage[-1] if self.lineage else None

    @property
    def from_split(self) -> bool:
        return bool(self.lineage)

    @property
    def state(self) -> HandState:
        return HandState.from_cards(self.cards, from_split=self.from_split)

    @property
    def total(self) -> int:
        return self.state.total

    @property
    def is_busted(self) -> bool:
        return self.state.is_busted

    @property
    def needs_decision(self) -> bool:
        """Split Aces and hands on 21 or more are played out automatically"""
        return not self.is_split_ace and self.total < 21

    @property
    def attribution_ids(self) -> Tuple[int, ...]:
        """This hand and every hand it was split from"""
        return self.lineage + (self.hand_id,)

    def add_card(self, card: Card) -> None:
        self.cards.append(card)
