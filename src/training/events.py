"""
Events emitted by the training core.

The core changes state synchronously and reports what happened as an
ordered tuple of TableEvents; a presentation layer may replay them with
whatever pacing it likes.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from game_mechanics.action_type import ActionType
from game_mechanics.card import Card

from .player_hand import HandResult


class EventType(Enum):
    CARD_DEALT = "card_dealt"
    HOLE_CARD_REVEALED = "hole_card_revealed"
    HAND_SPLIT = "hand_split"
    HAND_ENDED = "hand_ended"
    HAND_SETTLED = "hand_settled"
    ROUND_COMPLETE = "round_complete"
    SHOE_COMPLETE = "shoe_complete"


@dataclass(frozen=True)
class TableEvent:
    kind: EventType
    hand_index: Optional[int] = None  # None for dealer and round-level events
    card: Optional[Card] = None
    dealer: bool = False
    hidden: bool = False  # dealer hole card, dealt face down
    result: Optional[HandResult] = None
    amount: Optional[float] = None


@dataclass(frozen=True)
class HandSettlement:
    hand_id: int
    result: HandResult
    final_total: int
    win_amount: float


@dataclass(frozen=True)
class RoundSettlement:
    dealer_total: int
    hands: Tuple[HandSettlement, ...]
    win_amount: float  # summed over all hands, in bet units
    player_blackjack: bool = False
    dealer_blackjack: bool = False


@dataclass(frozen=True)
class RoundEvent:
    """
    Outcome of one submitted decision.

    ``events`` covers only the decided round. When the round settles, the
    deal of the following round (or the end of the shoe) is in
    ``next_round_events``.
    """

    action: ActionType
    correct_action: ActionType
    hand_index: int
    hand_ended: bool
    round_ended: bool
    events: Tuple[TableEvent, ...]
    settlement: Optional[RoundSettlement] = None
    shoe_complete: bool = False
    next_round_events: Tuple[TableEvent, ...] = ()

    @property
    def is_correct(self) -> bool:
        return self.action == self.correct_action

    @property
    def cards_drawn(self) -> Tuple[TableEvent, ...]:
        """Face-up cards drawn by this decision, for the player or the dealer"""
        return tuple(
            event for event in self.events
            if event.kind == EventType.CARD_DEALT and not event.hidden
        )
