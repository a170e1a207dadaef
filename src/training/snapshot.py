"""Read-only views of a training session for rendering."""

from dataclasses import dataclass
from typing import Optional, Tuple

from game_mechanics.action_type import ActionType
from game_mechanics.card import Card

from .betting import BettingStrategy
from .mistake_log import MistakeRecord
from .player_hand import HandResult, PlayerHand
from .round_state import Round


@dataclass(frozen=True)
class HandView:
    hand_id: int
    cards: Tuple[Card, ...]
    total: int
    is_soft: bool
    is_active: bool
    is_doubled: bool
    is_surrendered: bool
    is_split_ace: bool
    origin_id: Optional[int]
    result: Optional[HandResult]
    final_total: int
    win_amount: float

    @classmethod
    def from_hand(cls, hand: PlayerHand, is_active: bool) -> "HandView":
        state = hand.state
        return cls(
            hand_id=hand.hand_id,
            cards=tuple(hand.cards),
            total=state.total,
            is_soft=state.is_soft,
            is_active=is_active,
            is_doubled=hand.is_doubled,
            is_surrendered=hand.is_surrendered,
            is_split_ace=hand.is_split_ace,
            origin_id=hand.origin_id,
            result=hand.result,
            final_total=hand.final_total,
            win_amount=hand.win_amount,
        )


@dataclass(frozen=True)
class DealerView:
    """Dealer hand; while the hole card is down only the up-card is shown"""
    cards: Tuple[Optional[Card], ...]
    hole_card_revealed: bool
    visible_total: Optional[int]

    @classmethod
    def from_round(cls, game_round: Round) -> "DealerView":
        if game_round.hole_card_revealed:
            return cls(
                cards=tuple(game_round.dealer_cards),
                hole_card_revealed=True,
                visible_total=game_round.dealer_state.total,
            )
        return cls(
            cards=(game_round.dealer_up_card, None),
            hole_card_revealed=False,
            visible_total=None,
        )


@dataclass(frozen=True)
class CountView:
    running_count: int
    true_count: float
    cards_remaining: int


@dataclass(frozen=True)
class StatsView:
    correct: int
    incorrect: int
    wins: int
    losses: int
    pushes: int
    rounds_played: int


@dataclass(frozen=True)
class BettingView:
    key: str
    name: str
    running_total: float
    current_bet: float
    max_gain: float
    max_loss: float

    @classmethod
    def from_strategy(cls, strategy: BettingStrategy) -> "BettingView":
        return cls(
            key=strategy.key,
            name=strategy.name,
            running_total=strategy.running_total,
            current_bet=strategy.current_bet,
            max_gain=strategy.max_gain,
            max_loss=strategy.max_loss,
        )


@dataclass(frozen=True)
class MistakeView:
    hand_id: int
    player_cards: Tuple[Card, ...]
    dealer_up_card: Card
    chosen: ActionType
    correct: ActionType
    results: Tuple[HandResult, ...]

    @classmethod
    def from_record(cls, record: MistakeRecord) -> "MistakeView":
        return cls(
            hand_id=record.hand_id,
            player_cards=record.player_cards,
            dealer_up_card=record.dealer_up_card,
            chosen=record.chosen,
            correct=record.correct,
            results=tuple(record.results),
        )


@dataclass(frozen=True)
class TableSnapshot:
    phase: Optional[str]
    dealer: Optional[DealerView]
    player_hands: Tuple[HandView, ...]
    active_hand_index: Optional[int]
    counts: CountView
    stats: StatsView
    betting: Tuple[BettingView, ...]
    mistakes: Tuple[MistakeView, ...]
    shoe_complete: bool
