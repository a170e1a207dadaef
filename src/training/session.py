"""
Training session: the single owner of all mutable trainer state.

A session holds the ruleset, shoe, count, current round, betting table,
statistics and mistake log. Interactive play submits decisions through
``decide``; simulation mode (``run_shoe_to_completion``) runs the same
code path with the oracle's answer at every decision point.
"""

import dataclasses
import itertools
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Set

import numpy as np
import pandas as pd

from game_mechanics.action_type import ActionType
from game_mechanics.counting import CountState
from game_mechanics.rules import RULES, ConfigurationError, TrainerRuleset
from game_mechanics.shoe import Shoe
from strategy.chart import build_chart
from strategy.hand_classification import HandType

from .betting import BettingTable
from .errors import IllegalActionError, SessionStateError
from .events import EventType, RoundEvent, TableEvent
from .mistake_log import MistakeLog, MistakeReview
from .player_hand import HandResult
from .round_state import Round, RoundPhase
from .snapshot import (
    BettingView,
    CountView,
    DealerView,
    HandView,
    MistakeView,
    StatsView,
    TableSnapshot,
)

logger = logging.getLogger(__name__)


@dataclass
class SessionStats:
    correct: int = 0
    incorrect: int = 0
    wins: int = 0
    losses: int = 0
    pushes: int = 0
    rounds_played: int = 0

    @property
    def decisions(self) -> int:
        return self.correct + self.incorrect

    @property
    def accuracy(self) -> float:
        return self.correct / self.decisions if self.decisions else 0.0

    def record_result(self, result: HandResult) -> None:
        if result == HandResult.WIN:
            self.wins += 1
        elif result == HandResult.LOSS:
            self.losses += 1
        else:
            self.pushes += 1

    def reset(self) -> None:
        self.correct = 0
        self.incorrect = 0
        self.wins = 0
        self.losses = 0
        self.pushes = 0
        self.rounds_played = 0


@dataclass(frozen=True)
class ShoeHandle:
    shoe_number: int
    decks: int
    cards_remaining: int
    rules: TrainerRuleset
    events: tuple = ()


@dataclass
class ShoeSummary:
    shoe_number: int
    rounds_played: int
    correct: int
    incorrect: int
    wins: int
    losses: int
    pushes: int
    mistakes: int  # reviewable; the log is cleared on every reshuffle
    running_count: int
    cards_remaining: int
    betting: pd.DataFrame
    bankroll_history: pd.DataFrame

    @property
    def perfect_play(self) -> bool:
        return self.incorrect == 0

    def describe(self, title: Optional[str] = None) -> str:
        title = title or f"Shoe {self.shoe_number}"
        lines = [
            f"{title}: {self.rounds_played} rounds, {self.cards_remaining} cards left",
            f"Decisions: {self.correct} correct, {self.incorrect} incorrect",
            f"Hands: {self.wins} won, {self.losses} lost, {self.pushes} pushed",
        ]
        if self.perfect_play:
            lines.append("Perfect play! No mistakes made.")
        elif self.mistakes == self.incorrect:
            lines.append(f"{self.mistakes} mistake(s) to review.")
        else:
            lines.append(
                f"{self.incorrect} mistake(s) in total, "
                f"{self.mistakes} since the last reshuffle to review."
            )
        return "\n".join(lines)


class TrainerSession:
    """
    Owns one shoe's worth of trainer state.

    Sessions share nothing with each other, so simulations can run one
    session per shoe in parallel.
    """

    def __init__(self, rules: Optional[TrainerRuleset] = None, *, seed: Optional[int] = None):
        self.rules: Optional[TrainerRuleset] = None
        self._rng = np.random.default_rng(seed)
        self._hand_ids = itertools.count(1)

        self.shoe: Optional[Shoe] = None
        self.count = CountState()
        self.stats = SessionStats()
        self.mistakes = MistakeLog()
        self.betting: Optional[BettingTable] = None
        self.round: Optional[Round] = None
        self.last_round: Optional[Round] = None
        self.shoe_number = 0
        self.shoe_complete = False
        self._shoe_rules: Optional[TrainerRuleset] = None

        if rules is not None:
            self.configure(rules)

    # ---------- configuration & shoe lifecycle ----------

    def configure(self, rules: TrainerRuleset) -> None:
        """Validate and store the ruleset; it takes effect at the next start_shoe."""
        if not isinstance(rules, TrainerRuleset):
            raise ConfigurationError(f"Expected a TrainerRuleset, got {type(rules).__name__}")
        self.rules = rules.validate()
        logger.debug("Configured rules: %s", rules.describe())

    @property
    def active_rules(self) -> TrainerRuleset:
        """Rules of the shoe in play (fixed for the duration of the shoe)"""
        return self._shoe_rules or self.rules or RULES

    def start_shoe(self, shoe: Optional[Shoe] = None) -> ShoeHandle:
        """
        Build and shuffle a new shoe, reset every counter, and deal the first round.

        A prepared shoe may be passed instead; it is dealt in its current order.
        """
        if self.rules is None:
            raise ConfigurationError("configure() must be called before start_shoe()")

        self._shoe_rules = self.rules
        self.shoe = shoe if shoe is not None else Shoe.build(self.rules.decks)
        self.stats.reset()
        self.betting = BettingTable(self.rules)
        self.shoe_number += 1
        self.last_round = None
        logger.info("Starting shoe %d (%s)", self.shoe_number, self.rules.describe())
        if shoe is None:
            self.shoe.shuffle(self._rng)
        return self._reset_and_deal()

    def shuffle(self) -> ShoeHandle:
        """
        Reshuffle between rounds: resets the count and clears the mistake log.

        Statistics and betting carry over.
        """
        if self.shoe is None:
            raise SessionStateError("No shoe has been started")
        if self.round is not None and not self.round.is_complete:
            raise SessionStateError("Cannot reshuffle in the middle of a round")
        self.shoe.shuffle(self._rng)
        logger.info("Reshuffled shoe %d", self.shoe_number)
        return self._reset_and_deal()

    def _reset_and_deal(self) -> ShoeHandle:
        self.count.reset()
        self.mistakes.clear()
        self.shoe_complete = False
        self.round = None
        events = self._deal_until_decision()
        return ShoeHandle(
            shoe_number=self.shoe_number,
            decks=self.active_rules.decks,
            cards_remaining=self.shoe.cards_remaining,
            rules=self.active_rules,
            events=tuple(events),
        )

    # ---------- play ----------

    def _deal_until_decision(self) -> List[TableEvent]:
        """
        Deal rounds until one needs a player decision or the shoe runs low.

        Rounds settled by a natural complete without any input.
        """
        events: List[TableEvent] = []
        while True:
            if self.shoe.needs_reshuffle:
                self.round = None
                self.shoe_complete = True
                events.append(TableEvent(EventType.SHOE_COMPLETE))
                logger.info(
                    "Shoe %d complete after %d rounds, %d mistake(s)",
                    self.shoe_number,
                    self.stats.rounds_played,
                    len(self.mistakes),
                )
                return events

            self.betting.prepare_bets(self.count.true_count(self.shoe.cards_remaining))
            self.round = Round(
                self.shoe,
                self.count,
                self._shoe_rules,
                self._next_hand_id,
                double_capped=self.betting.max_current_bet * 2 > self._shoe_rules.max_bet,
            )
            events.extend(self.round.deal())
            if not self.round.is_complete:
                return events
            self._finish_round(self.round)

    def _next_hand_id(self) -> int:
        return next(self._hand_ids)

    def legal_actions(self) -> Set[ActionType]:
        if self.round is None:
            return set()
        return self.round.legal_actions()

    def hint(self) -> ActionType:
        """Basic strategy play for the hand awaiting a decision"""
        if self.round is None or self.round.active_hand is None:
            raise SessionStateError("No hand is awaiting a decision")
        return self.round.correct_action()

    def decide(self, action: ActionType) -> RoundEvent:
        """
        Submit a decision for the active hand.

        An incorrect but legal decision is logged and played; an illegal one
        raises IllegalActionError and changes nothing.
        """
        game_round = self.round
        hand = game_round.active_hand if game_round is not None else None
        if hand is None:
            raise IllegalActionError("No hand is awaiting a decision")
        if action not in game_round.legal_actions():
            logger.warning("Rejected illegal action %s on %s", action.label, hand.state)
            raise IllegalActionError(
                f"{action.label} is not legal for {hand.state} "
                f"({' '.join(str(c) for c in hand.cards)})"
            )

        correct = game_round.correct_action()
        hand_index = game_round.active_index
        if action == correct:
            self.stats.correct += 1
        else:
            self.stats.incorrect += 1
            self.mistakes.record(
                hand.hand_id, hand.cards, game_round.dealer_up_card, action, correct
            )
            logger.debug("Mistake: %s instead of %s on %s", action.label, correct.label, hand.state)

        events = game_round.apply(action, correct)
        hand_ended = action != ActionType.HIT or not hand.needs_decision

        settlement = None
        next_round_events: List[TableEvent] = []
        if game_round.is_complete:
            settlement = game_round.settlement
            self._finish_round(game_round)
            next_round_events = self._deal_until_decision()

        return RoundEvent(
            action=action,
            correct_action=correct,
            hand_index=hand_index,
            hand_ended=hand_ended,
            round_ended=settlement is not None,
            events=tuple(events),
            settlement=settlement,
            shoe_complete=self.shoe_complete,
            next_round_events=tuple(next_round_events),
        )

    def _finish_round(self, game_round: Round) -> None:
        settlement = game_round.settlement
        for hand in game_round.hands:
            self.stats.record_result(hand.result)
            self.mistakes.annotate(hand.attribution_ids, hand.result)
        self.stats.rounds_played += 1
        self.betting.apply_round_result(settlement.win_amount)
        self.last_round = game_round

    def run_shoe_to_completion(self) -> ShoeSummary:
        """Play out the rest of the shoe with basic strategy at every decision."""
        if self.shoe is None:
            self.start_shoe()
        while self.round is not None and self.round.phase == RoundPhase.PLAYER_TURN:
            self.decide(self.round.correct_action())
        return self.summary()

    # ---------- read-only views ----------

    def summary(self) -> ShoeSummary:
        if self.shoe is None:
            raise SessionStateError("No shoe has been started")
        return ShoeSummary(
            shoe_number=self.shoe_number,
            rounds_played=self.stats.rounds_played,
            correct=self.stats.correct,
            incorrect=self.stats.incorrect,
            wins=self.stats.wins,
            losses=self.stats.losses,
            pushes=self.stats.pushes,
            mistakes=len(self.mistakes),
            running_count=self.count.running_count,
            cards_remaining=self.shoe.cards_remaining,
            betting=self.betting.to_frame(),
            bankroll_history=self.betting.history_frame(),
        )

    def get_snapshot(self) -> TableSnapshot:
        """What to render: the round in play, or the last settled one."""
        game_round = self.round if self.round is not None else self.last_round
        cards_remaining = self.shoe.cards_remaining if self.shoe is not None else 0

        if game_round is not None:
            active_index = game_round.active_index if game_round.active_hand is not None else None
            hands = tuple(
                HandView.from_hand(hand, index == active_index)
                for index, hand in enumerate(game_round.hands)
            )
            dealer = DealerView.from_round(game_round)
            phase = game_round.phase.value
        else:
            active_index, hands, dealer, phase = None, (), None, None

        return TableSnapshot(
            phase=phase,
            dealer=dealer,
            player_hands=hands,
            active_hand_index=active_index,
            counts=CountView(
                running_count=self.count.running_count,
                true_count=self.count.true_count(cards_remaining),
                cards_remaining=cards_remaining,
            ),
            stats=StatsView(**dataclasses.asdict(self.stats)),
            betting=tuple(
                BettingView.from_strategy(s) for s in (self.betting or ())
            ),
            mistakes=tuple(MistakeView.from_record(m) for m in self.mistakes),
            shoe_complete=self.shoe_complete,
        )

    def review_mistake(self, index: int) -> MistakeReview:
        return self.mistakes.review(index)

    @staticmethod
    def get_strategy_chart(
        rules: TrainerRuleset = RULES, *, resolved: bool = False
    ) -> Dict[HandType, pd.DataFrame]:
        return build_chart(rules, resolved=resolved)
