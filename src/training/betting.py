"""
Betting-system simulations.

Every strategy sees the same sequence of round outcomes but stakes its own
current bet, so bankrolls diverge. Bets are in units; a round's win amount
is the net result per unit staked (1.5 for a blackjack, -0.5 for a
surrender, doubled hands count twice).
"""

import logging
import math
from typing import Dict, Iterable, Iterator, List, Sequence

import numpy as np
import pandas as pd

from game_mechanics.rules import RULES, TrainerRuleset

logger = logging.getLogger(__name__)

STANDARD_PROGRESSION = (1, 3, 2, 6)

# (minimum true count, bet) steps for count-adaptive betting, highest first
ADAPTIVE_BET_STEPS = ((5, 5), (4, 4), (3, 3), (2, 2))


class BettingStrategy:
    """Base betting system: bankroll bookkeeping shared by every variant."""

    key: str = "base"
    name: str = "Base"

    def __init__(self):
        self.running_total = 0.0
        self.max_gain = 0.0
        self.max_loss = 0.0
        self.current_bet: float = 1
        self.history: List[float] = []

    def prepare_bet(self, true_count: float, max_bet: float) -> float:
        """Set the stake for the next round before it is dealt."""
        return self.current_bet

    def record_result(self, win_amount: float, max_bet: float) -> None:
        self.running_total += win_amount * self.current_bet
        self.max_gain = max(self.max_gain, self.running_total)
        self.max_loss = min(self.max_loss, self.running_total)
        self.history.append(self.running_total)
        self.update(win_amount, max_bet)

    def update(self, win_amount: float, max_bet: float) -> None:
        """Adjust the bet after a round; win_amount > 0 win, < 0 loss, 0 push."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(bet={self.current_bet}, total={self.running_total:+.2f})"


class FlatBetting(BettingStrategy):
    key = "flat"
    name = "Flat Bet (1 Unit)"


class AdaptiveBetting(BettingStrategy):
    key = "adaptive"
    name = "Adaptive (True Count)"

    def prepare_bet(self, true_count: float, max_bet: float) -> float:
        bet = 1
        for threshold, step_bet in ADAPTIVE_BET_STEPS:
            if true_count >= threshold:
                bet = step_bet
                break
        self.current_bet = min(bet, max_bet)
        return self.current_bet


class ProgressionBetting(BettingStrategy):
    """Walks a fixed bet sequence: forward on a win, back to the start on a loss."""

    def __init__(self, progression: Sequence[int], key: str = "progressive", name: str = ""):
        super().__init__()
        if not progression:
            raise ValueError("A progression needs at least one step")
        self.progression = tuple(progression)
        self.progression_index = 0
        self.key = key
        self.name = name or "-".join(str(step) for step in self.progression) + " Progressive"

    def prepare_bet(self, true_count: float, max_bet: float) -> float:
        self.current_bet = min(self.progression[self.progression_index], max_bet)
        return self.current_bet

    def update(self, win_amount: float, max_bet: float) -> None:
        if win_amount > 0:
            self.progression_index = (self.progression_index + 1) % len(self.progression)
        elif win_amount < 0:
            self.progression_index = 0


class MartingaleBetting(BettingStrategy):
    key = "martingale"
    name = "Martingale (Double on Loss)"

    def update(self, win_amount: float, max_bet: float) -> None:
        if win_amount < 0:
            self.current_bet = min(self.current_bet * 2, max_bet)
        elif win_amount > 0:
            self.current_bet = 1


class DAlembertBetting(BettingStrategy):
    key = "dalembert"
    name = "D'Alembert"

    def update(self, win_amount: float, max_bet: float) -> None:
        if win_amount < 0:
            self.current_bet = min(self.current_bet + 1, max_bet)
        elif win_amount > 0:
            self.current_bet = max(1, self.current_bet - 1)


def create_strategies(rules: TrainerRuleset = RULES) -> List[BettingStrategy]:
    """The tracked strategies; the custom progression only when one is configured."""
    strategies: List[BettingStrategy] = [
        FlatBetting(),
        AdaptiveBetting(),
        ProgressionBetting(STANDARD_PROGRESSION),
        MartingaleBetting(),
        DAlembertBetting(),
    ]
    if rules.custom_progression:
        strategies.append(ProgressionBetting(rules.custom_progression, key="custom"))
    return strategies


def apply_round_result(
    strategies: Iterable[BettingStrategy],
    win_amount: float,
    max_bet: float,
) -> None:
    """Update every strategy from the same round outcome."""
    for strategy in strategies:
        strategy.record_result(win_amount, max_bet)


class BettingTable:
    """The set of betting strategies simulated side by side for one session."""

    def __init__(self, rules: TrainerRuleset = RULES):
        self.max_bet = rules.max_bet
        self.strategies = create_strategies(rules)
        self._by_key: Dict[str, BettingStrategy] = {s.key: s for s in self.strategies}

    def prepare_bets(self, true_count: float) -> None:
        for strategy in self.strategies:
            strategy.prepare_bet(true_count, self.max_bet)

    def apply_round_result(self, win_amount: float) -> None:
        apply_round_result(self.strategies, win_amount, self.max_bet)
        logger.debug("Betting updated for win amount %+.1f", win_amount)

    @property
    def max_current_bet(self) -> float:
        return max(strategy.current_bet for strategy in self.strategies)

    def to_frame(self) -> pd.DataFrame:
        """Summary table: one row per strategy"""
        return pd.DataFrame(
            {
                "strategy": [s.name for s in self.strategies],
                "running_total": [s.running_total for s in self.strategies],
                "current_bet": [s.current_bet for s in self.strategies],
                "max_gain": [s.max_gain for s in self.strategies],
                "max_loss": [s.max_loss for s in self.strategies],
            },
            index=[s.key for s in self.strategies],
        )

    def history_frame(self) -> pd.DataFrame:
        """Bankroll after each round, one column per strategy"""
        rounds = len(self.strategies[0].history) if self.strategies else 0
        data = np.array([s.history for s in self.strategies], dtype=float).reshape(
            len(self.strategies), rounds
        )
        return pd.DataFrame(
            data.T,
            columns=[s.key for s in self.strategies],
            index=pd.RangeIndex(1, rounds + 1, name="round"),
        )

    def __getitem__(self, key: str) -> BettingStrategy:
        return self._by_key[key]

    def __contains__(self, key: str) -> bool:
        return key in self._by_key

    def __iter__(self) -> Iterator[BettingStrategy]:
        return iter(self.strategies)

    def __len__(self) -> int:
        return len(self.strategies)


def format_bet(bet: float) -> str:
    return "∞" if math.isinf(bet) else f"{bet:g}"
