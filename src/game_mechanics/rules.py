import math
import re
from dataclasses import dataclass, field
from typing import Iterable, Optional, Tuple, Union


BLACKJACK_PAYOUT = 1.5
SURRENDER_LOSS = 0.5
RESHUFFLE_THRESHOLD = 16  # never start a round with fewer cards than this
MIN_DECKS = 1
MAX_DECKS = 8

DEALER_SOFT_17_SETTINGS = {"h17": True, "s17": False}
DOUBLE_AFTER_SPLIT_SETTINGS = {"das": True, "ndas": False}
SURRENDER_SETTINGS = {"surrender": True, "nosurrender": False}


class ConfigurationError(ValueError):
    """A rule setting outside the recognised values."""


@dataclass(frozen=True)
class TrainerRuleset:
    # Core structural rules
    dealer_hits_soft_17: bool = True
    double_after_split: bool = True
    surrender: bool = False
    decks: int = 6

    # Betting simulation
    max_bet: float = math.inf
    custom_progression: Tuple[int, ...] = field(default_factory=tuple)

    def validate(self) -> "TrainerRuleset":
        """Raise ConfigurationError for out-of-range values, return self otherwise."""
        for name in ("dealer_hits_soft_17", "double_after_split", "surrender"):
            if not isinstance(getattr(self, name), bool):
                raise ConfigurationError(f"{name} must be a bool, got {getattr(self, name)!r}")

        if isinstance(self.decks, bool) or not isinstance(self.decks, int):
            raise ConfigurationError(f"decks must be an integer, got {self.decks!r}")
        if not MIN_DECKS <= self.decks <= MAX_DECKS:
            raise ConfigurationError(
                f"decks must be between {MIN_DECKS} and {MAX_DECKS}, got {self.decks}"
            )

        if isinstance(self.max_bet, bool) or not isinstance(self.max_bet, (int, float)):
            raise ConfigurationError(f"max_bet must be a number, got {self.max_bet!r}")
        if math.isnan(self.max_bet) or self.max_bet < 1:
            raise ConfigurationError(f"max_bet must be at least 1, got {self.max_bet}")

        if not isinstance(self.custom_progression, (tuple, list)):
            raise ConfigurationError(
                f"custom_progression must be a sequence, got {self.custom_progression!r}"
            )
        if any(
            isinstance(step, bool) or not isinstance(step, int) or step <= 0
            for step in self.custom_progression
        ):
            raise ConfigurationError(
                f"custom_progression must hold positive integers, got {self.custom_progression!r}"
            )
        return self

    @property
    def dealer_soft_17_setting(self) -> str:
        return "h17" if self.dealer_hits_soft_17 else "s17"

    @property
    def double_after_split_setting(self) -> str:
        return "das" if self.double_after_split else "ndas"

    @property
    def surrender_setting(self) -> str:
        return "surrender" if self.surrender else "nosurrender"

    def describe(self) -> str:
        max_bet = "unlimited" if math.isinf(self.max_bet) else f"{self.max_bet:g}"
        parts = [
            f"{self.decks} deck(s)",
            self.dealer_soft_17_setting.upper(),
            self.double_after_split_setting.upper(),
            self.surrender_setting,
            f"max bet {max_bet}",
        ]
        if self.custom_progression:
            parts.append("custom " + "-".join(str(step) for step in self.custom_progression))
        return ", ".join(parts)

    @classmethod
    def from_settings(
        cls,
        *,
        dealer_on_soft_17: str = "h17",
        double_after_split: str = "das",
        surrender: str = "nosurrender",
        decks: int = 6,
        max_bet: Optional[float] = None,
        custom_progression: Union[str, Iterable[int], None] = None,
    ) -> "TrainerRuleset":
        """
        Build a ruleset from the enumerated string settings used by the trainer.

        Args:
            dealer_on_soft_17: 'h17' (dealer hits soft 17) or 's17'
            double_after_split: 'das' or 'ndas'
            surrender: 'surrender' or 'nosurrender'
            decks: Number of 52-card decks in the shoe
            max_bet: Bet ceiling in units (None means unlimited)
            custom_progression: '1-2-3' / '1,2,3' string or a sequence of ints

        Raises:
            ConfigurationError: For any unrecognised or out-of-range setting
        """
        ruleset = cls(
            dealer_hits_soft_17=_lookup_setting(
                "dealer_on_soft_17", dealer_on_soft_17, DEALER_SOFT_17_SETTINGS
            ),
            double_after_split=_lookup_setting(
                "double_after_split", double_after_split, DOUBLE_AFTER_SPLIT_SETTINGS
            ),
            surrender=_lookup_setting("surrender", surrender, SURRENDER_SETTINGS),
            decks=decks,
            max_bet=math.inf if max_bet is None else float(max_bet),
            custom_progression=parse_progression(custom_progression),
        )
        return ruleset.validate()


def _lookup_setting(name: str, value: str, choices: dict) -> bool:
    key = str(value).strip().lower()
    if key not in choices:
        raise ConfigurationError(
            f"Unknown {name} setting {value!r}. Valid: {sorted(choices)}"
        )
    return choices[key]


def parse_progression(value: Union[str, Iterable[int], None]) -> Tuple[int, ...]:
    """
    Parse a custom bet progression.

    Strings are split on commas and dashes; entries that are not positive
    integers are dropped, so '1-3-x-0-2' becomes (1, 3, 2).
    """
    if value is None:
        return ()
    if isinstance(value, str):
        steps = []
        for token in re.split(r"[,-]", value):
            token = token.strip()
            if token.isdigit() and int(token) > 0:
                steps.append(int(token))
        return tuple(steps)
    return tuple(value)


RULES = TrainerRuleset()
