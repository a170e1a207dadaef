from .action_type import ActionType
from .card import Card, count_tag, parse_cards, rank_value
from .counting import CountState
from .hand_state import HandState, hand_total
from .rules import RULES, ConfigurationError, TrainerRuleset
from .shoe import Shoe, ShoeExhaustedError

__all__ = [
    "ActionType",
    "Card",
    "ConfigurationError",
    "CountState",
    "HandState",
    "RULES",
    "Shoe",
    "ShoeExhaustedError",
    "TrainerRuleset",
    "count_tag",
    "hand_total",
    "parse_cards",
    "rank_value",
]
