"""
Blackjack training core.

Key components:
- round_state: Round state machine (deal, player turn, dealer turn, settlement)
- betting: Flat, adaptive, progressive, Martingale, D'Alembert and custom betting simulations
- mistake_log: Incorrect decisions and how those hands turned out
- session: TrainerSession, the entry point for presentation layers
- cli: Command-line interface
"""

from .betting import BettingTable, apply_round_result
from .errors import (
    ConfigurationError,
    IllegalActionError,
    SessionStateError,
    ShoeExhaustedError,
    TrainerError,
)
from .events import EventType, RoundEvent, RoundSettlement, TableEvent
from .mistake_log import MistakeLog, MistakeRecord, MistakeReview
from .player_hand import HandResult, PlayerHand
from .round_state import Round, RoundPhase
from .session import ShoeHandle, ShoeSummary, TrainerSession

__version__ = "0.1.0"

__all__ = [
    "BettingTable",
    "ConfigurationError",
    "EventType",
    "HandResult",
    "IllegalActionError",
    "MistakeLog",
    "MistakeRecord",
    "MistakeReview",
    "PlayerHand",
    "Round",
    "RoundEvent",
    "RoundPhase",
    "RoundSettlement",
    "SessionStateError",
    "ShoeExhaustedError",
    "ShoeHandle",
    "ShoeSummary",
    "TableEvent",
    "TrainerError",
    "TrainerSession",
    "apply_round_result",
]
