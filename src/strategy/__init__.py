"""
Basic strategy for the blackjack trainer.

Key components:
- tables: Hard, soft and pair tables as StrategyCell variants
- hand_classification: Pair / soft / hard classification (H12, S18, P_8, ...)
- oracle: correct_action, the rule-aware basic strategy lookup
- legality: Action legality masks based on rules and hand state
- chart: Strategy charts as pandas DataFrames
- explanations: Plain-language reasons for the correct play
"""

from .chart import build_chart, format_chart
from .explanations import explain
from .hand_classification import HandClass, HandClassifier, HandType
from .legality import ACTION_BITS, LegalityMaskGenerator
from .oracle import correct_action, resolve_cell
from .tables import FallbackCondition, StrategyCell

__all__ = [
    "ACTION_BITS",
    "FallbackCondition",
    "HandClass",
    "HandClassifier",
    "HandType",
    "LegalityMaskGenerator",
    "StrategyCell",
    "build_chart",
    "correct_action",
    "explain",
    "format_chart",
    "resolve_cell",
]
