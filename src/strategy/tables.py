"""
Basic strategy tables for multi-deck blackjack.

Each cell is a StrategyCell: a primary action plus, for rule-dependent
plays, the fallback taken when the primary is not available. Rows map a
dealer up-card ('2'-'9', 'T', 'A') to a cell; the ALL key covers every
up-card without its own entry.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from game_mechanics.action_type import ActionType

ALL = "all"
DEALER_UPCARDS: Tuple[str, ...] = ("2", "3", "4", "5", "6", "7", "8", "9", "T", "A")


class FallbackCondition(Enum):
    """What has to hold for a compound cell to take its primary action."""
    DOUBLE_ALLOWED = "double_allowed"
    DOUBLE_AFTER_SPLIT = "double_after_split"
    SURRENDER_ALLOWED = "surrender_allowed"


@dataclass(frozen=True)
class StrategyCell:
    primary: ActionType
    fallback: Optional[ActionType] = None
    condition: Optional[FallbackCondition] = None

    @property
    def is_compound(self) -> bool:
        return self.condition is not None

    @property
    def code(self) -> str:
        """Chart code: H, S, D, Ds, P, Ph, Rh"""
        if self.fallback is None or (self.primary == ActionType.DOUBLE and self.fallback == ActionType.HIT):
            return self.primary.code
        return self.primary.code + self.fallback.code.lower()

    def __str__(self) -> str:
        return self.code


H = StrategyCell(ActionType.HIT)
S = StrategyCell(ActionType.STAND)
P = StrategyCell(ActionType.SPLIT)
D = StrategyCell(ActionType.DOUBLE, ActionType.HIT, FallbackCondition.DOUBLE_ALLOWED)
DS = StrategyCell(ActionType.DOUBLE, ActionType.STAND, FallbackCondition.DOUBLE_ALLOWED)
PH = StrategyCell(ActionType.SPLIT, ActionType.HIT, FallbackCondition.DOUBLE_AFTER_SPLIT)
RH = StrategyCell(ActionType.SURRENDER, ActionType.HIT, FallbackCondition.SURRENDER_ALLOWED)

CELLS_BY_CODE: Dict[str, StrategyCell] = {
    cell.code: cell for cell in (H, S, P, D, DS, PH, RH)
}

StrategyRow = Dict[str, StrategyCell]


def _row(*cells: StrategyCell) -> StrategyRow:
    """Row with one cell per up-card, in DEALER_UPCARDS order"""
    if len(cells) != len(DEALER_UPCARDS):
        raise ValueError(f"Expected {len(DEALER_UPCARDS)} cells, got {len(cells)}")
    return dict(zip(DEALER_UPCARDS, cells))


# Hard totals (no Ace counted as 11)
HARD_TABLE: Dict[int, StrategyRow] = {
    21: {ALL: S},
    20: {ALL: S},
    19: {ALL: S},
    18: {ALL: S},
    17: {ALL: S},
    #           2  3  4  5  6  7  8  9  T   A
    16: _row(S, S, S, S, S, H, H, RH, RH, RH),
    15: _row(S, S, S, S, S, H, H, H, RH, H),
    14: _row(S, S, S, S, S, H, H, H, H, H),
    13: _row(S, S, S, S, S, H, H, H, H, H),
    12: _row(H, H, S, S, S, H, H, H, H, H),
    11: {ALL: D},
    10: _row(D, D, D, D, D, D, D, D, H, H),
    9: _row(H, D, D, D, D, H, H, H, H, H),
    8: {ALL: H},
    7: {ALL: H},
    6: {ALL: H},
    5: {ALL: H},
    4: {ALL: H},
}

# Soft totals (an Ace counted as 11)
SOFT_TABLE: Dict[int, StrategyRow] = {
    21: {ALL: S},
    20: {ALL: S},
    19: {"6": DS, ALL: S},
    18: _row(DS, DS, DS, DS, DS, S, S, H, H, H),
    17: {"3": D, "4": D, "5": D, "6": D, ALL: H},
    16: {"4": D, "5": D, "6": D, ALL: H},
    15: {"4": D, "5": D, "6": D, ALL: H},
    14: {"5": D, "6": D, ALL: H},
    13: {"5": D, "6": D, ALL: H},
}

# Pairs, keyed by rank with tens folded into 'T'
PAIR_TABLE: Dict[str, StrategyRow] = {
    "A": {ALL: P},
    "T": {ALL: S},
    #            2  3  4  5  6  7  8  9  T  A
    "9": _row(P, P, P, P, P, S, P, P, S, S),
    "8": {ALL: P},
    "7": _row(P, P, P, P, P, P, H, H, H, H),
    "6": _row(PH, P, P, P, P, H, H, H, H, H),
    "5": _row(D, D, D, D, D, D, D, D, H, H),
    "4": _row(H, H, H, PH, PH, H, H, H, H, H),
    "3": _row(PH, PH, P, P, P, P, H, H, H, H),
    "2": _row(PH, PH, P, P, P, P, H, H, H, H),
}


def lookup_cell(row: Optional[StrategyRow], dealer_key: str) -> StrategyCell:
    """Cell for the up-card, else the row's ALL entry, else Hit"""
    if not row:
        return H
    return row.get(dealer_key) or row.get(ALL) or H
