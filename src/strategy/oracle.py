"""
Basic strategy oracle.

correct_action is a pure function of the player's cards, the dealer's
up-card and the ruleset; it never fails (unmapped cells default to Hit).
"""

from typing import Sequence, Union

from game_mechanics.action_type import ActionType
from game_mechanics.card import Card
from game_mechanics.hand_state import HandState
from game_mechanics.rules import RULES, TrainerRuleset
from strategy.hand_classification import HandClass, HandClassifier, HandType
from strategy.tables import (
    HARD_TABLE,
    PAIR_TABLE,
    SOFT_TABLE,
    FallbackCondition,
    StrategyCell,
    lookup_cell,
)

_TABLES = {
    HandType.HARD: HARD_TABLE,
    HandType.SOFT: SOFT_TABLE,
    HandType.PAIR: PAIR_TABLE,
}

_classifier = HandClassifier()


def lookup(hand_class: HandClass, dealer_key: str) -> StrategyCell:
    """Raw table cell for a hand class against a dealer up-card key ('2'-'9', 'T', 'A')"""
    row = _TABLES[hand_class.type].get(hand_class.table_key)
    return lookup_cell(row, dealer_key)


def resolve_cell(
    cell: StrategyCell,
    card_count: int,
    rules: TrainerRuleset,
    from_split: bool = False,
    double_capped: bool = False,
) -> ActionType:
    """
    Collapse a possibly compound cell into one action under the given rules.

    Doubling needs an untouched two-card hand, double-after-split when the
    hand came from a split, and room under the max bet. Surrender needs an
    untouched, unsplit two-card hand and the surrender rule.
    """
    if not cell.is_compound:
        return cell.primary

    if cell.condition == FallbackCondition.DOUBLE_AFTER_SPLIT:
        allowed = rules.double_after_split
    elif cell.condition == FallbackCondition.DOUBLE_ALLOWED:
        allowed = not (
            card_count > 2
            or (from_split and not rules.double_after_split)
            or double_capped
        )
    else:  # SURRENDER_ALLOWED
        allowed = not (card_count > 2 or not rules.surrender or from_split)

    return cell.primary if allowed else cell.fallback


def correct_action(
    player_cards: Sequence[Card],
    dealer_up_card: Card,
    rules: TrainerRuleset = RULES,
    raw_lookup: bool = False,
    from_split: bool = False,
    double_capped: bool = False,
) -> Union[ActionType, StrategyCell]:
    """
    The basic strategy play for a hand.

    Args:
        player_cards: Cards of the hand being decided
        dealer_up_card: The dealer's face-up card
        rules: Rule variations used to resolve compound cells
        raw_lookup: Return the raw table cell instead (for charts)
        from_split: The hand was created by splitting a pair
        double_capped: Doubling the largest simulated bet would exceed the max bet

    Returns:
        An ActionType, or the StrategyCell when raw_lookup is set
    """
    hand = HandState.from_cards(player_cards, from_split=from_split)
    if hand.total >= 21:
        return StrategyCell(ActionType.STAND) if raw_lookup else ActionType.STAND

    cell = lookup(_classifier.classify_hand(hand), dealer_up_card.face_value)
    if raw_lookup:
        return cell

    return resolve_cell(
        cell, hand.card_count, rules, from_split=from_split, double_capped=double_capped
    )
