"""
Strategy chart generation.

A chart is one pandas DataFrame per hand category: rows are the chart rows
('16', 'A,7', '8,8'), columns the dealer up-cards ('2'..'10', 'A') and
values the cell codes (H, S, D, Ds, P, Ph, Rh).
"""

from typing import Dict

import pandas as pd

from game_mechanics.card import Card
from game_mechanics.rules import RULES, TrainerRuleset
from strategy.hand_classification import HandClassifier, HandType
from strategy.oracle import correct_action
from strategy.tables import DEALER_UPCARDS

CHART_TITLES = {
    HandType.HARD: "Hard Totals",
    HandType.SOFT: "Soft Totals",
    HandType.PAIR: "Pairs",
}


def upcard_label(dealer_key: str) -> str:
    return "10" if dealer_key == "T" else dealer_key


def build_chart(
    rules: TrainerRuleset = RULES,
    *,
    resolved: bool = False,
) -> Dict[HandType, pd.DataFrame]:
    """
    Build the three strategy charts.

    By default cells show the raw table codes, which do not depend on the
    rules. With resolved=True each cell is resolved for an untouched two-card
    hand under the given rules, so e.g. 'Rh' shows as 'R' or 'H'.
    """
    classifier = HandClassifier()
    charts: Dict[HandType, pd.DataFrame] = {}

    for hand_type in (HandType.HARD, HandType.SOFT, HandType.PAIR):
        rows = {}
        for hand_class in classifier.chart_classes(hand_type):
            cards = classifier.create_example_hand(hand_class)
            row = []
            for dealer_key in DEALER_UPCARDS:
                dealer_card = Card(dealer_key, "♠")
                if resolved:
                    action = correct_action(cards, dealer_card, rules)
                    row.append(action.code)
                else:
                    row.append(correct_action(cards, dealer_card, rules, raw_lookup=True).code)
            rows[hand_class.label] = row

        charts[hand_type] = pd.DataFrame.from_dict(
            rows,
            orient="index",
            columns=[upcard_label(key) for key in DEALER_UPCARDS],
        )

    return charts


def format_chart(charts: Dict[HandType, pd.DataFrame]) -> str:
    """Plain-text rendering of all three charts"""
    sections = []
    for hand_type, frame in charts.items():
        sections.append(f"{CHART_TITLES[hand_type]}\n{frame.to_string()}")
    return "\n\n".join(sections)
