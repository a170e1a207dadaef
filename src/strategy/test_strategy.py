"""
Tests for the basic strategy tables, oracle, legality and charts.
"""

import unittest

from game_mechanics.action_type import ActionType
from game_mechanics.card import Card, parse_cards
from game_mechanics.hand_state import HandState
from game_mechanics.rules import RULES, TrainerRuleset
from strategy.chart import build_chart, format_chart
from strategy.explanations import GENERIC_EXPLANATION, explain
from strategy.hand_classification import HandClass, HandClassifier, HandType
from strategy.legality import ACTION_BITS, LegalityMaskGenerator
from strategy.oracle import correct_action, resolve_cell
from strategy.tables import CELLS_BY_CODE, DEALER_UPCARDS, D, DS, PH, RH

SURRENDER_RULES = TrainerRuleset(surrender=True)
NDAS_RULES = TrainerRuleset(double_after_split=False)


def action(codes: str, up: str, rules: TrainerRuleset = RULES, **kwargs):
    return correct_action(parse_cards(codes), Card(up), rules, **kwargs)


class TestHandClassifier(unittest.TestCase):
    """Test pair > soft > hard classification."""

    def setUp(self):
        self.classifier = HandClassifier()

    def test_classification_order(self):
        self.assertEqual(self.classifier.classify_cards(parse_cards("A A")).type, HandType.PAIR)
        self.assertEqual(self.classifier.classify_cards(parse_cards("K Q")).rank, "T")
        self.assertEqual(self.classifier.classify_cards(parse_cards("A 6")), HandClass(HandType.SOFT, 17))
        self.assertEqual(self.classifier.classify_cards(parse_cards("T 6")), HandClass(HandType.HARD, 16))
        self.assertEqual(self.classifier.classify_cards(parse_cards("8 8 4")).type, HandType.HARD)

    def test_labels(self):
        self.assertEqual(HandClass(HandType.SOFT, 18).label, "A,7")
        self.assertEqual(HandClass(HandType.PAIR, 8, "8").label, "8,8")
        self.assertEqual(str(HandClass(HandType.HARD, 16)), "H16")

    def test_example_hands_classify_back(self):
        for hand_type in HandType:
            for hand_class in self.classifier.chart_classes(hand_type):
                cards = self.classifier.create_example_hand(hand_class)
                self.assertEqual(len(cards), 2)
                self.assertEqual(self.classifier.classify_cards(cards), hand_class)

    def test_invalid_example_hand(self):
        with self.assertRaises(ValueError):
            self.classifier.create_example_hand(HandClass(HandType.HARD, 21))


class TestOracle(unittest.TestCase):
    """Test correct_action against known chart plays."""

    def test_reference_plays(self):
        self.assertEqual(action("5 6", "6"), ActionType.DOUBLE)
        self.assertEqual(action("8 8", "K"), ActionType.SPLIT)
        self.assertEqual(action("A 6", "2"), ActionType.HIT)
        self.assertEqual(action("T 7", "A"), ActionType.STAND)
        self.assertEqual(action("T 2", "4"), ActionType.STAND)
        self.assertEqual(action("T T", "6"), ActionType.STAND)
        self.assertEqual(action("9 9", "7"), ActionType.STAND)

    def test_surrender_depends_on_rule(self):
        self.assertEqual(action("T 6", "T", SURRENDER_RULES), ActionType.SURRENDER)
        self.assertEqual(action("T 6", "T"), ActionType.HIT)

    def test_surrender_demoted_after_first_decision(self):
        self.assertEqual(action("T 3 3", "T", SURRENDER_RULES), ActionType.HIT)

    def test_surrender_demoted_on_split_hand(self):
        self.assertEqual(
            action("T 6", "T", SURRENDER_RULES, from_split=True), ActionType.HIT
        )

    def test_double_stand_demotion(self):
        self.assertEqual(action("A 7", "3"), ActionType.DOUBLE)
        self.assertEqual(action("A 3 4", "3"), ActionType.STAND)

    def test_double_hit_demotion(self):
        self.assertEqual(action("2 3 6", "6"), ActionType.HIT)

    def test_split_hand_without_das(self):
        self.assertEqual(action("5 6", "6", NDAS_RULES, from_split=True), ActionType.HIT)
        self.assertEqual(action("5 6", "6", RULES, from_split=True), ActionType.DOUBLE)

    def test_split_or_hit_depends_on_das(self):
        self.assertEqual(action("2 2", "2"), ActionType.SPLIT)
        self.assertEqual(action("2 2", "2", NDAS_RULES), ActionType.HIT)

    def test_twenty_one_or_more_stands(self):
        self.assertEqual(action("7 7 7", "T"), ActionType.STAND)
        self.assertEqual(action("T 8 5", "6"), ActionType.STAND)

    def test_raw_lookup(self):
        self.assertEqual(action("T 6", "T", raw_lookup=True).code, "Rh")
        self.assertEqual(action("A 7", "4", raw_lookup=True).code, "Ds")
        self.assertEqual(action("6 6", "2", raw_lookup=True).code, "Ph")
        self.assertEqual(action("T A", "9", raw_lookup=True).code, "S")

    def test_pure(self):
        """Same inputs always give the same answer"""
        cards = parse_cards("A 7")
        results = {correct_action(cards, Card("9"), SURRENDER_RULES) for _ in range(5)}
        self.assertEqual(results, {ActionType.HIT})

    def test_resolve_cell(self):
        self.assertEqual(resolve_cell(D, 2, RULES), ActionType.DOUBLE)
        self.assertEqual(resolve_cell(D, 3, RULES), ActionType.HIT)
        self.assertEqual(resolve_cell(DS, 3, RULES), ActionType.STAND)
        self.assertEqual(resolve_cell(PH, 2, NDAS_RULES), ActionType.HIT)
        self.assertEqual(resolve_cell(RH, 2, SURRENDER_RULES), ActionType.SURRENDER)
        self.assertEqual(resolve_cell(RH, 2, RULES), ActionType.HIT)

    def test_double_capped_by_max_bet(self):
        self.assertEqual(resolve_cell(D, 2, RULES, double_capped=True), ActionType.HIT)
        self.assertEqual(resolve_cell(DS, 2, RULES, double_capped=True), ActionType.STAND)
        self.assertEqual(resolve_cell(PH, 2, RULES, double_capped=True), ActionType.SPLIT)
        self.assertEqual(
            correct_action(parse_cards("5 6"), Card("9"), RULES, double_capped=True),
            ActionType.HIT,
        )

    def test_cell_codes(self):
        self.assertEqual(sorted(CELLS_BY_CODE), ["D", "Ds", "H", "P", "Ph", "Rh", "S"])


class TestLegality(unittest.TestCase):
    """Test legality masks."""

    def test_opening_pair_with_surrender(self):
        generator = LegalityMaskGenerator(SURRENDER_RULES)
        mask = generator.generate_mask(HandState.from_cards(parse_cards("8 8")))
        self.assertEqual(mask, sum(ACTION_BITS.values()))

    def test_default_rules_no_surrender(self):
        generator = LegalityMaskGenerator(RULES)
        actions = generator.legal_actions(HandState.from_cards(parse_cards("T 6")))
        self.assertEqual(actions, {ActionType.STAND, ActionType.HIT, ActionType.DOUBLE})

    def test_three_cards_only_hit_or_stand(self):
        generator = LegalityMaskGenerator(SURRENDER_RULES)
        actions = generator.legal_actions(HandState.from_cards(parse_cards("2 3 4")))
        self.assertEqual(actions, {ActionType.STAND, ActionType.HIT})

    def test_split_hand_without_das(self):
        generator = LegalityMaskGenerator(TrainerRuleset(double_after_split=False, surrender=True))
        hand = HandState.from_cards(parse_cards("8 8"), from_split=True)
        self.assertEqual(
            generator.legal_actions(hand),
            {ActionType.STAND, ActionType.HIT, ActionType.SPLIT},
        )

    def test_double_capped(self):
        generator = LegalityMaskGenerator(RULES)
        hand = HandState.from_cards(parse_cards("5 6"))
        self.assertEqual(
            generator.legal_actions(hand, double_capped=True),
            {ActionType.STAND, ActionType.HIT},
        )

    def test_no_decision_hands(self):
        generator = LegalityMaskGenerator(RULES)
        self.assertEqual(generator.generate_mask(HandState.from_cards(parse_cards("7 7 7"))), 0)
        split_ace = HandState.from_cards(parse_cards("A 5"), from_split=True)
        self.assertEqual(generator.generate_mask(split_ace, split_ace=True), 0)

    def test_mask_conversion(self):
        generator = LegalityMaskGenerator(RULES)
        actions = {ActionType.HIT, ActionType.SPLIT}
        self.assertEqual(generator.actions_to_mask(actions), 10)
        self.assertEqual(generator.mask_to_actions(10), actions)
        self.assertTrue(generator.is_legal(ActionType.HIT, HandState.from_cards(parse_cards("T 2"))))

    def test_oracle_answer_is_legal(self):
        """The resolved play is always legal for a live hand"""
        for rules in (RULES, SURRENDER_RULES, NDAS_RULES):
            generator = LegalityMaskGenerator(rules)
            for codes in ("T 6", "8 8", "A 7", "5 6", "2 2", "T 3 3", "A 3 4"):
                for from_split in (False, True):
                    cards = parse_cards(codes)
                    hand = HandState.from_cards(cards, from_split=from_split)
                    for up in DEALER_UPCARDS:
                        play = correct_action(cards, Card(up), rules, from_split=from_split)
                        self.assertTrue(generator.is_legal(play, hand), (codes, up, from_split))


class TestChart(unittest.TestCase):
    """Test chart DataFrames."""

    def test_shape_and_columns(self):
        charts = build_chart()
        self.assertEqual(charts[HandType.HARD].shape, (13, 10))
        self.assertEqual(charts[HandType.SOFT].shape, (8, 10))
        self.assertEqual(charts[HandType.PAIR].shape, (10, 10))
        self.assertEqual(list(charts[HandType.HARD].columns)[-2:], ["10", "A"])

    def test_raw_cells(self):
        charts = build_chart()
        self.assertEqual(charts[HandType.HARD].loc["16", "10"], "Rh")
        self.assertEqual(charts[HandType.SOFT].loc["A,7", "6"], "Ds")
        self.assertEqual(charts[HandType.PAIR].loc["8,8", "A"], "P")
        self.assertEqual(charts[HandType.HARD].loc["11", "A"], "D")

    def test_resolved_cells(self):
        charts = build_chart(RULES, resolved=True)
        self.assertEqual(charts[HandType.HARD].loc["16", "10"], "H")
        surrender_charts = build_chart(SURRENDER_RULES, resolved=True)
        self.assertEqual(surrender_charts[HandType.HARD].loc["16", "10"], "R")
        ndas_charts = build_chart(NDAS_RULES, resolved=True)
        self.assertEqual(ndas_charts[HandType.PAIR].loc["2,2", "2"], "H")

    def test_format_chart(self):
        text = format_chart(build_chart())
        self.assertIn("Hard Totals", text)
        self.assertIn("Pairs", text)


class TestExplanations(unittest.TestCase):
    """Test mistake explanations."""

    def test_always_split_aces_and_eights(self):
        self.assertIn("Aces and 8s", explain(parse_cards("8 8"), Card("T"), ActionType.SPLIT))

    def test_never_split_tens(self):
        self.assertIn("never split", explain(parse_cards("K Q"), Card("6"), ActionType.STAND))

    def test_hit_stiff_against_strong_card(self):
        text = explain(parse_cards("T 6"), Card("T"), ActionType.HIT)
        self.assertIn("(16)", text)
        self.assertIn("(10)", text)

    def test_soft_double(self):
        self.assertIn("Soft totals", explain(parse_cards("A 7"), Card("4"), ActionType.DOUBLE))

    def test_generic_fallback(self):
        self.assertEqual(
            explain(parse_cards("A 8"), Card("2"), ActionType.STAND), GENERIC_EXPLANATION
        )


if __name__ == "__main__":
    unittest.main()
