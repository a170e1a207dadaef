"""
Tests for TrainerSession.

Stacked shoes hold exactly 16 cards plus whatever the scenario needs, so
the shoe completes after the scripted rounds.
"""

import unittest

from game_mechanics.action_type import ActionType
from game_mechanics.card import count_tag, parse_cards
from game_mechanics.rules import ConfigurationError, TrainerRuleset
from game_mechanics.shoe import Shoe
from training.errors import IllegalActionError, SessionStateError
from training.events import EventType
from training.player_hand import HandResult
from training.session import TrainerSession


def stacked(codes: str, size: int = 16) -> Shoe:
    cards = parse_cards(codes)
    filler = parse_cards("2 " * max(0, size - len(cards)))
    return Shoe.from_cards(cards + filler)


class TestLifecycle(unittest.TestCase):
    """Test configuration and shoe lifecycle."""

    def test_start_shoe_requires_rules(self):
        with self.assertRaises(ConfigurationError):
            TrainerSession().start_shoe()

    def test_configure_rejects_invalid(self):
        session = TrainerSession()
        with self.assertRaises(ConfigurationError):
            session.configure({"decks": 6})
        with self.assertRaises(ConfigurationError):
            session.configure(TrainerRuleset(decks=9))

    def test_summary_requires_shoe(self):
        with self.assertRaises(SessionStateError):
            TrainerSession(TrainerRuleset()).summary()

    def test_start_shoe_deals_first_round(self):
        session = TrainerSession(TrainerRuleset(decks=2), seed=1)
        handle = session.start_shoe()

        self.assertEqual(handle.shoe_number, 1)
        self.assertEqual(handle.decks, 2)
        self.assertLess(handle.cards_remaining, 104)
        self.assertIn(EventType.CARD_DEALT, [e.kind for e in handle.events])
        self.assertIsNotNone(session.round)

    def test_configure_applies_at_next_shoe(self):
        session = TrainerSession(TrainerRuleset(decks=2), seed=1)
        session.start_shoe()
        session.configure(TrainerRuleset(decks=1, surrender=True))
        self.assertEqual(session.active_rules.decks, 2)
        session.start_shoe()
        self.assertEqual(session.active_rules.decks, 1)
        self.assertEqual(session.shoe_number, 2)

    def test_naturals_settle_without_input(self):
        session = TrainerSession(TrainerRuleset())
        handle = session.start_shoe(stacked("A K 9 7 T 6 T 8", size=20))

        self.assertIn(EventType.ROUND_COMPLETE, [e.kind for e in handle.events])
        self.assertEqual(session.stats.rounds_played, 1)
        self.assertEqual(session.stats.wins, 1)
        self.assertEqual(session.betting["flat"].running_total, 1.5)
        self.assertEqual(session.round.active_hand.total, 16)


class TestDecisions(unittest.TestCase):
    """Test decide(), statistics and the mistake log."""

    def setUp(self):
        self.session = TrainerSession(TrainerRuleset())
        self.session.start_shoe(stacked("T 6 T 8"))

    def test_hint(self):
        self.assertEqual(self.session.hint(), ActionType.HIT)
        self.assertEqual(
            self.session.legal_actions(),
            {ActionType.HIT, ActionType.STAND, ActionType.DOUBLE},
        )

    def test_incorrect_decision_logged_and_annotated(self):
        result = self.session.decide(ActionType.STAND)

        self.assertFalse(result.is_correct)
        self.assertEqual(result.correct_action, ActionType.HIT)
        self.assertTrue(result.hand_ended)
        self.assertTrue(result.round_ended)
        self.assertEqual(result.settlement.win_amount, -1.0)
        self.assertTrue(result.shoe_complete)

        stats = self.session.stats
        self.assertEqual((stats.correct, stats.incorrect), (0, 1))
        self.assertEqual((stats.wins, stats.losses, stats.pushes), (0, 1, 0))

        self.assertEqual(len(self.session.mistakes), 1)
        mistake = self.session.mistakes[0]
        self.assertEqual(mistake.results, [HandResult.LOSS])
        self.assertEqual(mistake.chosen, ActionType.STAND)

        review = self.session.review_mistake(0)
        self.assertEqual(review.outcome_note, "(The wrong move cost you.)")
        self.assertTrue(review.is_first and review.is_last)
        with self.assertRaises(IndexError):
            self.session.review_mistake(1)

    def test_illegal_decision_rejected(self):
        with self.assertRaises(IllegalActionError):
            self.session.decide(ActionType.SURRENDER)
        self.assertEqual(self.session.stats.decisions, 0)
        self.assertEqual(len(self.session.mistakes), 0)
        self.assertEqual(len(self.session.round.active_hand.cards), 2)

    def test_stand_draws_nothing(self):
        session = TrainerSession(TrainerRuleset())
        session.start_shoe(stacked("T 9 T 7", size=24))
        result = session.decide(ActionType.STAND)

        self.assertTrue(result.round_ended)
        self.assertFalse(result.shoe_complete)
        self.assertEqual(result.cards_drawn, ())
        dealt = [e for e in result.next_round_events if e.kind == EventType.CARD_DEALT]
        self.assertEqual(len(dealt), 4)

    def test_double_capped_by_max_bet(self):
        session = TrainerSession(TrainerRuleset(max_bet=1))
        session.start_shoe(stacked("5 6 9 7"))

        self.assertEqual(session.hint(), ActionType.HIT)
        self.assertNotIn(ActionType.DOUBLE, session.legal_actions())
        with self.assertRaises(IllegalActionError):
            session.decide(ActionType.DOUBLE)

    def test_decide_after_shoe_complete(self):
        self.session.decide(ActionType.STAND)
        with self.assertRaises(IllegalActionError):
            self.session.decide(ActionType.HIT)
        with self.assertRaises(SessionStateError):
            self.session.hint()

    def test_shuffle_mid_round_rejected(self):
        with self.assertRaises(SessionStateError):
            self.session.shuffle()

    def test_shuffle_resets_count_and_mistakes(self):
        self.session.decide(ActionType.STAND)
        handle = self.session.shuffle()

        self.assertEqual(len(self.session.mistakes), 0)
        self.assertFalse(self.session.shoe_complete)
        # Statistics carry over
        self.assertEqual(self.session.stats.incorrect, 1)

        game_round = self.session.round
        dealt = game_round.hands[0].cards + game_round.dealer_cards
        self.assertEqual(self.session.count.running_count, sum(count_tag(c) for c in dealt))
        self.assertEqual(handle.cards_remaining, 16 - len(dealt))

    def test_summary_counts_mistakes_from_before_reshuffle(self):
        self.session.decide(ActionType.STAND)
        self.session.shuffle()
        summary = self.session.summary()

        self.assertEqual((summary.incorrect, summary.mistakes), (1, 0))
        self.assertFalse(summary.perfect_play)
        self.assertIn(
            "1 mistake(s) in total, 0 since the last reshuffle to review.",
            summary.describe("Totals across 2 shoes"),
        )


class TestSplitAttribution(unittest.TestCase):
    def test_split_results_annotate_original_mistake(self):
        session = TrainerSession(TrainerRuleset())
        session.start_shoe(stacked("9 9 T 7 T T"))

        result = session.decide(ActionType.SPLIT)
        self.assertFalse(result.is_correct)
        self.assertEqual(result.correct_action, ActionType.STAND)
        self.assertFalse(result.round_ended)

        session.decide(ActionType.STAND)
        final = session.decide(ActionType.STAND)
        self.assertTrue(final.round_ended)
        self.assertEqual(final.settlement.win_amount, 2.0)

        mistake = session.mistakes[0]
        self.assertEqual(mistake.results, [HandResult.WIN, HandResult.WIN])
        self.assertEqual(mistake.outcome_text, "WIN / WIN")
        review = session.review_mistake(0)
        self.assertEqual(review.outcome_note, "(You got lucky!)")
        self.assertIn("hard total of 18", review.explanation)
        self.assertEqual((session.stats.correct, session.stats.incorrect), (2, 1))


class TestSnapshot(unittest.TestCase):
    def test_hole_card_hidden_during_player_turn(self):
        session = TrainerSession(TrainerRuleset())
        session.start_shoe(stacked("T 6 T 8"))
        snapshot = session.get_snapshot()

        self.assertEqual(snapshot.phase, "player_turn")
        self.assertIsNone(snapshot.dealer.cards[1])
        self.assertIsNone(snapshot.dealer.visible_total)
        self.assertEqual(snapshot.active_hand_index, 0)
        self.assertTrue(snapshot.player_hands[0].is_active)
        self.assertEqual(snapshot.counts.cards_remaining, 12)
        self.assertEqual(len(snapshot.betting), 5)

    def test_last_round_shown_after_shoe_complete(self):
        session = TrainerSession(TrainerRuleset())
        session.start_shoe(stacked("T 6 T 8"))
        session.decide(ActionType.STAND)
        snapshot = session.get_snapshot()

        self.assertTrue(snapshot.shoe_complete)
        self.assertEqual(snapshot.phase, "complete")
        self.assertTrue(snapshot.dealer.hole_card_revealed)
        self.assertEqual(snapshot.dealer.visible_total, 18)
        self.assertIsNone(snapshot.active_hand_index)
        self.assertEqual(snapshot.player_hands[0].result, HandResult.LOSS)
        self.assertEqual(snapshot.mistakes[0].correct, ActionType.HIT)


class TestSimulation(unittest.TestCase):
    def test_perfect_play_over_a_shoe(self):
        session = TrainerSession(TrainerRuleset(decks=1, surrender=True), seed=42)
        summary = session.run_shoe_to_completion()

        self.assertTrue(session.shoe_complete)
        self.assertEqual(summary.incorrect, 0)
        self.assertTrue(summary.perfect_play)
        self.assertLess(summary.cards_remaining, 16)
        self.assertGreater(summary.rounds_played, 0)
        self.assertEqual(len(summary.bankroll_history), summary.rounds_played)
        self.assertGreaterEqual(
            summary.wins + summary.losses + summary.pushes, summary.rounds_played
        )
        self.assertEqual(summary.correct, session.stats.decisions)
        self.assertIn("Perfect play", summary.describe())

    def test_seeded_sessions_match(self):
        first = TrainerSession(TrainerRuleset(decks=2), seed=9).run_shoe_to_completion()
        second = TrainerSession(TrainerRuleset(decks=2), seed=9).run_shoe_to_completion()
        self.assertEqual(first.rounds_played, second.rounds_played)
        self.assertEqual(first.running_count, second.running_count)
        self.assertTrue(first.betting.equals(second.betting))

    def test_strategy_chart(self):
        charts = TrainerSession.get_strategy_chart(TrainerRuleset(surrender=True), resolved=True)
        self.assertEqual(len(charts), 3)


if __name__ == "__main__":
    unittest.main()
