"""
CLI interface for the blackjack strategy trainer.

Implements the commands:
blackjack-trainer chart --surrender surrender --resolved
blackjack-trainer simulate --decks 6 --shoes 10 --custom-progression 1-2-3 --seed 42
blackjack-trainer play --dealer-soft-17 s17 --double-after-split ndas
"""

import argparse
import logging
import sys
import time
from typing import Callable, List, Optional

from game_mechanics.action_type import ActionType
from game_mechanics.rules import (
    DEALER_SOFT_17_SETTINGS,
    DOUBLE_AFTER_SPLIT_SETTINGS,
    MAX_DECKS,
    MIN_DECKS,
    SURRENDER_SETTINGS,
    TrainerRuleset,
)
from strategy.chart import format_chart

from .betting import format_bet
from .errors import IllegalActionError
from .events import EventType, RoundEvent, TableEvent
from .session import TrainerSession
from .snapshot import TableSnapshot

ACTION_PROMPT = "[H]it [S]tand [D]ouble s[P]lit su[R]render, [?] hint, [Q]uit"


def build_parser() -> argparse.ArgumentParser:
    """Argument parser with one subcommand per mode."""
    rules_parser = argparse.ArgumentParser(add_help=False)
    rules_parser.add_argument(
        "--dealer-soft-17",
        choices=sorted(DEALER_SOFT_17_SETTINGS),
        default="h17",
        help="Dealer hits (h17) or stands (s17) on soft 17 (default: h17)"
    )
    rules_parser.add_argument(
        "--double-after-split",
        choices=sorted(DOUBLE_AFTER_SPLIT_SETTINGS),
        default="das",
        help="Double after split allowed (das) or not (ndas) (default: das)"
    )
    rules_parser.add_argument(
        "--surrender",
        choices=sorted(SURRENDER_SETTINGS),
        default="nosurrender",
        help="Late surrender offered (default: nosurrender)"
    )
    rules_parser.add_argument(
        "--decks",
        type=int,
        default=6,
        help=f"Decks in the shoe, {MIN_DECKS}-{MAX_DECKS} (default: 6)"
    )
    rules_parser.add_argument(
        "--max-bet",
        type=float,
        help="Bet ceiling in units for the betting simulations (default: unlimited)"
    )
    rules_parser.add_argument(
        "--custom-progression",
        type=str,
        help="Extra progression to simulate, e.g. '1-2-3' or '1,2,4'"
    )
    rules_parser.add_argument(
        "--seed",
        type=int,
        help="Random seed for a reproducible shoe"
    )
    rules_parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output"
    )

    parser = argparse.ArgumentParser(
        description="Blackjack basic strategy trainer"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    chart_parser = subparsers.add_parser(
        "chart", parents=[rules_parser], help="Print the basic strategy chart"
    )
    chart_parser.add_argument(
        "--resolved",
        action="store_true",
        help="Resolve rule-dependent cells (Ds, Ph, Rh) under the given rules"
    )

    simulate_parser = subparsers.add_parser(
        "simulate", parents=[rules_parser], help="Play whole shoes with perfect basic strategy"
    )
    simulate_parser.add_argument(
        "--shoes",
        type=int,
        default=1,
        help="Number of shoes to simulate (default: 1)"
    )

    subparsers.add_parser(
        "play", parents=[rules_parser], help="Practice decisions interactively"
    )
    return parser


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    return build_parser().parse_args(argv)


def rules_from_args(args: argparse.Namespace) -> TrainerRuleset:
    return TrainerRuleset.from_settings(
        dealer_on_soft_17=args.dealer_soft_17,
        double_after_split=args.double_after_split,
        surrender=args.surrender,
        decks=args.decks,
        max_bet=args.max_bet,
        custom_progression=args.custom_progression,
    )


def format_betting(session: TrainerSession) -> str:
    frame = session.betting.to_frame().set_index("strategy")
    frame["current_bet"] = frame["current_bet"].map(format_bet)
    return frame.to_string(float_format=lambda value: f"{value:+.2f}")


def run_chart(args: argparse.Namespace) -> int:
    rules = rules_from_args(args)
    print(f"Basic strategy ({rules.describe()})")
    print()
    print(format_chart(TrainerSession.get_strategy_chart(rules, resolved=args.resolved)))
    return 0


def run_simulation(args: argparse.Namespace) -> int:
    if args.shoes < 1:
        print("Error: --shoes must be at least 1")
        return 1

    rules = rules_from_args(args)
    session = TrainerSession(rules, seed=args.seed)

    print("Blackjack Shoe Simulation")
    print(f"Rules: {rules.describe()}")
    print(f"Shoes: {args.shoes}")
    print()

    start_time = time.time()
    session.start_shoe()
    summary = session.run_shoe_to_completion()
    for completed in range(1, args.shoes):
        if args.verbose:
            print(summary.describe(f"After shoe {completed}"))
        session.shuffle()
        summary = session.run_shoe_to_completion()
    elapsed = time.time() - start_time

    if args.shoes > 1:
        print(summary.describe(f"Totals across {args.shoes} shoes"))
    else:
        print(summary.describe())
    print(f"Running count at end of shoe: {summary.running_count}")
    print()
    print(format_betting(session))
    print(f"\nSimulation completed in {elapsed:.2f} seconds")
    return 0


def describe_event(event: TableEvent) -> Optional[str]:
    """One line of narration for an event, or None for events not worth printing."""
    if event.kind == EventType.CARD_DEALT:
        if event.dealer:
            return "Dealer draws a face-down card" if event.hidden else f"Dealer draws {event.card}"
        return f"Hand {event.hand_index + 1} draws {event.card}"
    if event.kind == EventType.HOLE_CARD_REVEALED:
        return f"Dealer reveals {event.card}"
    if event.kind == EventType.HAND_SPLIT:
        return f"Hand {event.hand_index + 1} is split"
    if event.kind == EventType.HAND_SETTLED:
        return f"Hand {event.hand_index + 1}: {event.result.value} ({event.amount:+g})"
    if event.kind == EventType.ROUND_COMPLETE:
        return f"Round complete ({event.amount:+g} units)\n"
    if event.kind == EventType.SHOE_COMPLETE:
        return "End of shoe."
    return None


def format_table(snapshot: TableSnapshot) -> str:
    dealer_cards = " ".join(str(card) if card else "??" for card in snapshot.dealer.cards)
    lines = [f"Dealer: {dealer_cards}"]
    for index, hand in enumerate(snapshot.player_hands):
        marker = ">" if hand.is_active else " "
        cards = " ".join(str(card) for card in hand.cards)
        soft = "soft " if hand.is_soft else ""
        lines.append(f"{marker} Hand {index + 1}: {cards} ({soft}{hand.total})")
    counts = snapshot.counts
    lines.append(
        f"Count: running {counts.running_count}, true {counts.true_count:.1f}, "
        f"{counts.cards_remaining} cards left"
    )
    return "\n".join(lines)


def play(
    session: TrainerSession,
    input_fn: Callable[[str], str] = input,
    output: Callable[[str], None] = print,
) -> int:
    """Interactive loop: one decision per prompt until the shoe ends or the user quits."""
    handle = session.start_shoe()
    pending_events = handle.events

    while True:
        for event in pending_events:
            line = describe_event(event)
            if line:
                output(line)

        if session.shoe_complete:
            review_mistakes(session, output)
            answer = input_fn("Shuffle and play another shoe? [y/N] ").strip().lower()
            if answer != "y":
                break
            pending_events = session.shuffle().events
            continue

        output(format_table(session.get_snapshot()))
        choice = input_fn(f"{ACTION_PROMPT}: ").strip()
        if choice.lower() in ("q", "quit"):
            break
        if choice == "?":
            output(f"Basic strategy says: {session.hint().label}")
            pending_events = ()
            continue

        try:
            action = ActionType.from_code(choice)
            result = session.decide(action)
        except (ValueError, IllegalActionError) as e:
            output(f"Invalid choice: {e}")
            pending_events = ()
            continue

        report_decision(result, output)
        pending_events = result.events + result.next_round_events

    stats = session.stats
    output(
        f"Decisions: {stats.correct} correct, {stats.incorrect} incorrect. "
        f"Hands: {stats.wins} won, {stats.losses} lost, {stats.pushes} pushed."
    )
    return 0


def report_decision(result: RoundEvent, output: Callable[[str], None]) -> None:
    if result.is_correct:
        output(f"{result.action.label}: correct")
    else:
        output(
            f"{result.action.label}: incorrect. "
            f"The correct action was to {result.correct_action.label}."
        )


def review_mistakes(session: TrainerSession, output: Callable[[str], None]) -> None:
    if not session.mistakes:
        output("Perfect Play! You played the entire shoe without making a single mistake.")
        return

    output(f"You made {len(session.mistakes)} mistake(s). Review:")
    for index in range(len(session.mistakes)):
        review = session.review_mistake(index)
        cards = " ".join(str(card) for card in review.player_cards)
        output(f"\n{review.index + 1} of {review.total}: {cards} vs {review.dealer_up_card}")
        output(f"  You chose {review.chosen.label}; correct was {review.correct.label}")
        output(f"  Outcome: {review.outcome_text} {review.outcome_note}".rstrip())
        output(f"  {review.explanation}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = parse_arguments(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "chart":
        return run_chart(args)
    if args.command == "simulate":
        return run_simulation(args)
    return play(TrainerSession(rules_from_args(args), seed=args.seed))


def cli_entry_point():
    """Entry point for setuptools console script."""
    try:
        exit_code = main()
        sys.exit(exit_code)
    except KeyboardInterrupt:
        print("\nInterrupted by user")
        sys.exit(1)
    except Exception as e:
        print(f"Error: {e}")
        if "--verbose" in sys.argv or "-v" in sys.argv:
            import traceback
            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    cli_entry_point()
