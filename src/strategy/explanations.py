from typing import Sequence

from game_mechanics.action_type import ActionType
from game_mechanics.card import Card, rank_value
from game_mechanics.hand_state import HandState

GENERIC_EXPLANATION = (
    "This is the mathematically optimal play based on computer simulations "
    "of millions of hands."
)


def explain(
    player_cards: Sequence[Card],
    dealer_up_card: Card,
    correct: ActionType,
) -> str:
    """Plain-language reason why `correct` is the basic strategy play."""
    hand = HandState.from_cards(player_cards)
    total = hand.total
    dealer_value = rank_value(dealer_up_card)

    if hand.is_pair:
        pair_rank = hand.pair_rank
        if pair_rank in ("A", "8"):
            return (
                "You should always split Aces and 8s. A pair of 8s is a total of 16, "
                "the worst hand in blackjack. Splitting gives you two much stronger "
                "hands starting with 8. A pair of Aces becomes two powerful hands "
                "starting with 11."
            )
        if pair_rank in ("T", "5"):
            return (
                "You should never split 10s or 5s. A total of 20 is already a winning "
                "hand, and a total of 10 is a great hand to double down on, not split."
            )

    if correct == ActionType.STAND:
        if total >= 17 and not hand.is_soft:
            return (
                f"A hard total of {total} is a strong hand. You should stand and make "
                "the dealer try to beat you, as the risk of busting if you hit is too high."
            )
        if 13 <= total <= 16 and 2 <= dealer_value <= 6:
            return (
                f"You have a 'stiff' hand ({total}), which can bust with one card. "
                f"Since the dealer's up-card is a '{dealer_value}' (a bust card), the "
                "correct strategy is to stand and let the dealer take the risk of busting."
            )

    if correct == ActionType.HIT:
        if total <= 11:
            return (
                f"With a total of {total}, you cannot bust by hitting. Hitting will "
                "always improve your hand or give you a better total to play from."
            )
        if 12 <= total <= 16 and dealer_value >= 7:
            return (
                f"Your hand ({total}) is weak, and the dealer's strong up-card "
                f"({dealer_value}) means they are likely to make a strong hand. You "
                "must hit to improve your total for a better chance to win."
            )

    if correct == ActionType.DOUBLE:
        if total == 11:
            return (
                "A total of 11 is the best possible starting hand. Doubling down "
                "maximizes your potential profit in this highly advantageous situation."
            )
        if total == 10 and dealer_value <= 9:
            return (
                "A total of 10 is a very strong hand, especially against a dealer's "
                "non-10 up-card. Doubling down is the best way to capitalize on this advantage."
            )
        if hand.is_soft:
            return (
                f"Soft totals like yours ({total}) are great for doubling because you "
                "can't bust. If you get a low card, you have a strong total. If you get "
                "a high card, the Ace converts to 1, giving you a second chance."
            )

    if correct == ActionType.SPLIT:
        return (
            "Splitting this pair is mathematically better than hitting or standing, "
            "giving you a higher expected return in the long run."
        )

    if correct == ActionType.SURRENDER:
        return (
            f"Your hand ({total}) is extremely weak against the dealer's up-card "
            f"({dealer_value}). Surrendering saves half your bet in a situation where "
            "you are very likely to lose the whole bet."
        )

    return GENERIC_EXPLANATION
