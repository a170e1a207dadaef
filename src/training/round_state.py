"""
Round state machine.

A round moves DEALING -> PLAYER_TURN -> DEALER_TURN -> SETTLING -> COMPLETE
and never goes back. Every transition is driven by a single input: the
initial deal, one player decision, or the dealer's drawing that follows
the last player hand.
"""

import logging
from enum import Enum
from typing import Callable, List, Optional, Set

from game_mechanics.action_type import ActionType
from game_mechanics.card import Card
from game_mechanics.counting import CountState
from game_mechanics.hand_state import HandState, hand_total
from game_mechanics.rules import BLACKJACK_PAYOUT, SURRENDER_LOSS, TrainerRuleset
from game_mechanics.shoe import Shoe
from strategy.legality import LegalityMaskGenerator
from strategy.oracle import correct_action

from .errors import IllegalActionError, SessionStateError
from .events import EventType, HandSettlement, RoundSettlement, TableEvent
from .player_hand import ActionRecord, HandResult, PlayerHand

logger = logging.getLogger(__name__)


class RoundPhase(Enum):
    DEALING = "dealing"
    PLAYER_TURN = "player_turn"
    DEALER_TURN = "dealer_turn"
    SETTLING = "settling"
    COMPLETE = "complete"


class Round:
    """
    One round of play: a dealer hand and one or more player hands.

    Every card drawn is counted immediately, including the dealer's hole card.
    Methods return the TableEvents produced by the transition.
    """

    def __init__(
        self,
        shoe: Shoe,
        count: CountState,
        rules: TrainerRuleset,
        next_hand_id: Callable[[], int],
        double_capped: bool = False,
    ):
        self.shoe = shoe
        self.count = count
        self.rules = rules
        self._next_hand_id = next_hand_id
        self._legality = LegalityMaskGenerator(rules)
        # Bets are fixed before the deal, so the cap holds for the whole round
        self.double_capped = double_capped

        self.phase = RoundPhase.DEALING
        self.dealer_cards: List[Card] = []
        self.hands: List[PlayerHand] = []
        self.active_index = 0
        self.hole_card_revealed = False
        self.settlement: Optional[RoundSettlement] = None
        self._events: List[TableEvent] = []

    # ---------- queries ----------

    @property
    def dealer_up_card(self) -> Card:
        return self.dealer_cards[0]

    @property
    def dealer_state(self) -> HandState:
        return HandState.from_cards(self.dealer_cards)

    @property
    def active_hand(self) -> Optional[PlayerHand]:
        if self.phase != RoundPhase.PLAYER_TURN:
            return None
        return self.hands[self.active_index]

    @property
    def is_complete(self) -> bool:
        return self.phase == RoundPhase.COMPLETE

    def legal_actions(self) -> Set[ActionType]:
        hand = self.active_hand
        if hand is None:
            return set()
        return self._legality.legal_actions(
            hand.state, split_ace=hand.is_split_ace, double_capped=self.double_capped
        )

    def correct_action(self) -> ActionType:
        """Basic strategy play for the active hand"""
        hand = self.active_hand
        if hand is None:
            raise SessionStateError("No hand is awaiting a decision")
        return correct_action(
            hand.cards,
            self.dealer_up_card,
            self.rules,
            from_split=hand.from_split,
            double_capped=self.double_capped,
        )

    # ---------- transitions ----------

    def deal(self) -> List[TableEvent]:
        """Deal two cards to the player and two to the dealer, settling naturals."""
        if self.phase != RoundPhase.DEALING:
            raise SessionStateError(f"Cannot deal a round in phase {self.phase.value}")

        hand = PlayerHand(hand_id=self._next_hand_id(), cards=[])
        self.hands.append(hand)
        for _ in range(2):
            hand.add_card(self._draw(hand_index=0))
        self.dealer_cards.append(self._draw(dealer=True))
        self.dealer_cards.append(self._draw(dealer=True, hidden=True))

        player_blackjack = hand.state.is_blackjack
        dealer_blackjack = self.dealer_state.is_blackjack
        logger.debug(
            "Dealt %s vs %s (hole %s)",
            " ".join(str(c) for c in hand.cards),
            self.dealer_up_card,
            self.dealer_cards[1],
        )

        if player_blackjack or dealer_blackjack:
            self._reveal_hole_card()
            self._settle_naturals(player_blackjack, dealer_blackjack)
        else:
            self.phase = RoundPhase.PLAYER_TURN

        return self._drain_events()

    def apply(self, action: ActionType, correct: ActionType) -> List[TableEvent]:
        """
        Apply a player decision to the active hand.

        Args:
            action: Decision taken
            correct: Basic strategy decision, recorded on the hand's first decision

        Raises:
            IllegalActionError: If the action is not legal; the round is unchanged
        """
        hand = self.active_hand
        if hand is None:
            raise IllegalActionError("No hand is awaiting a decision")
        if action not in self.legal_actions():
            raise IllegalActionError(
                f"{action.label} is not legal for {hand.state} "
                f"({' '.join(str(c) for c in hand.cards)})"
            )

        if hand.action_info is None:
            hand.action_info = ActionRecord(chosen=action, correct=correct)

        if action == ActionType.HIT:
            hand.add_card(self._draw(hand_index=self.active_index))
            if not hand.needs_decision:
                self._finish_active_hand()
        elif action == ActionType.DOUBLE:
            hand.is_doubled = True
            hand.add_card(self._draw(hand_index=self.active_index))
            self._finish_active_hand()
        elif action == ActionType.SPLIT:
            self._split_active_hand()
        elif action == ActionType.SURRENDER:
            hand.is_surrendered = True
            self._finish_active_hand()
        else:  # STAND
            self._finish_active_hand()

        return self._drain_events()

    # ---------- internals ----------

    def _emit(self, kind: EventType, **kwargs) -> None:
        self._events.append(TableEvent(kind, **kwargs))

    def _drain_events(self) -> List[TableEvent]:
        events, self._events = self._events, []
        return events

    def _draw(self, hand_index: Optional[int] = None, dealer: bool = False, hidden: bool = False) -> Card:
        card = self.shoe.draw()
        self.count.observe(card)
        self._emit(
            EventType.CARD_DEALT,
            hand_index=hand_index,
            card=None if hidden else card,
            dealer=dealer,
            hidden=hidden,
        )
        return card

    def _split_active_hand(self) -> None:
        parent = self.hands[self.active_index]
        is_aces = parent.cards[0].is_ace
        lineage = parent.attribution_ids

        children = []
        for card in parent.cards:
            child = PlayerHand(
                hand_id=self._next_hand_id(),
                cards=[card],
                lineage=lineage,
                is_split_ace=is_aces,
            )
            children.append(child)

        self.hands[self.active_index:self.active_index + 1] = children
        self._emit(EventType.HAND_SPLIT, hand_index=self.active_index)
        for offset, child in enumerate(children):
            child.add_card(self._draw(hand_index=self.active_index + offset))

        self._skip_hands_without_decisions()

    def _finish_active_hand(self) -> None:
        self._emit(EventType.HAND_ENDED, hand_index=self.active_index)
        self.active_index += 1
        self._skip_hands_without_decisions()

    def _skip_hands_without_decisions(self) -> None:
        while self.active_index < len(self.hands) and not self.hands[self.active_index].needs_decision:
            self._emit(EventType.HAND_ENDED, hand_index=self.active_index)
            self.active_index += 1

        if self.active_index >= len(self.hands):
            self._play_dealer()
            self._settle()

    def _reveal_hole_card(self) -> None:
        # Already counted when dealt
        self.hole_card_revealed = True
        self._emit(EventType.HOLE_CARD_REVEALED, card=self.dealer_cards[1], dealer=True)

    def _play_dealer(self) -> None:
        self.phase = RoundPhase.DEALER_TURN
        self._reveal_hole_card()

        if all(hand.is_busted or hand.is_surrendered for hand in self.hands):
            return

        total, soft = hand_total(self.dealer_cards)
        while total < 17 or (total == 17 and soft and self.rules.dealer_hits_soft_17):
            self.dealer_cards.append(self._draw(dealer=True))
            total, soft = hand_total(self.dealer_cards)
        logger.debug("Dealer finishes on %d", total)

    def _settle(self) -> None:
        self.phase = RoundPhase.SETTLING
        dealer_total = self.dealer_state.total

        for index, hand in enumerate(self.hands):
            player_total = hand.total
            if hand.is_surrendered:
                result, amount = HandResult.LOSS, -SURRENDER_LOSS
            elif player_total > 21:
                result, amount = HandResult.LOSS, -1.0
            elif dealer_total > 21 or player_total > dealer_total:
                result, amount = HandResult.WIN, 1.0
            elif player_total < dealer_total:
                result, amount = HandResult.LOSS, -1.0
            else:
                result, amount = HandResult.PUSH, 0.0

            if hand.is_doubled:
                amount *= 2
            self._record_result(index, hand, result, amount)

        self._complete(dealer_total)

    def _settle_naturals(self, player_blackjack: bool, dealer_blackjack: bool) -> None:
        self.phase = RoundPhase.SETTLING
        hand = self.hands[0]

        if player_blackjack and not dealer_blackjack:
            result, amount = HandResult.WIN, BLACKJACK_PAYOUT
        elif player_blackjack and dealer_blackjack:
            result, amount = HandResult.PUSH, 0.0
        else:
            result, amount = HandResult.LOSS, -1.0

        self._record_result(0, hand, result, amount)
        self._complete(
            self.dealer_state.total,
            player_blackjack=player_blackjack,
            dealer_blackjack=dealer_blackjack,
        )

    def _record_result(self, index: int, hand: PlayerHand, result: HandResult, amount: float) -> None:
        hand.result = result
        hand.final_total = hand.total
        hand.win_amount = amount
        self._emit(EventType.HAND_SETTLED, hand_index=index, result=result, amount=amount)

    def _complete(self, dealer_total: int, **flags) -> None:
        settlements = tuple(
            HandSettlement(
                hand_id=hand.hand_id,
                result=hand.result,
                final_total=hand.final_total,
                win_amount=hand.win_amount,
            )
            for hand in self.hands
        )
        self.settlement = RoundSettlement(
            dealer_total=dealer_total,
            hands=settlements,
            win_amount=sum(s.win_amount for s in settlements),
            **flags,
        )
        self.phase = RoundPhase.COMPLETE
        self._emit(EventType.ROUND_COMPLETE, amount=self.settlement.win_amount)
        logger.debug(
            "Round settled: dealer %d, win amount %+.1f",
            dealer_total,
            self.settlement.win_amount,
        )
