"""
Legality mask generation for player actions.

Generates bitmasks where:
- bit 0 (1): STAND
- bit 1 (2): HIT
- bit 2 (4): DOUBLE
- bit 3 (8): SPLIT
- bit 4 (16): SURRENDER
"""

from typing import Set

from game_mechanics.action_type import ActionType
from game_mechanics.hand_state import HandState
from game_mechanics.rules import TrainerRuleset

# Bitmask constants for actions
ACTION_BITS = {
    ActionType.STAND: 1,
    ActionType.HIT: 2,
    ActionType.DOUBLE: 4,
    ActionType.SPLIT: 8,
    ActionType.SURRENDER: 16,
}


class LegalityMaskGenerator:
    """Decides which actions a hand may take under specific rules."""

    def __init__(self, rules: TrainerRuleset):
        self.rules = rules

    def generate_mask(
        self,
        hand: HandState,
        *,
        split_ace: bool = False,
        double_capped: bool = False,
    ) -> int:
        """
        Generate legality bitmask for a live hand.

        Args:
            hand: Current hand (from_split set for hands created by a split)
            split_ace: The hand came from splitting Aces and takes no decisions
            double_capped: Doubling the largest simulated bet would exceed the max bet

        Returns:
            Bitmask where each bit represents an action's legality; 0 when the
            hand needs no decision (21 or more, or split Aces)
        """
        if split_ace or hand.total >= 21:
            return 0

        mask = ACTION_BITS[ActionType.STAND] | ACTION_BITS[ActionType.HIT]

        if hand.card_count == 2:
            if not double_capped and (not hand.from_split or self.rules.double_after_split):
                mask |= ACTION_BITS[ActionType.DOUBLE]

            if hand.is_pair:
                mask |= ACTION_BITS[ActionType.SPLIT]

            # Only as the first decision of the original hand
            if self.rules.surrender and not hand.from_split:
                mask |= ACTION_BITS[ActionType.SURRENDER]

        return mask

    def legal_actions(
        self, hand: HandState, *, split_ace: bool = False, double_capped: bool = False
    ) -> Set[ActionType]:
        return self.mask_to_actions(
            self.generate_mask(hand, split_ace=split_ace, double_capped=double_capped)
        )

    def is_legal(
        self,
        action: ActionType,
        hand: HandState,
        *,
        split_ace: bool = False,
        double_capped: bool = False,
    ) -> bool:
        mask = self.generate_mask(hand, split_ace=split_ace, double_capped=double_capped)
        return bool(mask & ACTION_BITS[action])

    def mask_to_actions(self, mask: int) -> Set[ActionType]:
        """Convert bitmask to set of legal actions."""
        actions = set()
        for action, bit in ACTION_BITS.items():
            if mask & bit:
                actions.add(action)
        return actions

    def actions_to_mask(self, actions: Set[ActionType]) -> int:
        """Convert set of actions to bitmask."""
        mask = 0
        for action in actions:
            mask |= ACTION_BITS[action]
        return mask
