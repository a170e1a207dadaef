from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Tuple

from game_mechanics.action_type import ActionType
from game_mechanics.card import Card
from strategy.explanations import explain

from .player_hand import HandResult


@dataclass
class MistakeRecord:
    """An incorrect decision, annotated later with how the hand turned out."""

    hand_id: int
    player_cards: Tuple[Card, ...]
    dealer_up_card: Card
    chosen: ActionType
    correct: ActionType
    results: List[HandResult] = field(default_factory=list)

    @property
    def outcome_text(self) -> str:
        if not self.results:
            return "N/A"
        return " / ".join(result.value for result in self.results)


@dataclass(frozen=True)
class MistakeReview:
    index: int
    total: int
    hand_id: int
    player_cards: Tuple[Card, ...]
    dealer_up_card: Card
    chosen: ActionType
    correct: ActionType
    results: Tuple[HandResult, ...]
    outcome_text: str
    outcome_note: str
    explanation: str

    @property
    def is_first(self) -> bool:
        return self.index == 0

    @property
    def is_last(self) -> bool:
        return self.index == self.total - 1


def outcome_note(results: Iterable[HandResult]) -> str:
    results = tuple(results)
    if HandResult.WIN in results:
        return "(You got lucky!)"
    if HandResult.LOSS in results:
        return "(The wrong move cost you.)"
    return ""


class MistakeLog:
    """Append-only log of incorrect decisions for the current shoe."""

    def __init__(self):
        self._records: List[MistakeRecord] = []

    def record(
        self,
        hand_id: int,
        player_cards: Iterable[Card],
        dealer_up_card: Card,
        chosen: ActionType,
        correct: ActionType,
    ) -> MistakeRecord:
        mistake = MistakeRecord(
            hand_id=hand_id,
            player_cards=tuple(player_cards),
            dealer_up_card=dealer_up_card,
            chosen=chosen,
            correct=correct,
        )
        self._records.append(mistake)
        return mistake

    def annotate(self, hand_ids: Iterable[int], result: HandResult) -> int:
        """
        Attach a settled result to every mistake made on any of the given hands.

        Returns the number of records annotated.
        """
        ids = set(hand_ids)
        annotated = 0
        for mistake in self._records:
            if mistake.hand_id in ids:
                mistake.results.append(result)
                annotated += 1
        return annotated

    def review(self, index: int) -> MistakeReview:
        """Read-only view of one mistake with its explanation."""
        if not 0 <= index < len(self._records):
            raise IndexError(f"Mistake index {index} out of range (0-{len(self._records) - 1})")
        mistake = self._records[index]
        return MistakeReview(
            index=index,
            total=len(self._records),
            hand_id=mistake.hand_id,
            player_cards=mistake.player_cards,
            dealer_up_card=mistake.dealer_up_card,
            chosen=mistake.chosen,
            correct=mistake.correct,
            results=tuple(mistake.results),
            outcome_text=mistake.outcome_text,
            outcome_note=outcome_note(mistake.results),
            explanation=explain(mistake.player_cards, mistake.dealer_up_card, mistake.correct),
        )

    def clear(self) -> None:
        self._records.clear()

    def __getitem__(self, index: int) -> MistakeRecord:
        return self._records[index]

    def __iter__(self) -> Iterator[MistakeRecord]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)
