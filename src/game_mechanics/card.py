from dataclasses import dataclass
from typing import Dict, Tuple

RANKS: Tuple[str, ...] = ("2", "3", "4", "5", "6", "7", "8", "9", "T", "J", "Q", "K", "A")
SUITS: Dict[str, str] = {"♠": "black", "♣": "black", "♥": "red", "♦": "red"}
FACE_RANKS = ("T", "J", "Q", "K")

_LETTER_SUITS = {"S": "♠", "C": "♣", "H": "♥", "D": "♦"}


@dataclass(frozen=True)
class Card:
    """A single playing card. Only the rank matters for play; the suit is cosmetic."""

    rank: str
    suit: str = "♠"

    def __post_init__(self):
        if self.rank not in RANKS:
            raise ValueError(f"Invalid rank: {self.rank!r}")
        if self.suit not in SUITS:
            raise ValueError(f"Invalid suit: {self.suit!r}")

    @property
    def color(self) -> str:
        return SUITS[self.suit]

    @property
    def is_ace(self) -> bool:
        return self.rank == "A"

    @property
    def face_value(self) -> str:
        """Rank with J/Q/K folded into T, used as a strategy table key"""
        return "T" if self.rank in FACE_RANKS else self.rank

    @classmethod
    def parse(cls, code: str) -> "Card":
        """
        Parse a card code such as 'T♠', '10S', 'kh' or 'A'.

        The suit is optional and defaults to spades.
        """
        cleaned = code.strip().upper().replace(" ", "")
        if not cleaned:
            raise ValueError("Empty card code")

        suit = "♠"
        if cleaned[-1] in SUITS:
            suit = cleaned[-1]
            cleaned = cleaned[:-1]
        elif len(cleaned) > 1 and cleaned[-1] in _LETTER_SUITS:
            suit = _LETTER_SUITS[cleaned[-1]]
            cleaned = cleaned[:-1]

        rank = "T" if cleaned == "10" else cleaned
        return cls(rank, suit)

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"


def rank_value(card: Card) -> int:
    """T/J/Q/K count 10, an Ace counts 11, everything else its number."""
    if card.rank in FACE_RANKS:
        return 10
    if card.rank == "A":
        return 11
    return int(card.rank)


def count_tag(card: Card) -> int:
    """Hi-Lo tag: 2-6 are +1, 7-9 are 0, tens and Aces are -1."""
    if card.rank in ("2", "3", "4", "5", "6"):
        return 1
    if card.rank in FACE_RANKS or card.rank == "A":
        return -1
    return 0


def parse_cards(codes: str) -> Tuple[Card, ...]:
    """Parse a whitespace or comma separated list of card codes"""
    tokens = codes.replace(",", " ").split()
    return tuple(Card.parse(token) for token in tokens)
