from enum import Enum


class ActionType(Enum):
    HIT = "hit"
    STAND = "stand"
    DOUBLE = "double"
    SPLIT = "split"
    SURRENDER = "surrender"

    @property
    def code(self) -> str:
        """Single-letter chart code (H, S, D, P, R)"""
        return _CODES[self]

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @classmethod
    def from_code(cls, code: str) -> "ActionType":
        """Parse a chart code or action name, e.g. 'P' or 'split'"""
        normalized = code.strip().lower()
        for action, action_code in _CODES.items():
            if normalized in (action.value, action_code.lower()):
                return action
        raise ValueError(f"Unknown action: {code!r}")


_CODES = {
    ActionType.HIT: "H",
    ActionType.STAND: "S",
    ActionType.DOUBLE: "D",
    ActionType.SPLIT: "P",
    ActionType.SURRENDER: "R",
}
