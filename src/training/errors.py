from game_mechanics.rules import ConfigurationError
from game_mechanics.shoe import ShoeExhaustedError


class TrainerError(Exception):
    """Base class for errors raised by the training session."""


class IllegalActionError(TrainerError, ValueError):
    """An action that is not legal for the current hand, or no hand awaits a decision."""


class SessionStateError(TrainerError, RuntimeError):
    """An operation called at a point of the session where it is not allowed."""


__all__ = [
    "ConfigurationError",
    "IllegalActionError",
    "SessionStateError",
    "ShoeExhaustedError",
    "TrainerError",
]
