from __future__ import annotations


class DecisionError(Exception):
    """Base class for errors raised by the decision core."""


class NoMenusError(DecisionError):
    """The resolved candidate set is empty."""

    def __init__(self, message: str = "没有可选择的菜品") -> None:
        super().__init__(message)


class EmptyCandidatesError(DecisionError, ValueError):
    """The selector was called with zero candidates."""


class PersistenceError(DecisionError):
    """A storage-layer read or write failed."""
