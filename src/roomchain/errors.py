from __future__ import annotations

from collections import Counter
from typing import Optional


class RoomchainError(Exception):
    """Base error for roomchain layout exceptions."""


class ConfigurationError(RoomchainError, ValueError):
    """Raised when board, range, or template settings cannot produce a layout."""


class OutOfBoundsError(RoomchainError, IndexError):
    """Raised when a tile outside the board is read or written directly."""


class GenerationFailedError(RoomchainError):
    """Raised when no valid layout was found within the attempt or time budget.

    ``reasons`` tallies why each discarded attempt was retried.
    """

    def __init__(self, message: str, attempts: int, reasons: Optional[Counter] = None) -> None:
        super().__init__(message)
        self.attempts = attempts
        self.reasons: Counter = reasons if reasons is not None else Counter()
