"""Ledger rules for appending effort entries.

A user's scores form a running balance. New entries must stay within the
allowed score range and must not push the balance over the user's entire
history below zero. Deletions are not re-checked.
"""

from __future__ import annotations

from typing import Iterable, Protocol

SCORE_MIN = -10
SCORE_MAX = 10


class _Scored(Protocol):
    score: int


class _Proposed(Protocol):
    score: int


class LedgerError(ValueError):
    """Base class for rejected entries; ``code`` is the machine-readable reason."""

    code = "ledger_error"
    message = "entry rejected"

    def __init__(self, message: str | None = None):
        if message:
            self.message = message
        super().__init__(self.code)


class OutOfRangeError(LedgerError):
    code = "score_out_of_range"
    message = f"score must be within [{SCORE_MIN}, {SCORE_MAX}]"


class InsufficientBalanceError(LedgerError):
    code = "insufficient_balance"
    message = "effective balance would go negative"


def ledger_balance(entries: Iterable[_Scored]) -> int:
    """Sum of scores over every entry supplied."""
    return sum(entry.score for entry in entries)


def validate_entry(existing_entries: Iterable[_Scored], proposed: _Proposed) -> None:
    """Raise a LedgerError if ``proposed`` may not be appended to ``existing_entries``.

    ``existing_entries`` must be the user's full history, not a display window.
    The range check always wins over the balance check.
    """
    score = proposed.score
    if score < SCORE_MIN or score > SCORE_MAX:
        raise OutOfRangeError()
    if ledger_balance(existing_entries) + score < 0:
        raise InsufficientBalanceError()
