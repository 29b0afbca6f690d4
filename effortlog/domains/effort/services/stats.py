"""Summary statistics over a window of effort entries."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Protocol, Sequence

from effortlog.domains.effort.schemas.effort_schemas import EffortStats


class _Entry(Protocol):
    score: int
    time_spent: Optional[int]


_ONE_DECIMAL = Decimal("0.1")
_WHOLE = Decimal("1")


def _format_mean(total: int, count: int, places: Decimal) -> str:
    mean = (Decimal(total) / Decimal(count)).quantize(places, rounding=ROUND_HALF_UP)
    if mean == 0:
        mean = abs(mean)
    return str(mean)


def total_score(entries: Sequence[_Entry]) -> int:
    return sum(entry.score for entry in entries)


def average_score(entries: Sequence[_Entry]) -> str:
    """Mean score to one decimal place; "0.0" for an empty window."""
    if not entries:
        return "0.0"
    return _format_mean(total_score(entries), len(entries), _ONE_DECIMAL)


def average_time_spent(entries: Sequence[_Entry]) -> str:
    """Mean of the recorded time_spent values, whole minutes; "0" if none recorded."""
    times = [entry.time_spent for entry in entries if entry.time_spent is not None]
    if not times:
        return "0"
    return _format_mean(sum(times), len(times), _WHOLE)


def summarize(entries: Sequence[_Entry]) -> EffortStats:
    return EffortStats(
        total_score=total_score(entries),
        average_score=average_score(entries),
        average_time_spent=average_time_spent(entries),
        count=len(entries),
    )
