"""Effort mappers for DTO responses."""

from __future__ import annotations

from effortlog.domains.effort.models import EffortEntry
from effortlog.domains.effort.schemas.effort_schemas import EffortEntryResponse


def map_entry(entry: EffortEntry) -> dict:
    return EffortEntryResponse(
        id=entry.id,
        score=entry.score,
        description=entry.description,
        time_spent=entry.time_spent,
        date=entry.date.isoformat() if entry.date else "",
        created_at=entry.created_at.isoformat() if entry.created_at else "",
        updated_at=entry.updated_at.isoformat() if entry.updated_at else "",
    ).model_dump()
