"""Effort entry storage: listing, validated append and owner-scoped delete."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from flask import current_app

from effortlog.core.users.services import lock_user
from effortlog.domains.effort.models import EffortEntry
from effortlog.domains.effort.schemas.effort_schemas import EffortEntryCreate
from effortlog.domains.effort.services import ledger
from effortlog.extensions import db

logger = logging.getLogger(__name__)

DEFAULT_RECENT_WINDOW = 10


def list_entries(user_id: int, limit: Optional[int] = None) -> List[EffortEntry]:
    """Entries for a user, newest first; the full history when ``limit`` is None."""
    query = EffortEntry.query.filter_by(user_id=user_id).order_by(EffortEntry.date.desc(), EffortEntry.id.desc())
    if limit is not None:
        query = query.limit(max(limit, 0))
    return query.all()


def recent_entries(user_id: int, window: Optional[int] = None) -> List[EffortEntry]:
    if window is None:
        window = current_app.config.get("EFFORT_RECENT_WINDOW", DEFAULT_RECENT_WINDOW)
    return list_entries(user_id, limit=window)


def get_entry(user_id: int, entry_id: int) -> Optional[EffortEntry]:
    return EffortEntry.query.filter_by(id=entry_id, user_id=user_id).first()


def create_entry(user_id: int, payload: EffortEntryCreate) -> EffortEntry:
    """Append an entry if the ledger accepts it.

    The user row stays locked from the balance read until commit so two
    submissions for the same user cannot both pass against a stale total.
    Raises ledger.LedgerError on rejection.
    """
    if lock_user(user_id) is None:
        db.session.rollback()
        raise LookupError("user_not_found")
    history = list_entries(user_id)
    try:
        ledger.validate_entry(history, payload)
    except ledger.LedgerError as exc:
        db.session.rollback()
        logger.info("Rejected entry for user %s: %s (score=%s)", user_id, exc.code, payload.score)
        raise

    now = datetime.utcnow()
    entry = EffortEntry(
        user_id=user_id,
        score=payload.score,
        description=payload.description,
        time_spent=payload.time_spent,
        date=now,
        created_at=now,
        updated_at=now,
    )
    db.session.add(entry)
    db.session.commit()
    logger.info("Recorded entry %s for user %s (score=%s)", entry.id, user_id, entry.score)
    return entry


def delete_entry(user_id: int, entry_id: int) -> bool:
    """Delete one of the user's own entries. The ledger is not re-checked."""
    entry = get_entry(user_id, entry_id)
    if not entry:
        return False
    db.session.delete(entry)
    db.session.commit()
    logger.info("Deleted entry %s for user %s", entry_id, user_id)
    return True
