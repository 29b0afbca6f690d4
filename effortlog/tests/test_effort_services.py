"""Effort storage service: validated append, windowed listing and delete."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from unittest.mock import patch

import pytest

pytestmark = pytest.mark.integration

from effortlog.domains.effort.models import EffortEntry
from effortlog.domains.effort.schemas.effort_schemas import EffortEntryCreate
from effortlog.domains.effort.services import effort_service
from effortlog.domains.effort.services.ledger import InsufficientBalanceError, OutOfRangeError
from effortlog.extensions import db


def _add(user_id, score, days_ago=0, time_spent=None):
    """Insert an entry directly, bypassing the ledger, at a fixed past date."""
    stamp = datetime.utcnow() - timedelta(days=days_ago)
    entry = EffortEntry(user_id=user_id, score=score, time_spent=time_spent, date=stamp)
    db.session.add(entry)
    db.session.commit()
    return entry


def test_create_entry_persists_payload(app, user_id):
    with app.app_context():
        entry = effort_service.create_entry(
            user_id, EffortEntryCreate(score=4, description="Read a chapter", time_spent=30)
        )
        assert entry.id is not None
        stored = db.session.get(EffortEntry, entry.id)
        assert stored.user_id == user_id
        assert stored.score == 4
        assert stored.description == "Read a chapter"
        assert stored.time_spent == 30
        assert stored.date is not None


def test_create_entry_rejects_out_of_range(app, user_id):
    with app.app_context():
        with pytest.raises(OutOfRangeError):
            effort_service.create_entry(user_id, EffortEntryCreate(score=11))
        assert EffortEntry.query.count() == 0


def test_create_entry_rejects_negative_balance(app, user_id):
    with app.app_context():
        effort_service.create_entry(user_id, EffortEntryCreate(score=3))
        with pytest.raises(InsufficientBalanceError):
            effort_service.create_entry(user_id, EffortEntryCreate(score=-5))
        entry = effort_service.create_entry(user_id, EffortEntryCreate(score=-3))
        assert entry.score == -3
        assert EffortEntry.query.filter_by(user_id=user_id).count() == 2


def test_balance_check_uses_full_history_not_window(app, user_id):
    with app.app_context():
        # Oldest entries hold the positive balance; the ten newest sum to zero.
        _add(user_id, 5, days_ago=30)
        for i in range(10):
            _add(user_id, 0, days_ago=i)
        window = effort_service.recent_entries(user_id)
        assert sum(e.score for e in window) == 0
        entry = effort_service.create_entry(user_id, EffortEntryCreate(score=-5))
        assert entry.score == -5


def test_balance_is_per_user(app, make_user):
    first = make_user("first@example.com")
    second = make_user("second@example.com")
    with app.app_context():
        _add(first, 10)
        with pytest.raises(InsufficientBalanceError):
            effort_service.create_entry(second, EffortEntryCreate(score=-1))


def test_create_entry_for_unknown_user(app):
    with app.app_context():
        with pytest.raises(LookupError):
            effort_service.create_entry(424242, EffortEntryCreate(score=1))


def test_rejection_is_logged(app, user_id, caplog):
    caplog.set_level(logging.INFO, logger="effortlog")
    with app.app_context():
        with pytest.raises(InsufficientBalanceError):
            effort_service.create_entry(user_id, EffortEntryCreate(score=-1))
    assert "insufficient_balance" in caplog.text


def test_list_entries_newest_first(app, user_id):
    with app.app_context():
        _add(user_id, 1, days_ago=3)
        _add(user_id, 2, days_ago=1)
        _add(user_id, 3, days_ago=2)
        scores = [e.score for e in effort_service.list_entries(user_id)]
        assert scores == [2, 3, 1]


def test_recent_entries_capped_by_window(app, user_id):
    with app.app_context():
        for i in range(12):
            _add(user_id, i % 3, days_ago=i)
        assert len(effort_service.list_entries(user_id)) == 12
        recent = effort_service.recent_entries(user_id)
        assert len(recent) == 10
        assert recent[0].date > recent[-1].date
        assert len(effort_service.recent_entries(user_id, window=3)) == 3


def test_window_size_follows_config(app, user_id):
    app.config["EFFORT_RECENT_WINDOW"] = 2
    with app.app_context():
        for i in range(4):
            _add(user_id, 1, days_ago=i)
        assert len(effort_service.recent_entries(user_id)) == 2


def test_list_entries_isolated_per_user(app, make_user):
    owner = make_user("owner@example.com")
    other = make_user("other@example.com")
    with app.app_context():
        _add(owner, 4)
        assert effort_service.list_entries(other) == []


def test_delete_own_entry(app, user_id):
    with app.app_context():
        entry = _add(user_id, 2)
        assert effort_service.delete_entry(user_id, entry.id) is True
        assert db.session.get(EffortEntry, entry.id) is None


def test_delete_other_users_entry_refused(app, make_user):
    owner = make_user("owner@example.com")
    intruder = make_user("intruder@example.com")
    with app.app_context():
        entry = _add(owner, 2)
        assert effort_service.delete_entry(intruder, entry.id) is False
        assert db.session.get(EffortEntry, entry.id) is not None


def test_delete_missing_entry(app, user_id):
    with app.app_context():
        assert effort_service.delete_entry(user_id, 99999) is False


def test_delete_does_not_recheck_ledger(app, user_id):
    with app.app_context():
        first = effort_service.create_entry(user_id, EffortEntryCreate(score=5))
        effort_service.create_entry(user_id, EffortEntryCreate(score=-5))
        assert effort_service.delete_entry(user_id, first.id) is True
        remaining = effort_service.list_entries(user_id)
        assert sum(e.score for e in remaining) == -5


def test_create_entry_locks_user_row_first(app, user_id):
    with app.app_context():
        with patch.object(effort_service, "lock_user", wraps=effort_service.lock_user) as lock:
            effort_service.create_entry(user_id, EffortEntryCreate(score=1))
        lock.assert_called_once_with(user_id)
