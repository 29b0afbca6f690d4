"""Effort tracker HTML pages."""

from __future__ import annotations

from flask import Blueprint, abort, flash, redirect, render_template, request, url_for

from effortlog.core.utils.decorators import csrf_protected, with_page_user
from effortlog.domains.effort.schemas.effort_schemas import EntryParseError, parse_entry_payload
from effortlog.domains.effort.services import effort_service, stats
from effortlog.domains.effort.services.ledger import SCORE_MAX, SCORE_MIN, LedgerError

effort_pages_bp = Blueprint("effort_pages", __name__)


def _render_dashboard(user_id: int, *, error: str | None = None, form: dict | None = None, status: int = 200):
    entries = effort_service.recent_entries(user_id)
    return (
        render_template(
            "effort/index.html",
            entries=entries,
            stats=stats.summarize(entries),
            error=error,
            form=form or {},
            score_min=SCORE_MIN,
            score_max=SCORE_MAX,
        ),
        status,
    )


@effort_pages_bp.get("/")
@with_page_user
def dashboard(user_id: int):
    return _render_dashboard(user_id)


@effort_pages_bp.post("/entries")
@with_page_user
@csrf_protected
def create_entry(user_id: int):
    form = request.form.to_dict()
    form.pop("csrf_token", None)
    try:
        data = parse_entry_payload(form)
        effort_service.create_entry(user_id, data)
    except EntryParseError as exc:
        return _render_dashboard(user_id, error=exc.message, form=form, status=400)
    except LedgerError as exc:
        return _render_dashboard(user_id, error=exc.message, form=form, status=400)
    flash("Effort recorded.")
    return redirect(url_for("effort_pages.dashboard"))


@effort_pages_bp.post("/entries/<int:entry_id>/delete")
@with_page_user
@csrf_protected
def delete_entry(user_id: int, entry_id: int):
    if not effort_service.delete_entry(user_id, entry_id):
        abort(404, description="not_found")
    flash("Entry deleted.")
    return redirect(url_for("effort_pages.dashboard"))
