"""Effort score JSON API."""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from effortlog.core.utils.decorators import csrf_protected, with_api_user
from effortlog.domains.effort.mappers import map_entry
from effortlog.domains.effort.schemas.effort_schemas import EntryParseError, parse_entry_payload
from effortlog.domains.effort.services import effort_service, stats
from effortlog.domains.effort.services.ledger import LedgerError

effort_api_bp = Blueprint("effort_api", __name__)


@effort_api_bp.get("")
@with_api_user
def list_scores(user_id: int):
    entries = effort_service.recent_entries(user_id)
    return jsonify(
        {
            "ok": True,
            "items": [map_entry(e) for e in entries],
            "stats": stats.summarize(entries).model_dump(),
        }
    )


@effort_api_bp.post("")
@with_api_user
@csrf_protected
def create_score(user_id: int):
    payload = request.get_json(silent=True)
    if payload is None:
        payload = {}
    try:
        data = parse_entry_payload(payload)
        entry = effort_service.create_entry(user_id, data)
    except EntryParseError as exc:
        return jsonify({"ok": False, "error": exc.code, "details": exc.details}), 400
    except LedgerError as exc:
        return jsonify({"ok": False, "error": exc.code, "message": exc.message}), 400
    return jsonify({"ok": True, "entry": map_entry(entry)}), 201


@effort_api_bp.delete("/<int:entry_id>")
@with_api_user
@csrf_protected
def delete_score(user_id: int, entry_id: int):
    if not effort_service.delete_entry(user_id, entry_id):
        return jsonify({"ok": False, "error": "not_found"}), 404
    return jsonify({"ok": True})
