"""Reusable decorators for controllers."""

from __future__ import annotations

from functools import wraps
from typing import Callable, TypeVar

from flask import abort, current_app, jsonify, request
from flask_jwt_extended import get_jwt_identity, verify_jwt_in_request
from flask_login import current_user

from effortlog.core.auth.csrf import validate_csrf_token
from effortlog.extensions import login_manager

F = TypeVar("F", bound=Callable)


def csrf_protected(fn: F) -> F:
    """Validate CSRF token from header X-CSRF-Token or the csrf_token form field."""

    @wraps(fn)
    def wrapper(*args, **kwargs):  # type: ignore[misc]
        if not current_app.config.get("WTF_CSRF_ENABLED", True):
            return fn(*args, **kwargs)
        if not validate_csrf_token():
            if request.path.startswith("/api/"):
                return jsonify({"ok": False, "error": "csrf_failed"}), 403
            abort(403, description="csrf_failed")
        return fn(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def with_page_user(fn: F) -> F:
    """Require a logged-in session and pass its id to the view as ``user_id``."""

    @wraps(fn)
    def wrapper(*args, **kwargs):  # type: ignore[misc]
        if not current_user.is_authenticated:
            return login_manager.unauthorized()
        return fn(*args, user_id=int(current_user.get_id()), **kwargs)

    return wrapper  # type: ignore[return-value]


def with_api_user(fn: F) -> F:
    """Require a valid access token and pass its identity to the view as ``user_id``."""

    @wraps(fn)
    def wrapper(*args, **kwargs):  # type: ignore[misc]
        verify_jwt_in_request()
        return fn(*args, user_id=int(get_jwt_identity()), **kwargs)

    return wrapper  # type: ignore[return-value]
