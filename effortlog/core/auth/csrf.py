"""Session-bound CSRF tokens for form posts and cookie-less API calls."""

from __future__ import annotations

import secrets
from typing import Optional

from flask import request, session

CSRF_TOKEN_SESSION_KEY = "_csrf_token"
CSRF_HEADER = "X-CSRF-Token"
CSRF_FORM_FIELD = "csrf_token"


def generate_csrf_token() -> str:
    """Return the session's token, issuing one on first use."""
    token = session.get(CSRF_TOKEN_SESSION_KEY)
    if not token:
        token = secrets.token_hex(32)
        session[CSRF_TOKEN_SESSION_KEY] = token
    return token


def discard_csrf_token() -> None:
    """Forget the session's token so the next page issues a fresh one."""
    session.pop(CSRF_TOKEN_SESSION_KEY, None)


def submitted_csrf_token() -> str:
    """Token sent with the current request: header first, then form field."""
    return request.headers.get(CSRF_HEADER) or request.form.get(CSRF_FORM_FIELD) or ""


def validate_csrf_token(token: Optional[str] = None) -> bool:
    """Compare ``token`` (or the submitted one) against the session's token."""
    if token is None:
        token = submitted_csrf_token()
    expected = session.get(CSRF_TOKEN_SESSION_KEY)
    if not token or not expected:
        return False
    return secrets.compare_digest(token, expected)
