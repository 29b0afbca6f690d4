"""Auth HTML pages: session login, registration and logout."""

from __future__ import annotations

from urllib.parse import urlsplit

from flask import Blueprint, flash, redirect, render_template, request, url_for
from flask_login import current_user, login_user, logout_user
from pydantic import ValidationError

from effortlog.core.auth.auth_service import authenticate_user, register_user
from effortlog.core.auth.csrf import discard_csrf_token
from effortlog.core.auth.schemas import LoginRequest, RegisterRequest, errors_by_field
from effortlog.core.utils.decorators import csrf_protected
from effortlog.extensions import limiter

auth_pages_bp = Blueprint("auth_pages", __name__)


def _safe_next(target: str | None) -> str:
    """Only follow relative, same-site redirect targets."""
    fallback = url_for("effort_pages.dashboard")
    if not target:
        return fallback
    parts = urlsplit(target)
    if parts.netloc and parts.netloc != request.host:
        return fallback
    if parts.scheme not in ("", "http", "https") or not parts.path.startswith("/") or parts.path.startswith("//"):
        return fallback
    return f"{parts.path}?{parts.query}" if parts.query else parts.path


@auth_pages_bp.get("/login")
def login():
    if current_user.is_authenticated:
        return redirect(url_for("effort_pages.dashboard"))
    return render_template("auth/login.html", errors={}, email="", next=request.args.get("next", ""))


@auth_pages_bp.post("/login")
@limiter.limit("10/minute")
@csrf_protected
def login_submit():
    form = request.form.to_dict()
    next_url = form.pop("next", "")
    try:
        data = LoginRequest.model_validate(form)
    except ValidationError as exc:
        return (
            render_template("auth/login.html", errors=errors_by_field(exc), email=form.get("email", ""), next=next_url),
            400,
        )
    user = authenticate_user(data.email, data.password)
    if not user:
        return (
            render_template(
                "auth/login.html",
                errors={"email": "Invalid email or password"},
                email=data.email,
                next=next_url,
            ),
            400,
        )
    login_user(user)
    return redirect(_safe_next(next_url))


@auth_pages_bp.get("/register")
def register():
    if current_user.is_authenticated:
        return redirect(url_for("effort_pages.dashboard"))
    return render_template("auth/register.html", errors={}, email="")


@auth_pages_bp.post("/register")
@limiter.limit("5/minute")
@csrf_protected
def register_submit():
    form = request.form.to_dict()
    # The form always carries a confirmation; a missing one counts as a mismatch.
    form.setdefault("confirmPassword", "")
    try:
        data = RegisterRequest.model_validate(form)
    except ValidationError as exc:
        return (
            render_template("auth/register.html", errors=errors_by_field(exc), email=form.get("email", "")),
            400,
        )
    try:
        user = register_user(data)
    except ValueError:
        return (
            render_template(
                "auth/register.html",
                errors={"email": "A user already exists with this email"},
                email=data.email,
            ),
            400,
        )
    login_user(user)
    return redirect(url_for("effort_pages.dashboard"))


@auth_pages_bp.post("/logout")
@csrf_protected
def logout():
    logout_user()
    discard_csrf_token()
    flash("Signed out.")
    return redirect(url_for("auth_pages.login"))
