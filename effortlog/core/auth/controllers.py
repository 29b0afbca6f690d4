"""Auth HTTP controllers (JSON API)."""

from __future__ import annotations

from flask import Blueprint, jsonify, request, session
from flask_jwt_extended import create_access_token, get_jwt, get_jwt_identity, jwt_required
from pydantic import ValidationError

from effortlog.core.auth.auth_service import authenticate_user, issue_tokens, register_user, revoke_token
from effortlog.core.auth.csrf import generate_csrf_token
from effortlog.core.auth.schemas import LoginRequest, RegisterRequest, jsonable_errors
from effortlog.core.users.schemas import serialize_user
from effortlog.core.users.services import get_user
from effortlog.core.utils.decorators import csrf_protected
from effortlog.extensions import limiter

auth_api_bp = Blueprint("auth_api", __name__)


def _token_response(user, status: int = 200):
    tokens = issue_tokens(user)
    return (
        jsonify(
            {
                "ok": True,
                **tokens,
                "csrf_token": generate_csrf_token(),
                "user": serialize_user(user).model_dump(),
            }
        ),
        status,
    )


@auth_api_bp.post("/register")
@limiter.limit("5/minute")
def register():
    payload = request.get_json(silent=True) or {}
    try:
        data = RegisterRequest.model_validate(payload)
    except ValidationError as exc:
        return jsonify({"ok": False, "error": "bad_request", "details": jsonable_errors(exc)}), 400
    try:
        user = register_user(data)
    except ValueError as exc:
        code = str(exc)
        if code == "email_already_exists":
            return jsonify({"ok": False, "error": code}), 400
        return jsonify({"ok": False, "error": "registration_failed"}), 400
    session.clear()
    return _token_response(user, 201)


@auth_api_bp.post("/login")
@limiter.limit("10/minute")
def login():
    # Ensure login is stateless even if a stale Flask session cookie is present.
    session.clear()
    payload = request.get_json(silent=True) or {}
    try:
        data = LoginRequest.model_validate(payload)
    except ValidationError as exc:
        return jsonify({"ok": False, "error": "bad_request", "details": jsonable_errors(exc)}), 400
    user = authenticate_user(data.email, data.password)
    if not user:
        return jsonify({"ok": False, "error": "invalid_credentials"}), 401
    return _token_response(user)


@auth_api_bp.post("/refresh")
@jwt_required(refresh=True)
@limiter.limit("30/minute")
def refresh():
    identity = str(get_jwt_identity())
    return jsonify({"ok": True, "access_token": create_access_token(identity=identity)})


@auth_api_bp.post("/logout")
@jwt_required(refresh=True)
@csrf_protected
def logout():
    jti = get_jwt().get("jti")
    if jti:
        revoke_token(jti, user_id=int(get_jwt_identity()))
    return jsonify({"ok": True})


@auth_api_bp.get("/me")
@jwt_required()
def me():
    user = get_user(int(get_jwt_identity()))
    if not user:
        return jsonify({"ok": False, "error": "not_found"}), 404
    return jsonify({"ok": True, "user": serialize_user(user).model_dump()})
