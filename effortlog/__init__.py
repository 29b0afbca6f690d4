"""Daily effort tracker application factory and bootstrap."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from flask import Flask, render_template, request

from effortlog.config import config_by_name
from effortlog.core.auth.csrf import generate_csrf_token
from effortlog.extensions import init_extensions, jwt, login_manager


def create_app(config_name: Optional[str] = None) -> Flask:
    """Create and configure the effort tracker Flask application."""
    env_name = (config_name or os.environ.get("APP_ENV") or "development").lower()
    project_root = Path(__file__).resolve().parent.parent
    instance_root = project_root / "instance"

    app = Flask(
        __name__,
        instance_path=str(instance_root),
        instance_relative_config=True,
        template_folder=str(Path(__file__).parent / "templates"),
    )
    config_cls = config_by_name.get(env_name, config_by_name["development"])
    app.config.from_object(config_cls)

    instance_root.mkdir(parents=True, exist_ok=True)

    # Normalize sqlite path to absolute to avoid "unable to open database file"
    db_uri = app.config.get("SQLALCHEMY_DATABASE_URI") or ""
    if db_uri.startswith("sqlite:///") and ":memory:" not in db_uri:
        db_path = db_uri.replace("sqlite:///", "", 1)
        abs_path = project_root / db_path
        abs_path.parent.mkdir(parents=True, exist_ok=True)
        app.config["SQLALCHEMY_DATABASE_URI"] = f"sqlite:///{abs_path}"

    _configure_logging(app)
    init_extensions(app)
    _register_blueprints(app)
    _register_error_handlers(app)
    _register_auth_handlers(app)

    @app.get("/health")
    def health():
        return {"ok": True}, 200

    from effortlog.scripts.create_user import register_commands

    register_commands(app)

    return app


def _configure_logging(app: Flask) -> None:
    level = str(app.config.get("LOG_LEVEL", "INFO")).upper()
    logging.getLogger("effortlog").setLevel(level)
    app.logger.setLevel(level)


def _register_blueprints(app: Flask) -> None:
    """Lazy import and register all controllers."""
    from effortlog.core.auth.controllers import auth_api_bp  # local import to avoid circulars
    from effortlog.core.auth.pages import auth_pages_bp
    from effortlog.domains.effort.controllers.effort_api import effort_api_bp
    from effortlog.domains.effort.controllers.effort_pages import effort_pages_bp

    app.register_blueprint(auth_pages_bp)
    app.register_blueprint(effort_pages_bp)
    app.register_blueprint(auth_api_bp, url_prefix="/api/auth")
    app.register_blueprint(effort_api_bp, url_prefix="/api/scores")


def _register_error_handlers(app: Flask) -> None:
    """JSON errors under /api/, a plain error page everywhere else."""
    from werkzeug.exceptions import HTTPException

    def _respond(code: int, error: str, title: str):
        if request.path.startswith("/api/"):
            return {"ok": False, "error": error}, code
        return render_template("error.html", code=code, title=title, error=error), code

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        return _respond(exc.code or 500, exc.description, exc.name)

    @app.errorhandler(Exception)
    def _generic_error(exc: Exception):
        app.logger.exception("Unhandled error: %s", exc)
        # In debug/testing, surface the exception message to speed up diagnosis
        if app.debug or app.testing:
            return _respond(500, str(exc), "Internal Server Error")
        return _respond(500, "unexpected_error", "Internal Server Error")


def _register_auth_handlers(app: Flask) -> None:
    """Login manager, JWT blocklist and template helpers."""
    login_manager.login_view = "auth_pages.login"
    login_manager.login_message = "Please sign in to continue."

    @login_manager.user_loader
    def _load_user(user_id: str):
        from effortlog.core.users.services import get_user

        return get_user(int(user_id)) if user_id else None

    @jwt.token_in_blocklist_loader
    def _token_revoked(_jwt_header, jwt_payload: dict) -> bool:
        from effortlog.core.auth.auth_service import is_token_revoked

        return is_token_revoked(jwt_payload.get("jti"))

    @app.context_processor
    def inject_csrf_token():
        return {"csrf_token": generate_csrf_token}
