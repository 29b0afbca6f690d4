"""Authentication service layer."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from flask_jwt_extended import create_access_token, create_refresh_token, decode_token

from effortlog.core.auth.models import JWTBlocklist, SessionToken
from effortlog.core.auth.password import verify_password
from effortlog.core.auth.schemas import RegisterRequest
from effortlog.core.users.models import User
from effortlog.core.users.services import create_user, find_user_by_email
from effortlog.extensions import db

logger = logging.getLogger(__name__)


def authenticate_user(email: str, password: str) -> Optional[User]:
    """Return the user if credentials are valid."""
    user = find_user_by_email(email)
    if not user or not user.is_active:
        return None
    if not verify_password(password, user.password_hash):
        logger.info("Failed login for %s", email)
        return None
    return user


def register_user(payload: RegisterRequest) -> User:
    """Create an account from a validated registration payload."""
    return create_user(payload.email, payload.password)


def issue_tokens(user: User) -> dict[str, str]:
    """Create access and refresh tokens for a user."""
    identity = str(user.id)
    access_token = create_access_token(identity=identity)
    refresh_token = create_refresh_token(identity=identity)

    # Persist refresh jti for revocation checks
    decoded_refresh = decode_token(refresh_token)
    expires = decoded_refresh.get("exp")
    db.session.add(
        SessionToken(
            user_id=user.id,
            jti=decoded_refresh.get("jti"),
            expires_at=datetime.utcfromtimestamp(expires) if expires else None,
        )
    )
    db.session.commit()

    return {"access_token": access_token, "refresh_token": refresh_token}


def revoke_token(jti: str, user_id: Optional[int] = None) -> None:
    """Revoke a token by JTI."""
    token = SessionToken.query.filter_by(jti=jti).first()
    if token:
        token.revoked = True
    if not JWTBlocklist.query.filter_by(jti=jti).first():
        db.session.add(JWTBlocklist(jti=jti, created_by=user_id))
    db.session.commit()


def is_token_revoked(jti: Optional[str]) -> bool:
    if not jti:
        return False
    return JWTBlocklist.query.filter_by(jti=jti).first() is not None
