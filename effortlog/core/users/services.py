"""User service layer."""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import func

from effortlog.core.auth.password import hash_password
from effortlog.core.users.models import User
from effortlog.extensions import db

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def get_user(user_id: int) -> Optional[User]:
    return db.session.get(User, user_id)


def find_user_by_email(email: str) -> Optional[User]:
    return User.query.filter(func.lower(User.email) == normalize_email(email)).first()


def create_user(email: str, password: str) -> User:
    """Create an account; raises ValueError("email_already_exists") on duplicates."""
    normalized = normalize_email(email)
    if find_user_by_email(normalized):
        raise ValueError("email_already_exists")
    user = User(email=normalized, password_hash=hash_password(password))
    db.session.add(user)
    db.session.commit()
    logger.info("Created user %s (id=%s)", user.email, user.id)
    return user


def lock_user(user_id: int) -> Optional[User]:
    """Load the user row with a write lock held until the transaction ends."""
    return User.query.filter_by(id=user_id).with_for_update().first()
