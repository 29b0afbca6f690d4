"""Token bookkeeping models."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column

from effortlog.core.users.models import TimestampMixin
from effortlog.extensions import db


class SessionToken(db.Model, TimestampMixin):
    __tablename__ = "session_token"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(db.ForeignKey("user.id"), nullable=False, index=True)
    jti: Mapped[str] = mapped_column(db.String(64), nullable=False, unique=True)
    revoked: Mapped[bool] = mapped_column(default=False)
    expires_at: Mapped[datetime | None] = mapped_column(nullable=True)


class JWTBlocklist(db.Model, TimestampMixin):
    __tablename__ = "jwt_blocklist"

    id: Mapped[int] = mapped_column(primary_key=True)
    jti: Mapped[str] = mapped_column(db.String(64), unique=True, nullable=False)
    created_by: Mapped[int | None] = mapped_column(db.ForeignKey("user.id"))
