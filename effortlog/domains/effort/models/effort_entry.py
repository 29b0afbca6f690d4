"""Daily effort score entry."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column

from effortlog.extensions import db


class EffortEntry(db.Model):
    __tablename__ = "effort_entry"
    __table_args__ = (db.Index("ix_effort_entry_user_date", "user_id", "date"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(db.ForeignKey("user.id"), index=True, nullable=False)
    score: Mapped[int] = mapped_column(db.Integer, nullable=False)
    description: Mapped[str | None] = mapped_column(db.Text)
    time_spent: Mapped[int | None] = mapped_column(db.Integer)
    date: Mapped[datetime] = mapped_column(default=datetime.utcnow, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow)
