"""Typed schemas for user IO."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from effortlog.core.users.models import User


class UserResponse(BaseModel):
    # Response should not re-validate persisted emails.
    id: int
    email: str
    is_active: bool
    created_at: str

    model_config = ConfigDict(from_attributes=True)


def serialize_user(user: "User") -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        is_active=user.is_active,
        created_at=user.created_at.isoformat() if user.created_at else "",
    )
