"""Effort entry request/response schemas."""

from __future__ import annotations

from typing import Any, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from effortlog.core.auth.schemas import jsonable_errors


class EntryParseError(ValueError):
    """Submitted payload could not be read as an effort entry."""

    code = "validation_error"

    def __init__(self, details: list[dict]):
        super().__init__(self.code)
        self.details = details

    @property
    def message(self) -> str:
        if not self.details:
            return "invalid input"
        first = self.details[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or "input"
        return f"{field}: {first.get('msg', 'invalid')}"


class EffortEntryCreate(BaseModel):
    """Proposed entry. Score bounds are a ledger rule and are not checked here."""

    model_config = ConfigDict(populate_by_name=True)

    score: int
    description: Optional[str] = None
    time_spent: Optional[int] = Field(default=None, ge=0, alias="timeSpent")

    @field_validator("score", "time_spent", mode="before")
    @classmethod
    def blank_numbers(cls, v: Any) -> Any:
        if isinstance(v, bool):
            raise ValueError("Input should be a valid integer, not a boolean")
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @field_validator("description", mode="before")
    @classmethod
    def blank_description(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip() or None
        return v


def parse_entry_payload(payload: Any) -> EffortEntryCreate:
    """Validate a form or JSON mapping into an EffortEntryCreate."""
    if not isinstance(payload, Mapping):
        raise EntryParseError(
            [{"type": "model_type", "loc": (), "msg": "Input should be an object", "input": repr(payload)}]
        )
    try:
        return EffortEntryCreate.model_validate(dict(payload))
    except ValidationError as exc:
        raise EntryParseError(jsonable_errors(exc)) from exc


class EffortEntryResponse(BaseModel):
    id: int
    score: int
    description: Optional[str]
    time_spent: Optional[int]
    date: str
    created_at: str
    updated_at: str


class EffortStats(BaseModel):
    total_score: int
    average_score: str
    average_time_spent: str
    count: int


class EffortWindowResponse(BaseModel):
    ok: bool = True
    items: List[EffortEntryResponse]
    stats: EffortStats
