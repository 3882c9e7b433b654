"""Content calendar schemas."""

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

ScheduleStatus = Literal["draft", "scheduled", "published"]


def _clean_keyword(value: str) -> str:
    cleaned = " ".join(value.split())
    if not cleaned:
        raise ValueError("keyword must not be empty")
    return cleaned


class ScheduleItemResponse(BaseModel):
    """A keyword on the calendar."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    keyword: str
    assigned_date: date | None = None
    status: ScheduleStatus
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class DraftKeywordCreate(BaseModel):
    keyword: str = Field(max_length=255)

    @field_validator("keyword")
    @classmethod
    def validate_keyword(cls, value: str) -> str:
        return _clean_keyword(value)


class ScheduleKeywordRequest(BaseModel):
    keyword: str = Field(max_length=255)
    assigned_date: date
    notes: str | None = None

    @field_validator("keyword")
    @classmethod
    def validate_keyword(cls, value: str) -> str:
        return _clean_keyword(value)


class ScheduleItemUpdate(BaseModel):
    """Partial update; only fields that are set are applied."""

    keyword: str | None = Field(default=None, max_length=255)
    assigned_date: date | None = None
    status: ScheduleStatus | None = None
    notes: str | None = None

    @field_validator("keyword")
    @classmethod
    def validate_keyword(cls, value: str | None) -> str | None:
        return None if value is None else _clean_keyword(value)


class MonthView(BaseModel):
    """Calendar page: unassigned drafts plus the month's dated items."""

    year: int
    month: int = Field(ge=1, le=12)
    drafts: list[ScheduleItemResponse] = Field(default_factory=list)
    items: list[ScheduleItemResponse] = Field(default_factory=list)
    unpublished_count: int = 0
