"""Content calendar: draft keywords and their scheduled publishing dates."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from blogpulse.core.exceptions import (
    DuplicateScheduleKeywordError,
    ScheduleItemNotFoundError,
    ValidationError,
)
from blogpulse.repositories.blog_repository import ScheduleRepository
from blogpulse.schemas.schedule import (
    MonthView,
    ScheduleItemResponse,
    ScheduleItemUpdate,
)

logger = logging.getLogger(__name__)


def _month_bounds(year: int, month: int) -> tuple[date, date]:
    if not 1 <= month <= 12:
        raise ValidationError(f"Invalid month: {month}")
    start = date(year, month, 1)
    end = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
    return start, end


class ContentCalendarService:
    """Keyword scheduling for one repository.

    A keyword appears at most once per user, compared case-insensitively.
    Drafts have no date; scheduling a keyword gives it a date and the
    ``scheduled`` status.
    """

    def __init__(self, repository: ScheduleRepository) -> None:
        self.repository = repository

    async def _require(self, user_id: str, item_id: str) -> Any:
        item = await self.repository.get(user_id, item_id)
        if item is None:
            raise ScheduleItemNotFoundError(item_id)
        return item

    async def add_draft_keyword(self, user_id: str, keyword: str) -> ScheduleItemResponse:
        if await self.repository.find_by_keyword(user_id, keyword) is not None:
            raise DuplicateScheduleKeywordError(keyword)

        item = await self.repository.add(user_id, keyword=keyword, status="draft")
        logger.info("Draft keyword added", extra={"user_id": user_id, "keyword": keyword})
        return ScheduleItemResponse.model_validate(item)

    async def remove_draft_keyword(self, user_id: str, keyword: str) -> None:
        item = await self.repository.find_by_keyword(user_id, keyword)
        if item is None or item.status != "draft" or item.assigned_date is not None:
            raise ScheduleItemNotFoundError(keyword)
        await self.repository.delete(item)

    async def schedule_keyword(
        self,
        user_id: str,
        keyword: str,
        assigned_date: date,
        notes: str | None = None,
    ) -> ScheduleItemResponse:
        """Put ``keyword`` on ``assigned_date``, promoting an existing draft."""
        existing = await self.repository.find_by_keyword(user_id, keyword)
        if existing is None:
            item = await self.repository.add(
                user_id,
                keyword=keyword,
                status="scheduled",
                assigned_date=assigned_date,
                notes=notes,
            )
        else:
            values: dict[str, Any] = {"assigned_date": assigned_date}
            if existing.status == "draft":
                values["status"] = "scheduled"
            if notes is not None:
                values["notes"] = notes
            item = await self.repository.update(existing, **values)

        logger.info(
            "Keyword scheduled",
            extra={"user_id": user_id, "keyword": keyword, "date": assigned_date.isoformat()},
        )
        return ScheduleItemResponse.model_validate(item)

    async def revert_to_draft(self, user_id: str, item_id: str) -> ScheduleItemResponse:
        item = await self._require(user_id, item_id)
        item = await self.repository.update(item, status="draft", assigned_date=None)
        return ScheduleItemResponse.model_validate(item)

    async def update_item(
        self,
        user_id: str,
        item_id: str,
        patch: ScheduleItemUpdate,
    ) -> ScheduleItemResponse:
        item = await self._require(user_id, item_id)
        values = patch.model_dump(exclude_unset=True)
        # keyword and status are not nullable; an explicit null leaves them as is.
        for field in ("keyword", "status"):
            if field in values and values[field] is None:
                del values[field]

        keyword = values.get("keyword")
        if keyword and keyword.lower() != item.keyword.lower():
            if await self.repository.find_by_keyword(user_id, keyword) is not None:
                raise DuplicateScheduleKeywordError(keyword)

        status = values.get("status", item.status)
        assigned = values.get("assigned_date", item.assigned_date)
        if status != "draft" and assigned is None:
            raise ValidationError("Scheduled and published items need an assigned date")

        if values:
            item = await self.repository.update(item, **values)
        return ScheduleItemResponse.model_validate(item)

    async def delete_item(self, user_id: str, item_id: str) -> None:
        item = await self._require(user_id, item_id)
        await self.repository.delete(item)

    async def get_month_view(self, user_id: str, year: int, month: int) -> MonthView:
        start, end = _month_bounds(year, month)
        drafts = await self.repository.list_drafts(user_id)
        items = await self.repository.list_between(user_id, start, end)
        unpublished = await self.repository.count_unpublished(user_id)
        return MonthView(
            year=year,
            month=month,
            drafts=[ScheduleItemResponse.model_validate(d) for d in drafts],
            items=[ScheduleItemResponse.model_validate(i) for i in items],
            unpublished_count=unpublished,
        )
