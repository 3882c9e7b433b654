"""Content calendar endpoints.

Calendar errors (unknown item, duplicate keyword, missing date) propagate to
the application's domain error handler.
"""

from datetime import date

from fastapi import APIRouter, Query, status

from blogpulse.dependencies import Calendar, CurrentUser
from blogpulse.schemas.schedule import (
    DraftKeywordCreate,
    MonthView,
    ScheduleItemResponse,
    ScheduleItemUpdate,
    ScheduleKeywordRequest,
)

router = APIRouter()


@router.get("", response_model=MonthView)
async def month_view(
    current_user: CurrentUser,
    calendar: Calendar,
    year: int | None = Query(None, ge=2000, le=2100),
    month: int | None = Query(None, ge=1, le=12),
) -> MonthView:
    """Drafts plus the items scheduled in one month (current month by default)."""
    today = date.today()
    return await calendar.get_month_view(current_user.id, year or today.year, month or today.month)


@router.post("/drafts", response_model=ScheduleItemResponse, status_code=status.HTTP_201_CREATED)
async def add_draft(
    request: DraftKeywordCreate,
    current_user: CurrentUser,
    calendar: Calendar,
) -> ScheduleItemResponse:
    return await calendar.add_draft_keyword(current_user.id, request.keyword)


@router.delete("/drafts/{keyword}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_draft(
    keyword: str,
    current_user: CurrentUser,
    calendar: Calendar,
) -> None:
    await calendar.remove_draft_keyword(current_user.id, keyword)


@router.post("/schedule", response_model=ScheduleItemResponse)
async def schedule_keyword(
    request: ScheduleKeywordRequest,
    current_user: CurrentUser,
    calendar: Calendar,
) -> ScheduleItemResponse:
    """Assign a date to a keyword, promoting its draft if there is one."""
    return await calendar.schedule_keyword(
        current_user.id,
        request.keyword,
        request.assigned_date,
        request.notes,
    )


@router.post("/{item_id}/revert", response_model=ScheduleItemResponse)
async def revert_to_draft(
    item_id: str,
    current_user: CurrentUser,
    calendar: Calendar,
) -> ScheduleItemResponse:
    return await calendar.revert_to_draft(current_user.id, item_id)


@router.patch("/{item_id}", response_model=ScheduleItemResponse)
async def update_item(
    item_id: str,
    request: ScheduleItemUpdate,
    current_user: CurrentUser,
    calendar: Calendar,
) -> ScheduleItemResponse:
    return await calendar.update_item(current_user.id, item_id, request)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(
    item_id: str,
    current_user: CurrentUser,
    calendar: Calendar,
) -> None:
    await calendar.delete_item(current_user.id, item_id)
