"""Shared fakes for unit tests."""

from __future__ import annotations

from datetime import date, datetime, timezone
from types import SimpleNamespace
from typing import Any

import pytest


class InMemoryScheduleRepository:
    """Dict-backed stand-in for ``SqlScheduleRepository``."""

    def __init__(self) -> None:
        self.items: dict[str, SimpleNamespace] = {}
        self._next_id = 1

    def _owned(self, user_id: str) -> list[SimpleNamespace]:
        return [item for item in self.items.values() if item.user_id == user_id]

    async def get(self, user_id: str, item_id: str) -> SimpleNamespace | None:
        item = self.items.get(item_id)
        return item if item is not None and item.user_id == user_id else None

    async def find_by_keyword(self, user_id: str, keyword: str) -> SimpleNamespace | None:
        for item in self._owned(user_id):
            if item.keyword.lower() == keyword.lower():
                return item
        return None

    async def list_drafts(self, user_id: str) -> list[SimpleNamespace]:
        return [
            item
            for item in self._owned(user_id)
            if item.status == "draft" and item.assigned_date is None
        ]

    async def list_between(self, user_id: str, start: date, end: date) -> list[SimpleNamespace]:
        return sorted(
            (
                item
                for item in self._owned(user_id)
                if item.assigned_date is not None and start <= item.assigned_date < end
            ),
            key=lambda item: item.assigned_date,
        )

    async def count_unpublished(self, user_id: str) -> int:
        return sum(1 for item in self._owned(user_id) if item.status != "published")

    async def add(
        self,
        user_id: str,
        *,
        keyword: str,
        status: str,
        assigned_date: date | None = None,
        notes: str | None = None,
    ) -> SimpleNamespace:
        now = datetime.now(timezone.utc)
        item = SimpleNamespace(
            id=f"item-{self._next_id}",
            user_id=user_id,
            keyword=keyword,
            status=status,
            assigned_date=assigned_date,
            notes=notes,
            created_at=now,
            updated_at=now,
        )
        self._next_id += 1
        self.items[item.id] = item
        return item

    async def update(self, item: SimpleNamespace, **values: Any) -> SimpleNamespace:
        for field, value in values.items():
            setattr(item, field, value)
        item.updated_at = datetime.now(timezone.utc)
        return item

    async def delete(self, item: SimpleNamespace) -> None:
        self.items.pop(item.id, None)


@pytest.fixture
def schedule_repository() -> InMemoryScheduleRepository:
    return InMemoryScheduleRepository()
