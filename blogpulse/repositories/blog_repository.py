"""Repositories for blog analytics, post SEO scores and schedule items.

Every query is scoped to one owner ``user_id``.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Any, Protocol

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from blogpulse.models.blog import BlogAnalytics, BlogSchedule, BlogSeoScore
from blogpulse.schemas.analytics import DashboardAnalytics
from blogpulse.schemas.seo import SEOScoreAnalysis

logger = logging.getLogger(__name__)

_ANALYTICS_LIST_FIELDS = (
    "publication_trend",
    "monthly_posts",
    "top_keywords",
    "category_stats",
    "treatment_coverage",
)
_ANALYTICS_SCALAR_FIELDS = (
    "total_posts",
    "total_keywords",
    "avg_words_per_post",
    "growth_rate",
    "keyword_diversity_score",
    "content_gap_rate",
)


class AnalyticsRepository:
    """Stores one dashboard snapshot per (user, site)."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, user_id: str, wordpress_url: str) -> BlogAnalytics | None:
        result = await self.session.execute(
            select(BlogAnalytics).where(
                BlogAnalytics.user_id == user_id,
                BlogAnalytics.wordpress_url == wordpress_url,
            )
        )
        return result.scalar_one_or_none()

    async def upsert(self, user_id: str, analytics: DashboardAnalytics) -> BlogAnalytics:
        """Insert or replace the snapshot keyed by (user_id, wordpress_url)."""
        row = await self.get(user_id, analytics.wordpress_url)
        data = analytics.model_dump(mode="json")
        values: dict[str, Any] = {field: data[field] for field in _ANALYTICS_SCALAR_FIELDS}
        values.update({field: data[field] for field in _ANALYTICS_LIST_FIELDS})
        values["last_updated"] = analytics.last_updated or datetime.now(timezone.utc)

        if row is None:
            row = BlogAnalytics(user_id=user_id, wordpress_url=analytics.wordpress_url, **values)
            self.session.add(row)
        else:
            for field, value in values.items():
                setattr(row, field, value)

        await self.session.flush()
        logger.info(
            "Blog analytics saved",
            extra={"user_id": user_id, "wordpress_url": analytics.wordpress_url},
        )
        return row


class SeoScoreRepository:
    """Stores the latest SEO analysis per (user, post)."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, user_id: str, post_id: int) -> BlogSeoScore | None:
        result = await self.session.execute(
            select(BlogSeoScore).where(
                BlogSeoScore.user_id == user_id,
                BlogSeoScore.post_id == post_id,
            )
        )
        return result.scalar_one_or_none()

    async def list_for_posts(self, user_id: str, post_ids: list[int]) -> dict[int, BlogSeoScore]:
        """Stored scores keyed by post id; posts never scored are absent."""
        if not post_ids:
            return {}
        result = await self.session.execute(
            select(BlogSeoScore).where(
                BlogSeoScore.user_id == user_id,
                BlogSeoScore.post_id.in_(post_ids),
            )
        )
        return {row.post_id: row for row in result.scalars().all()}

    async def upsert(
        self,
        user_id: str,
        *,
        post_id: int,
        post_title: str,
        wordpress_url: str,
        word_count: int,
        analysis: SEOScoreAnalysis,
    ) -> BlogSeoScore:
        row = await self.get(user_id, post_id)
        values: dict[str, Any] = {
            "post_title": post_title,
            "wordpress_url": wordpress_url,
            "seo_score": analysis.score,
            "word_count": word_count,
            "analysis": analysis.model_dump(mode="json"),
            "last_analyzed": datetime.now(timezone.utc),
        }
        if row is None:
            row = BlogSeoScore(user_id=user_id, post_id=post_id, **values)
            self.session.add(row)
        else:
            for field, value in values.items():
                setattr(row, field, value)

        await self.session.flush()
        return row


class ScheduleRepository(Protocol):
    """Storage used by the content calendar."""

    async def get(self, user_id: str, item_id: str) -> Any | None: ...

    async def find_by_keyword(self, user_id: str, keyword: str) -> Any | None: ...

    async def list_drafts(self, user_id: str) -> list[Any]: ...

    async def list_between(self, user_id: str, start: date, end: date) -> list[Any]: ...

    async def count_unpublished(self, user_id: str) -> int: ...

    async def add(
        self,
        user_id: str,
        *,
        keyword: str,
        status: str,
        assigned_date: date | None = None,
        notes: str | None = None,
    ) -> Any: ...

    async def update(self, item: Any, **values: Any) -> Any: ...

    async def delete(self, item: Any) -> None: ...


class SqlScheduleRepository:
    """``ScheduleRepository`` backed by the ``blog_schedules`` table."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, user_id: str, item_id: str) -> BlogSchedule | None:
        result = await self.session.execute(
            select(BlogSchedule).where(
                BlogSchedule.user_id == user_id,
                BlogSchedule.id == item_id,
            )
        )
        return result.scalar_one_or_none()

    async def find_by_keyword(self, user_id: str, keyword: str) -> BlogSchedule | None:
        result = await self.session.execute(
            select(BlogSchedule).where(
                BlogSchedule.user_id == user_id,
                func.lower(BlogSchedule.keyword) == keyword.lower(),
            )
        )
        return result.scalars().first()

    async def list_drafts(self, user_id: str) -> list[BlogSchedule]:
        result = await self.session.execute(
            select(BlogSchedule)
            .where(
                BlogSchedule.user_id == user_id,
                BlogSchedule.status == "draft",
                BlogSchedule.assigned_date.is_(None),
            )
            .order_by(BlogSchedule.created_at.desc())
        )
        return list(result.scalars().all())

    async def list_between(self, user_id: str, start: date, end: date) -> list[BlogSchedule]:
        """Items with ``start <= assigned_date < end``."""
        result = await self.session.execute(
            select(BlogSchedule)
            .where(
                BlogSchedule.user_id == user_id,
                BlogSchedule.assigned_date >= start,
                BlogSchedule.assigned_date < end,
            )
            .order_by(BlogSchedule.assigned_date.asc(), BlogSchedule.created_at.asc())
        )
        return list(result.scalars().all())

    async def count_unpublished(self, user_id: str) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(BlogSchedule)
            .where(
                BlogSchedule.user_id == user_id,
                BlogSchedule.status != "published",
            )
        )
        return int(result.scalar_one())

    async def add(
        self,
        user_id: str,
        *,
        keyword: str,
        status: str,
        assigned_date: date | None = None,
        notes: str | None = None,
    ) -> BlogSchedule:
        item = BlogSchedule(
            user_id=user_id,
            keyword=keyword,
            status=status,
            assigned_date=assigned_date,
            notes=notes,
        )
        self.session.add(item)
        await self.session.flush()
        await self.session.refresh(item)
        return item

    async def update(self, item: BlogSchedule, **values: Any) -> BlogSchedule:
        for field, value in values.items():
            setattr(item, field, value)
        await self.session.flush()
        await self.session.refresh(item)
        return item

    async def delete(self, item: BlogSchedule) -> None:
        await self.session.delete(item)
        await self.session.flush()
