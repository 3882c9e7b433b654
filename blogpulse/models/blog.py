"""Blog analytics, post SEO score and content schedule models."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from blogpulse.models.base import Base, OwnedMixin, TimestampMixin, UUIDMixin

SCHEDULE_STATUSES: tuple[str, ...] = ("draft", "scheduled", "published")


class BlogAnalytics(Base, UUIDMixin, OwnedMixin, TimestampMixin):
    """Latest dashboard snapshot per user and WordPress site."""

    __tablename__ = "blog_analytics"
    __table_args__ = (
        UniqueConstraint("user_id", "wordpress_url", name="uq_blog_analytics_user_url"),
    )

    wordpress_url: Mapped[str] = mapped_column(Text, nullable=False)

    # Scalar metrics
    total_posts: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_keywords: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    avg_words_per_post: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    growth_rate: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    keyword_diversity_score: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    content_gap_rate: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Chart data
    publication_trend: Mapped[list[dict[str, Any]]] = mapped_column(JSONB, default=list, nullable=False)
    monthly_posts: Mapped[list[dict[str, Any]]] = mapped_column(JSONB, default=list, nullable=False)
    top_keywords: Mapped[list[dict[str, Any]]] = mapped_column(JSONB, default=list, nullable=False)
    category_stats: Mapped[list[dict[str, Any]]] = mapped_column(JSONB, default=list, nullable=False)
    treatment_coverage: Mapped[list[dict[str, Any]]] = mapped_column(JSONB, default=list, nullable=False)

    last_updated: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class BlogSeoScore(Base, UUIDMixin, OwnedMixin, TimestampMixin):
    """Most recent SEO analysis of one post."""

    __tablename__ = "blog_seo_scores"
    __table_args__ = (
        UniqueConstraint("user_id", "post_id", name="uq_blog_seo_scores_user_post"),
    )

    post_id: Mapped[int] = mapped_column(Integer, nullable=False)
    post_title: Mapped[str] = mapped_column(Text, nullable=False)
    wordpress_url: Mapped[str] = mapped_column(Text, nullable=False)
    seo_score: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    word_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    analysis: Mapped[dict[str, Any]] = mapped_column(JSONB, default=dict, nullable=False)
    last_analyzed: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class BlogSchedule(Base, UUIDMixin, OwnedMixin, TimestampMixin):
    """A keyword on the content calendar; drafts have no assigned date."""

    __tablename__ = "blog_schedules"
    __table_args__ = (
        UniqueConstraint("user_id", "keyword", name="uq_blog_schedules_user_keyword"),
        CheckConstraint(
            "status IN (" + ", ".join(f"'{s}'" for s in SCHEDULE_STATUSES) + ")",
            name="ck_blog_schedules_status",
        ),
    )

    keyword: Mapped[str] = mapped_column(Text, nullable=False)
    assigned_date: Mapped[date | None] = mapped_column(Date, nullable=True, index=True)
    status: Mapped[str] = mapped_column(String(20), default="draft", nullable=False, index=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
