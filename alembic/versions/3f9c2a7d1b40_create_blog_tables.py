"""create blog analytics, seo score and schedule tables

Revision ID: 3f9c2a7d1b40
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f9c2a7d1b40"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def _json_list(name: str) -> sa.Column:
    return sa.Column(
        name,
        postgresql.JSONB(astext_type=sa.Text()),
        server_default=sa.text("'[]'::jsonb"),
        nullable=False,
    )


def upgrade() -> None:
    op.create_table(
        "blog_analytics",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("wordpress_url", sa.Text(), nullable=False),
        sa.Column("total_posts", sa.Integer(), server_default="0", nullable=False),
        sa.Column("total_keywords", sa.Integer(), server_default="0", nullable=False),
        sa.Column("avg_words_per_post", sa.Integer(), server_default="0", nullable=False),
        sa.Column("growth_rate", sa.Integer(), server_default="0", nullable=False),
        sa.Column("keyword_diversity_score", sa.Integer(), server_default="0", nullable=False),
        sa.Column("content_gap_rate", sa.Integer(), server_default="0", nullable=False),
        _json_list("publication_trend"),
        _json_list("monthly_posts"),
        _json_list("top_keywords"),
        _json_list("category_stats"),
        _json_list("treatment_coverage"),
        sa.Column("last_updated", sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "wordpress_url", name="uq_blog_analytics_user_url"),
    )
    op.create_index("ix_blog_analytics_user_id", "blog_analytics", ["user_id"])

    op.create_table(
        "blog_seo_scores",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("post_id", sa.Integer(), nullable=False),
        sa.Column("post_title", sa.Text(), nullable=False),
        sa.Column("wordpress_url", sa.Text(), nullable=False),
        sa.Column("seo_score", sa.Integer(), server_default="0", nullable=False),
        sa.Column("word_count", sa.Integer(), server_default="0", nullable=False),
        sa.Column(
            "analysis",
            postgresql.JSONB(astext_type=sa.Text()),
            server_default=sa.text("'{}'::jsonb"),
            nullable=False,
        ),
        sa.Column("last_analyzed", sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "post_id", name="uq_blog_seo_scores_user_post"),
    )
    op.create_index("ix_blog_seo_scores_user_id", "blog_seo_scores", ["user_id"])

    op.create_table(
        "blog_schedules",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("keyword", sa.Text(), nullable=False),
        sa.Column("assigned_date", sa.Date(), nullable=True),
        sa.Column("status", sa.String(length=20), server_default="draft", nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "keyword", name="uq_blog_schedules_user_keyword"),
        sa.CheckConstraint(
            "status IN ('draft', 'scheduled', 'published')",
            name="ck_blog_schedules_status",
        ),
    )
    op.create_index("ix_blog_schedules_user_id", "blog_schedules", ["user_id"])
    op.create_index("ix_blog_schedules_status", "blog_schedules", ["status"])
    op.create_index("ix_blog_schedules_assigned_date", "blog_schedules", ["assigned_date"])


def downgrade() -> None:
    op.drop_index("ix_blog_schedules_assigned_date", table_name="blog_schedules")
    op.drop_index("ix_blog_schedules_status", table_name="blog_schedules")
    op.drop_index("ix_blog_schedules_user_id", table_name="blog_schedules")
    op.drop_table("blog_schedules")
    op.drop_index("ix_blog_seo_scores_user_id", table_name="blog_seo_scores")
    op.drop_table("blog_seo_scores")
    op.drop_index("ix_blog_analytics_user_id", table_name="blog_analytics")
    op.drop_table("blog_analytics")
