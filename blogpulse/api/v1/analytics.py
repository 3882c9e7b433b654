"""Dashboard analytics endpoints."""

import dataclasses
import logging

from fastapi import APIRouter, Query

from blogpulse.core.exceptions import AnalyticsNotFoundError
from blogpulse.dependencies import Analytics, CurrentUser, Ingestion
from blogpulse.schemas.analytics import (
    AnalyticsRequest,
    DashboardAnalytics,
    DashboardInsightsResponse,
)
from blogpulse.services.ai_summary import analyze_dashboard_metrics
from blogpulse.services.blog_statistics import build_dashboard_analytics
from blogpulse.services.ingestion import IngestionConfig, get_blog_data

logger = logging.getLogger(__name__)

router = APIRouter()


def for_site(config: IngestionConfig, wordpress_url: str | None) -> IngestionConfig:
    """Point the ingestion config at ``wordpress_url`` when one is given."""
    if not wordpress_url:
        return config
    return dataclasses.replace(config, base_url=wordpress_url.strip().rstrip("/"))


async def load_snapshot(
    repository: Analytics,
    user_id: str,
    wordpress_url: str,
) -> DashboardAnalytics:
    row = await repository.get(user_id, wordpress_url)
    if row is None:
        raise AnalyticsNotFoundError(wordpress_url)
    return DashboardAnalytics.model_validate(row)


@router.post("/refresh", response_model=DashboardAnalytics)
async def refresh_analytics(
    request: AnalyticsRequest,
    current_user: CurrentUser,
    repository: Analytics,
    ingestion: Ingestion,
) -> DashboardAnalytics:
    """Re-ingest the blog, recompute the dashboard and store the snapshot."""
    config = for_site(ingestion, request.wordpress_url)
    blog_data = await get_blog_data(config)
    analytics = build_dashboard_analytics(
        blog_data,
        wordpress_url=config.base_url,
        treatments=config.treatments,
    )
    await repository.upsert(current_user.id, analytics)
    logger.info(
        "Dashboard analytics refreshed",
        extra={"user_id": current_user.id, "wordpress_url": config.base_url},
    )
    return analytics


@router.get("", response_model=DashboardAnalytics)
async def get_analytics(
    current_user: CurrentUser,
    repository: Analytics,
    ingestion: Ingestion,
    wordpress_url: str | None = Query(None),
) -> DashboardAnalytics:
    """Return the stored dashboard snapshot."""
    config = for_site(ingestion, wordpress_url)
    return await load_snapshot(repository, current_user.id, config.base_url)


@router.post("/insights", response_model=DashboardInsightsResponse)
async def dashboard_insights(
    request: AnalyticsRequest,
    current_user: CurrentUser,
    repository: Analytics,
    ingestion: Ingestion,
) -> DashboardInsightsResponse:
    """Narrative AI review of the stored snapshot."""
    config = for_site(ingestion, request.wordpress_url)
    analytics = await load_snapshot(repository, current_user.id, config.base_url)
    insights = await analyze_dashboard_metrics(analytics, len(config.treatments))
    return DashboardInsightsResponse(wordpress_url=config.base_url, insights=insights)
