"""Keyword analysis endpoints."""

from fastapi import APIRouter

from blogpulse.api.v1.analytics import for_site
from blogpulse.dependencies import CurrentUser, Ingestion
from blogpulse.schemas.analytics import AnalyticsRequest, KeywordAnalysis
from blogpulse.services.ai_summary import analyze_keyword_usage
from blogpulse.services.ingestion import get_blog_data

router = APIRouter()


@router.post("/analysis", response_model=KeywordAnalysis)
async def keyword_analysis(
    request: AnalyticsRequest,
    current_user: CurrentUser,
    ingestion: Ingestion,
) -> KeywordAnalysis:
    """Keyword frequencies, treatment gaps and keyword suggestions."""
    config = for_site(ingestion, request.wordpress_url)
    blog_data = await get_blog_data(config)
    return await analyze_keyword_usage(blog_data, config.treatments)
