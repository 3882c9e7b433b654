"""Post SEO scoring and page audit endpoints."""

from fastapi import APIRouter, Query

from blogpulse.api.v1.analytics import for_site
from blogpulse.dependencies import CurrentUser, Ingestion, SeoScores
from blogpulse.schemas.seo import (
    AdvancedSEOAudit,
    PostScoreSummary,
    PostSEORequest,
    SEOAuditRequest,
    SEOScoreAnalysis,
)
from blogpulse.services.ai_summary import analyze_post_seo
from blogpulse.services.seo_audit import load_page_html, perform_advanced_seo_audit
from blogpulse.services.text import count_words, strip_html_tags

router = APIRouter()


@router.get("/posts", response_model=list[PostScoreSummary])
async def list_recent_posts(
    current_user: CurrentUser,
    repository: SeoScores,
    ingestion: Ingestion,
    limit: int = Query(10, ge=1, le=100),
    wordpress_url: str | None = Query(None),
) -> list[PostScoreSummary]:
    """Newest posts with their stored SEO scores; unscored posts have none."""
    config = for_site(ingestion, wordpress_url)
    async with config.build_client() as client:
        posts = await client.fetch_latest_posts(limit)

    scores = await repository.list_for_posts(current_user.id, [post.id for post in posts])
    summaries: list[PostScoreSummary] = []
    for post in posts:
        stored = scores.get(post.id)
        summaries.append(
            PostScoreSummary(
                post_id=post.id,
                title=strip_html_tags(post.title),
                link=post.link,
                date=post.date,
                word_count=count_words(strip_html_tags(post.content)),
                seo_score=stored.seo_score if stored else None,
                last_analyzed=stored.last_analyzed if stored else None,
            )
        )
    return summaries


@router.post("/posts/{post_id}", response_model=SEOScoreAnalysis)
async def score_post(
    post_id: int,
    request: PostSEORequest,
    current_user: CurrentUser,
    repository: SeoScores,
    ingestion: Ingestion,
    wordpress_url: str | None = Query(None),
) -> SEOScoreAnalysis:
    """Score one post and store the result."""
    config = for_site(ingestion, wordpress_url)
    analysis = await analyze_post_seo(
        request.title,
        request.content,
        request.excerpt,
        request.target_keywords,
    )
    await repository.upsert(
        current_user.id,
        post_id=post_id,
        post_title=request.title,
        wordpress_url=config.base_url,
        word_count=count_words(strip_html_tags(request.content)),
        analysis=analysis,
    )
    return analysis


@router.post("/audit", response_model=AdvancedSEOAudit)
async def audit_page(
    request: SEOAuditRequest,
    current_user: CurrentUser,
) -> AdvancedSEOAudit:
    """Run the combined page audit, fetching the page when no HTML is submitted."""
    html = request.html or await load_page_html(request.url)
    return await perform_advanced_seo_audit(request.url, html)
