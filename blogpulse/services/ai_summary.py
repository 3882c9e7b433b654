"""AI-backed summaries with local fallbacks.

Every function here degrades instead of raising when the model ladder is
exhausted: callers always get a usable result.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import AsyncIterator, Sequence
from dataclasses import dataclass
from typing import Any

from pydantic import TypeAdapter, ValidationError

from blogpulse.agents.blog_chat import BlogChatAgent, BlogChatInput
from blogpulse.agents.chat_title import MAX_TITLE_WORDS, ChatTitleAgent, ChatTitleInput
from blogpulse.agents.dashboard_analyst import DashboardAnalystAgent, DashboardAnalystInput
from blogpulse.agents.keyword_opportunity import (
    KeywordOpportunityAgent,
    KeywordOpportunityInput,
)
from blogpulse.agents.post_seo import PostSEOAgent, PostSEOInput
from blogpulse.core.exceptions import (
    AllModelsExhaustedError,
    ConfigurationError,
    ExternalAPIError,
    MalformedAIResponseError,
)
from blogpulse.schemas.analytics import (
    DashboardAnalytics,
    KeywordAnalysis,
    KeywordSuggestion,
    TreatmentGap,
)
from blogpulse.schemas.seo import (
    ContentQualityScore,
    EngagementScore,
    KeywordOptimizationScore,
    ReadabilityScore,
    SEOScoreAnalysis,
    TechnicalSEOScore,
)
from blogpulse.schemas.wordpress import BlogData
from blogpulse.services.blog_statistics import (
    content_gap_rate,
    keyword_diversity_index,
    treatment_gaps,
)
from blogpulse.services.keywords import keyword_frequencies, top_keywords

logger = logging.getLogger(__name__)

DEFAULT_CHAT_TITLE = "Blog Analysis"
CHAT_APOLOGY = (
    "Sorry, I could not reach the AI service right now. Please try again in a few minutes."
)
CHAT_NOT_CONFIGURED = (
    "The AI assistant is not configured on this server. Please contact an administrator."
)

_FENCE_RE = re.compile(r"```(?:json)?\s*|\s*```", re.IGNORECASE)
_suggestions_adapter = TypeAdapter(list[KeywordSuggestion])


@dataclass(frozen=True, slots=True)
class ParsedSuccess:
    value: Any


@dataclass(frozen=True, slots=True)
class ParseFailure:
    reason: str
    raw_text: str


ParseResult = ParsedSuccess | ParseFailure


def strip_code_fences(text: str) -> str:
    """Remove Markdown code fences (```json ... ```) around a payload."""
    return _FENCE_RE.sub("", text).strip()


def parse_ai_json(text: str) -> ParseResult:
    """Parse a model response that should contain JSON."""
    cleaned = strip_code_fences(text)
    if not cleaned:
        return ParseFailure(reason="empty response", raw_text=text)
    try:
        return ParsedSuccess(json.loads(cleaned))
    except json.JSONDecodeError as e:
        return ParseFailure(reason=f"invalid JSON: {e.msg}", raw_text=text)


def _parse_suggestions(text: str) -> list[KeywordSuggestion]:
    result = parse_ai_json(text)
    if isinstance(result, ParseFailure):
        raise MalformedAIResponseError(result.reason, result.raw_text)
    if not isinstance(result.value, list) or not result.value:
        raise MalformedAIResponseError("expected a non-empty JSON array", text)
    try:
        return _suggestions_adapter.validate_python(result.value)
    except ValidationError as e:
        raise MalformedAIResponseError(f"unexpected suggestion shape: {e}", text) from e


def fallback_keyword_suggestions(gaps: Sequence[TreatmentGap]) -> list[KeywordSuggestion]:
    """Three fixed suggestions per gap, derived only from the treatment name."""
    suggestions: list[KeywordSuggestion] = []
    for gap in gaps:
        name = gap.treatment.lower()
        suggestions.extend(
            [
                KeywordSuggestion(
                    keyword=f"{name} turkey",
                    estimated_search_volume="Medium",
                    search_intent="Commercial",
                    opportunity_score=7,
                    current_competition="Medium",
                    suggested_content_angle=f"Complete guide to {gap.treatment} for international patients",
                ),
                KeywordSuggestion(
                    keyword=f"{name} istanbul",
                    estimated_search_volume="Low",
                    search_intent="Transactional",
                    opportunity_score=8,
                    current_competition="Low",
                    suggested_content_angle=f"{gap.treatment} costs and clinic selection in Istanbul",
                ),
                KeywordSuggestion(
                    keyword=f"best {name} abroad",
                    estimated_search_volume="High",
                    search_intent="Commercial",
                    opportunity_score=9,
                    current_competition="High",
                    suggested_content_angle=f"Comparing {gap.treatment} destinations abroad",
                ),
            ]
        )
    return suggestions


async def analyze_keyword_usage(
    blog_data: BlogData,
    treatments: Sequence[str],
    agent: KeywordOpportunityAgent | None = None,
) -> KeywordAnalysis:
    """Keyword statistics, treatment gaps and keyword suggestions."""
    frequencies = keyword_frequencies(blog_data.posts, blog_data.keywords)
    gaps = treatment_gaps(blog_data.treatment_matches, treatments)

    suggestions: list[KeywordSuggestion] = []
    source = "none"
    if gaps:
        try:
            agent = agent or KeywordOpportunityAgent()
            suggestions = await agent.run_validated(
                KeywordOpportunityInput(
                    gap_treatments=[gap.treatment for gap in gaps],
                    top_keywords=top_keywords(frequencies, 10),
                ),
                _parse_suggestions,
            )
            source = "ai"
        except AllModelsExhaustedError as e:
            logger.warning(
                "Keyword suggestions unavailable, using local fallback",
                extra={"gaps": len(gaps), "error": e.message},
            )
            suggestions = fallback_keyword_suggestions(gaps)
            source = "fallback"

    return KeywordAnalysis(
        keyword_frequency_stats=frequencies,
        treatment_gap_analysis=gaps,
        keyword_suggestions=suggestions,
        suggestions_source=source,
        content_gap_rate=content_gap_rate(blog_data.treatment_matches, treatments),
        keyword_diversity_index=keyword_diversity_index(
            len(blog_data.keywords), len(blog_data.posts)
        ),
        total_posts_analyzed=len(blog_data.posts),
    )


def fallback_dashboard_summary(analytics: DashboardAnalytics) -> str:
    return (
        "## Dashboard summary\n\n"
        "AI insights are temporarily unavailable. Basic metrics:\n\n"
        f"- Total posts: {analytics.total_posts}\n"
        f"- Total keywords: {analytics.total_keywords}\n"
        f"- Average words per post: {analytics.avg_words_per_post}\n"
        f"- Growth rate: {analytics.growth_rate}%\n"
        f"- Keyword diversity score: {analytics.keyword_diversity_score}/100\n"
        f"- Content gap rate: {analytics.content_gap_rate}%\n"
    )


async def analyze_dashboard_metrics(
    analytics: DashboardAnalytics,
    treatment_count: int,
    agent: DashboardAnalystAgent | None = None,
) -> str:
    try:
        agent = agent or DashboardAnalystAgent()
        return await agent.run(
            DashboardAnalystInput(analytics=analytics, treatment_count=treatment_count)
        )
    except AllModelsExhaustedError as e:
        logger.warning("Dashboard insights unavailable", extra={"error": e.message})
        return fallback_dashboard_summary(analytics)


async def stream_blog_chat(
    message: str,
    history: Sequence[dict[str, str]],
    agent: BlogChatAgent,
) -> AsyncIterator[str]:
    """Stream the assistant's answer; a total failure yields one readable message."""
    try:
        async for chunk in agent.stream(BlogChatInput(message=message, history=list(history))):
            yield chunk
    except AllModelsExhaustedError as e:
        logger.warning("Blog chat unavailable", extra={"error": e.message})
        yield CHAT_APOLOGY
    except ConfigurationError as e:
        logger.error("Blog chat is misconfigured", extra={"error": e.message})
        yield CHAT_NOT_CONFIGURED
    except ExternalAPIError as e:
        logger.warning("Blog chat stream interrupted", extra={"error": e.message})
        yield f"\n\n{CHAT_APOLOGY}"


def _clean_title(text: str) -> str:
    title = text.strip().strip("\"'").strip()
    title = title.splitlines()[0] if title else ""
    words = title.split()
    return " ".join(words[:MAX_TITLE_WORDS]).rstrip(".!?:")


async def generate_chat_title(
    conversation_snippet: str,
    agent: ChatTitleAgent | None = None,
) -> str:
    try:
        agent = agent or ChatTitleAgent()
        title = _clean_title(
            await agent.run(ChatTitleInput(conversation_snippet=conversation_snippet))
        )
    except AllModelsExhaustedError:
        return DEFAULT_CHAT_TITLE
    return title or DEFAULT_CHAT_TITLE


def fallback_seo_analysis() -> SEOScoreAnalysis:
    return SEOScoreAnalysis(
        score=75,
        content_quality=ContentQualityScore(
            score=22,
            feedback="Content appears to be informative but could be more comprehensive",
            strengths=["Good basic structure", "Informative content"],
            improvements=["Add more depth to explanations", "Include statistics or examples"],
        ),
        keyword_optimization=KeywordOptimizationScore(score=18),
        technical_seo=TechnicalSEOScore(
            score=15,
            issues=["Could improve meta description"],
            passed=["Has H1 tag", "Has title"],
        ),
        engagement=EngagementScore(
            score=12,
            suggestions=["Add more engaging headlines", "Include calls-to-action"],
        ),
        readability=ReadabilityScore(
            score=8,
            grade="B",
            issues=["Some sentences are very long"],
        ),
    )


def _parse_seo_analysis(text: str) -> SEOScoreAnalysis:
    result = parse_ai_json(text)
    if isinstance(result, ParseFailure):
        raise MalformedAIResponseError(result.reason, result.raw_text)
    try:
        return SEOScoreAnalysis.model_validate(result.value)
    except ValidationError as e:
        raise MalformedAIResponseError(f"unexpected SEO analysis shape: {e}", text) from e


async def analyze_post_seo(
    title: str,
    content: str,
    excerpt: str = "",
    target_keywords: Sequence[str] | None = None,
    agent: PostSEOAgent | None = None,
) -> SEOScoreAnalysis:
    try:
        agent = agent or PostSEOAgent()
        return await agent.run_validated(
            PostSEOInput(
                title=title,
                content=content,
                excerpt=excerpt,
                target_keywords=list(target_keywords) if target_keywords else None,
            ),
            _parse_seo_analysis,
        )
    except AllModelsExhaustedError as e:
        logger.warning(
            "Post SEO analysis unavailable, using fallback",
            extra={"title": title, "error": e.message},
        )
        return fallback_seo_analysis()
