"""Dashboard and keyword-analysis schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class KeywordCount(BaseModel):
    keyword: str
    frequency: int


class CategoryCount(BaseModel):
    name: str
    count: int


class TreatmentCoverage(BaseModel):
    """A treatment with at least one matching post."""

    treatment: str
    post_count: int
    percentage: int


class PublicationPeriod(BaseModel):
    period: str
    posts: int


class MonthlyPostCount(BaseModel):
    month_label: str
    post_count: int


class DashboardAnalytics(BaseModel):
    """Snapshot of blog metrics rendered on the dashboard."""

    model_config = ConfigDict(from_attributes=True)

    wordpress_url: str
    total_posts: int
    total_keywords: int
    avg_words_per_post: int
    growth_rate: int
    keyword_diversity_score: int
    content_gap_rate: int
    publication_trend: list[PublicationPeriod] = Field(default_factory=list)
    monthly_posts: list[MonthlyPostCount] = Field(default_factory=list)
    top_keywords: list[KeywordCount] = Field(default_factory=list)
    category_stats: list[CategoryCount] = Field(default_factory=list)
    treatment_coverage: list[TreatmentCoverage] = Field(default_factory=list)
    last_updated: datetime | None = None


GapLevel = Literal["high", "medium", "low"]
SearchVolume = Literal["Low", "Medium", "High"]
SearchIntent = Literal["Commercial", "Informational", "Transactional", "Navigational"]


class TreatmentGap(BaseModel):
    """A treatment with fewer posts than the coverage threshold."""

    treatment: str
    current_post_count: int
    recommended_keywords: list[str] = Field(default_factory=list)
    gap_level: GapLevel
    priority: int


class KeywordSuggestion(BaseModel):
    """A keyword opportunity proposed for an under-covered treatment."""

    model_config = ConfigDict(extra="ignore")

    keyword: str
    estimated_search_volume: SearchVolume = "Medium"
    search_intent: SearchIntent = "Informational"
    opportunity_score: int = Field(default=5, ge=1, le=10)
    current_competition: SearchVolume = "Medium"
    suggested_content_angle: str | None = None


class KeywordAnalysis(BaseModel):
    """Keyword usage, coverage gaps and suggestions for one corpus."""

    keyword_frequency_stats: dict[str, int] = Field(default_factory=dict)
    treatment_gap_analysis: list[TreatmentGap] = Field(default_factory=list)
    keyword_suggestions: list[KeywordSuggestion] = Field(default_factory=list)
    suggestions_source: Literal["ai", "fallback", "none"] = "none"
    content_gap_rate: int = 0
    keyword_diversity_index: int = 0
    total_posts_analyzed: int = 0


class AnalyticsRequest(BaseModel):
    """Which site to analyse; defaults to the configured WordPress URL."""

    wordpress_url: str | None = None


class DashboardInsightsResponse(BaseModel):
    wordpress_url: str
    insights: str
