"""Post SEO scoring and page audit schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ContentQualityScore(BaseModel):
    score: int = Field(ge=0, le=30)
    feedback: str = ""
    strengths: list[str] = Field(default_factory=list)
    improvements: list[str] = Field(default_factory=list)


class KeywordDensity(BaseModel):
    keyword: str
    density: float
    optimal: bool = False


class KeywordOptimizationScore(BaseModel):
    score: int = Field(ge=0, le=25)
    target_keywords: list[str] = Field(default_factory=list)
    missing_keywords: list[str] = Field(default_factory=list)
    keyword_density: list[KeywordDensity] = Field(default_factory=list)


class TechnicalSEOScore(BaseModel):
    score: int = Field(ge=0, le=20)
    issues: list[str] = Field(default_factory=list)
    passed: list[str] = Field(default_factory=list)


class EngagementScore(BaseModel):
    score: int = Field(ge=0, le=15)
    suggestions: list[str] = Field(default_factory=list)


class ReadabilityScore(BaseModel):
    score: int = Field(ge=0, le=10)
    grade: str = "C"
    issues: list[str] = Field(default_factory=list)


class SEOScoreAnalysis(BaseModel):
    """Per-post SEO score broken down into five weighted areas."""

    model_config = ConfigDict(extra="ignore")

    score: int = Field(ge=0, le=100)
    content_quality: ContentQualityScore
    keyword_optimization: KeywordOptimizationScore
    technical_seo: TechnicalSEOScore
    engagement: EngagementScore
    readability: ReadabilityScore


class CoreWebVitals(BaseModel):
    lcp: float
    fid: float
    cls: float
    fcp: float
    ttfb: float
    score: int
    source: str = "pagespeed"


class ImageSEOAnalysis(BaseModel):
    total_images: int
    without_alt: int
    with_empty_alt: int
    large_images: list[str] = Field(default_factory=list)
    missing_lazy_loading: list[str] = Field(default_factory=list)
    webp_coverage: int
    total_size_mb: float
    recommendations: list[str] = Field(default_factory=list)


class SemanticHTMLAnalysis(BaseModel):
    missing_h1: bool
    duplicate_h1: bool
    heading_structure: dict[str, int] = Field(default_factory=dict)
    semantic_elements_present: list[str] = Field(default_factory=list)
    semantic_elements_missing: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    score: int


class MobileOptimizationAnalysis(BaseModel):
    viewport_configured: bool
    touch_targets_proper: bool
    font_size_adequate: bool
    mobile_friendly: bool
    recommendations: list[str] = Field(default_factory=list)
    score: int


class SchemaMarkupAnalysis(BaseModel):
    json_ld_present: bool
    microdata_present: bool
    schema_types: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    score: int


class AdvancedSEOAudit(BaseModel):
    """Combined page audit."""

    url: str
    core_web_vitals: CoreWebVitals
    image_seo: ImageSEOAnalysis
    semantic_html: SemanticHTMLAnalysis
    mobile_optimization: MobileOptimizationAnalysis
    schema_markup: SchemaMarkupAnalysis
    overall_score: int


class PostSEORequest(BaseModel):
    title: str
    content: str
    excerpt: str = ""
    target_keywords: list[str] | None = None


class SEOAuditRequest(BaseModel):
    """Audit one page; without ``html`` the page is fetched from ``url``."""

    url: str = Field(min_length=1)
    html: str | None = None


class PostScoreSummary(BaseModel):
    """A recent post with its stored SEO score, if it has been analyzed."""

    post_id: int
    title: str
    link: str | None = None
    date: datetime
    word_count: int
    seo_score: int | None = None
    last_analyzed: datetime | None = None
