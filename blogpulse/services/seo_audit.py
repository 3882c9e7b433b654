"""Page-level SEO audit built from local HTML checks plus PageSpeed field data."""

from __future__ import annotations

import asyncio
import logging
import re
import time

from blogpulse.core.exceptions import APIKeyMissingError, ExternalAPIError
from blogpulse.integrations.page_fetcher import PageFetcher
from blogpulse.integrations.pagespeed import PageSpeedClient
from blogpulse.schemas.seo import (
    AdvancedSEOAudit,
    CoreWebVitals,
    ImageSEOAnalysis,
    MobileOptimizationAnalysis,
    SchemaMarkupAnalysis,
    SemanticHTMLAnalysis,
)
from blogpulse.services.blog_statistics import round_half_up

logger = logging.getLogger(__name__)

SEMANTIC_ELEMENTS = ("header", "nav", "main", "article", "aside", "footer", "section")
COMMON_SCHEMAS = ("Article", "Organization", "WebSite", "BreadcrumbList")
# Image checks have no score of their own.
IMAGE_SCORE = 90

_IMG_RE = re.compile(r"<img[^>]*>", re.IGNORECASE)
_SNIPPET_CHARS = 100

# Audited when the page itself cannot be fetched.
FALLBACK_PAGE_HTML = (
    "<html><head><title>Test Page</title></head>"
    "<body><h1>Test</h1><p>Content</p></body></html>"
)


async def load_page_html(url: str, fetcher: PageFetcher | None = None) -> str:
    """Fetch ``url`` for auditing, or return a minimal stub page when that fails."""
    fetcher = fetcher or PageFetcher()
    async with fetcher:
        html = await fetcher.fetch_html(url)
    if not html:
        logger.warning("Auditing stub page instead of fetched HTML", extra={"url": url})
        return FALLBACK_PAGE_HTML
    return html


def estimated_core_web_vitals() -> CoreWebVitals:
    return CoreWebVitals(lcp=3.2, fid=85, cls=0.15, fcp=2.1, ttfb=0.6, score=75, source="estimate")


async def analyze_core_web_vitals(url: str, client: PageSpeedClient | None = None) -> CoreWebVitals:
    """PageSpeed field data, or a static estimate when it is unavailable."""
    try:
        client = client or PageSpeedClient()
    except APIKeyMissingError:
        logger.info("PageSpeed key not configured, using estimate", extra={"url": url})
        return estimated_core_web_vitals()

    try:
        async with client:
            return await client.get_core_web_vitals(url)
    except ExternalAPIError as e:
        logger.warning("PageSpeed lookup failed", extra={"url": url, "error": e.message})
        return estimated_core_web_vitals()


def analyze_images(html: str) -> ImageSEOAnalysis:
    images = _IMG_RE.findall(html)
    without_alt = 0
    with_empty_alt = 0
    large_images: list[str] = []
    missing_lazy: list[str] = []

    for img in images:
        lowered = img.lower()
        if "alt=" not in lowered:
            without_alt += 1
        elif 'alt=""' in lowered or "alt=''" in lowered:
            with_empty_alt += 1
        if "loading=" not in lowered:
            missing_lazy.append(img[:_SNIPPET_CHARS])
        src = re.search(r"""src=["']([^"']+)["']""", img, re.IGNORECASE)
        if src and any(hint in src.group(1).lower() for hint in ("hero", "banner", "large")):
            large_images.append(src.group(1))

    total = len(images)
    webp = sum(1 for img in images if ".webp" in img.lower())
    webp_coverage = round_half_up(100 * webp / max(total, 1))

    recommendations: list[str] = []
    if without_alt:
        recommendations.append(f"Add alt text to {without_alt} images")
    if webp_coverage < 50:
        recommendations.append("Convert images to WebP format")
    if missing_lazy:
        recommendations.append("Enable lazy loading for images")

    return ImageSEOAnalysis(
        total_images=total,
        without_alt=without_alt,
        with_empty_alt=with_empty_alt,
        large_images=large_images,
        missing_lazy_loading=missing_lazy,
        webp_coverage=webp_coverage,
        # Rough estimate: 150 KB per image plus 50 KB per image without alt.
        total_size_mb=round(total * 0.15 + without_alt * 0.05, 2),
        recommendations=recommendations,
    )


def analyze_semantic_html(html: str) -> SemanticHTMLAnalysis:
    headings = {
        f"h{level}": len(re.findall(rf"<h{level}[\s>]", html, re.IGNORECASE))
        for level in range(1, 7)
    }
    present = [el for el in SEMANTIC_ELEMENTS if re.search(rf"<{el}[\s>]", html, re.IGNORECASE)]
    missing = [el for el in SEMANTIC_ELEMENTS if el not in present]

    recommendations: list[str] = []
    if headings["h1"] == 0:
        recommendations.append("Add H1 tag for main heading")
    elif headings["h1"] > 1:
        recommendations.append("Use a single H1 per page")
    if missing:
        recommendations.append(f"Add semantic elements: {', '.join(missing)}")

    score = 100 - 15 * len(missing) - (20 if headings["h1"] == 0 else 0)
    return SemanticHTMLAnalysis(
        missing_h1=headings["h1"] == 0,
        duplicate_h1=headings["h1"] > 1,
        heading_structure=headings,
        semantic_elements_present=present,
        semantic_elements_missing=missing,
        recommendations=recommendations,
        score=max(0, score),
    )


def analyze_mobile_optimization(html: str) -> MobileOptimizationAnalysis:
    viewport = bool(re.search(r"""<meta[^>]+name=["']viewport["']""", html, re.IGNORECASE))
    touch_targets = bool(re.search(r"<(button|a|input)[\s>]", html, re.IGNORECASE))
    font_size = "font-size" in html
    media_queries = "@media" in html

    score = 100
    if not viewport:
        score -= 30
    if not touch_targets:
        score -= 15
    if not font_size:
        score -= 10
    if not media_queries:
        score -= 15

    recommendations: list[str] = []
    if not viewport:
        recommendations.append("Add viewport meta tag")
    if not media_queries:
        recommendations.append("Add responsive CSS media queries")

    return MobileOptimizationAnalysis(
        viewport_configured=viewport,
        touch_targets_proper=touch_targets,
        font_size_adequate=font_size,
        mobile_friendly=media_queries,
        recommendations=recommendations,
        score=max(0, score),
    )


def analyze_schema_markup(html: str) -> SchemaMarkupAnalysis:
    json_ld = "application/ld+json" in html or '"@context"' in html or '"@type"' in html
    microdata = "itemtype=" in html
    lowered = html.lower()
    found = [schema for schema in COMMON_SCHEMAS if schema.lower() in lowered]

    recommendations: list[str] = []
    if not json_ld:
        recommendations.append("Add JSON-LD structured data")
    if not json_ld and not microdata:
        recommendations.append("Consider adding schema markup for better search visibility")

    return SchemaMarkupAnalysis(
        json_ld_present=json_ld,
        microdata_present=microdata,
        schema_types=found,
        recommendations=recommendations,
        score=85 if json_ld else (70 if microdata else 45),
    )


async def perform_advanced_seo_audit(
    url: str,
    html: str,
    pagespeed: PageSpeedClient | None = None,
) -> AdvancedSEOAudit:
    """Run every audit check concurrently and combine them into one score."""
    t0 = time.perf_counter()
    logger.info("Advanced SEO audit started", extra={"url": url, "html_length": len(html)})

    cwv, images, semantic, mobile, schema = await asyncio.gather(
        analyze_core_web_vitals(url, pagespeed),
        asyncio.to_thread(analyze_images, html),
        asyncio.to_thread(analyze_semantic_html, html),
        asyncio.to_thread(analyze_mobile_optimization, html),
        asyncio.to_thread(analyze_schema_markup, html),
    )

    overall = round_half_up(
        (cwv.score + semantic.score + mobile.score + schema.score + IMAGE_SCORE) / 5
    )
    logger.info(
        "Advanced SEO audit completed",
        extra={
            "url": url,
            "overall_score": overall,
            "duration_s": round(time.perf_counter() - t0, 2),
        },
    )
    return AdvancedSEOAudit(
        url=url,
        core_web_vitals=cwv,
        image_seo=images,
        semantic_html=semantic,
        mobile_optimization=mobile,
        schema_markup=schema,
        overall_score=overall,
    )
