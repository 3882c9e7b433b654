"""Narrative insights over the dashboard metrics."""

from pydantic import BaseModel

from blogpulse.agents.base_agent import BaseAgent
from blogpulse.schemas.analytics import DashboardAnalytics


class DashboardAnalystInput(BaseModel):
    analytics: DashboardAnalytics
    treatment_count: int


class DashboardAnalystAgent(BaseAgent[DashboardAnalystInput]):
    """Writes a Markdown performance review of the blog dashboard."""

    temperature = 0.5

    @property
    def system_prompt(self) -> str:
        return (
            "You are a content marketing analyst for a medical tourism blog. "
            "Write clear Markdown with headings and short bullet lists. "
            "Every recommendation must be specific and measurable."
        )

    def _build_prompt(self, input_data: DashboardAnalystInput) -> str:
        a = input_data.analytics
        trend = {period.period: period.posts for period in a.publication_trend}
        months = ", ".join(f"{m.month_label}: {m.post_count}" for m in a.monthly_posts[-6:])
        keywords = "\n".join(f"- {k.keyword} ({k.frequency} times)" for k in a.top_keywords[:10])
        categories = "\n".join(f"- {c.name}: {c.count} posts" for c in a.category_stats[:5])
        coverage = "\n".join(
            f"- {t.treatment}: {t.post_count} posts ({t.percentage}%)"
            for t in a.treatment_coverage[:5]
        )
        growth = f"+{a.growth_rate}" if a.growth_rate > 0 else str(a.growth_rate)

        return f"""## BLOG DASHBOARD METRICS

### Core metrics
- Total posts: {a.total_posts}
- Total keywords: {a.total_keywords}
- Average words per post: {a.avg_words_per_post}
- Growth rate: {growth}%
- Keyword diversity score: {a.keyword_diversity_score}/100
- Content gap rate: {a.content_gap_rate}%

### Recent activity
- Last 30 days: {trend.get("Last 30 days", 0)} posts
- 31-90 days ago: {trend.get("31-90 days ago", 0)} posts

### Monthly publishing: {months}

### Top 10 keywords
{keywords or "- none"}

### Categories
{categories or "- none"}

### Treatment coverage {len(a.treatment_coverage)}/{input_data.treatment_count}
{coverage or "- none"}

## PLEASE ASSESS
1. Overall performance and the areas that need focus
2. Content strategy: publishing frequency, depth and keyword use
3. Growth and trend: publishing targets for the next 3 months
4. SEO: what the diversity score indicates and new keyword ideas
5. Treatment coverage gaps and topic suggestions
6. Five actions for the next two weeks and measurable 1-3 month goals"""
