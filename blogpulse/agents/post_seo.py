"""Per-post SEO scoring agent."""

import logging

from pydantic import BaseModel

from blogpulse.agents.base_agent import BaseAgent
from blogpulse.services.text import count_words, strip_html_tags

logger = logging.getLogger(__name__)

CONTENT_PREVIEW_CHARS = 2000


class PostSEOInput(BaseModel):
    title: str
    content: str
    excerpt: str = ""
    target_keywords: list[str] | None = None


class PostSEOAgent(BaseAgent[PostSEOInput]):
    """Scores one blog post across five SEO areas and returns JSON."""

    temperature = 0.3

    @property
    def system_prompt(self) -> str:
        return """You are an SEO auditor for blog posts. Respond with a single JSON object only:
{
  "score": 0-100,
  "content_quality": {"score": 0-30, "feedback": "...", "strengths": ["..."], "improvements": ["..."]},
  "keyword_optimization": {"score": 0-25, "target_keywords": ["..."], "missing_keywords": ["..."],
                           "keyword_density": [{"keyword": "word", "density": 2.5, "optimal": true}]},
  "technical_seo": {"score": 0-20, "issues": ["..."], "passed": ["..."]},
  "engagement": {"score": 0-15, "suggestions": ["..."]},
  "readability": {"score": 0-10, "grade": "A-F", "issues": ["..."]}
}

Score on: content depth and value (0-30), keyword usage and density (0-25),
meta, structure and links (0-20), intent match and calls to action (0-15),
flow, clarity and grammar (0-10). Be specific, not generic."""

    def _build_prompt(self, input_data: PostSEOInput) -> str:
        clean_content = strip_html_tags(input_data.content)
        word_count = count_words(clean_content)
        logger.info(
            "Building post SEO prompt",
            extra={"title": input_data.title, "word_count": word_count},
        )
        if input_data.target_keywords:
            keywords_line = f"TARGET KEYWORDS: {', '.join(input_data.target_keywords)}"
        else:
            keywords_line = "NO TARGET KEYWORDS SPECIFIED"

        return f"""Analyze this blog post for SEO performance.

POST TITLE: "{input_data.title}"
POST CONTENT: "{clean_content[:CONTENT_PREVIEW_CHARS]}..." ({word_count} words)
POST EXCERPT: "{strip_html_tags(input_data.excerpt)}"

{keywords_line}"""
