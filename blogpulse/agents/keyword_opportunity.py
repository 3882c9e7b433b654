"""Keyword opportunity agent for under-covered treatments."""

import logging

from pydantic import BaseModel, Field

from blogpulse.agents.base_agent import BaseAgent

logger = logging.getLogger(__name__)


class KeywordOpportunityInput(BaseModel):
    """Input for the keyword opportunity agent."""

    gap_treatments: list[str]
    top_keywords: list[tuple[str, int]] = Field(default_factory=list)
    market: str = "UK"


class KeywordOpportunityAgent(BaseAgent[KeywordOpportunityInput]):
    """Suggests search keywords for treatments the blog barely covers.

    The answer is a JSON array; parsing and validation happen in the caller
    so that a malformed array counts as a failed attempt.
    """

    temperature = 0.4

    @property
    def system_prompt(self) -> str:
        return """You are a medical tourism SEO strategist. You suggest keywords that real patients type when researching treatments abroad.

Respond with a JSON array only, no commentary. Each element:
{
  "keyword": "keyword here",
  "estimated_search_volume": "Low" | "Medium" | "High",
  "search_intent": "Commercial" | "Informational" | "Transactional" | "Navigational",
  "opportunity_score": 1-10,
  "current_competition": "Low" | "Medium" | "High",
  "suggested_content_angle": "Brief description"
}"""

    def _build_prompt(self, input_data: KeywordOpportunityInput) -> str:
        logger.info(
            "Building keyword opportunity prompt",
            extra={
                "gap_count": len(input_data.gap_treatments),
                "market": input_data.market,
            },
        )
        popular = ", ".join(f"{keyword} ({count})" for keyword, count in input_data.top_keywords)

        return f"""Suggest keyword opportunities for the {input_data.market} market.

TREATMENTS WITHOUT ADEQUATE CONTENT: {", ".join(input_data.gap_treatments)}

CURRENT POPULAR KEYWORDS ON SITE: {popular or "none"}

SITE CONTEXT: Medical tourism clinic in Turkey serving international patients.

Suggest 8-10 {input_data.market}-relevant keywords for each under-covered treatment, like
"hair transplant in turkey cost" or "dental implants istanbul price".
Return the JSON array."""
