"""Conversational blog strategy assistant."""

import logging

from pydantic import BaseModel, Field

from blogpulse.agents.base_agent import BaseAgent, format_conversation

logger = logging.getLogger(__name__)


class BlogChatInput(BaseModel):
    """Input for the blog chat agent."""

    message: str
    history: list[dict[str, str]] = Field(default_factory=list)


class BlogChatAgent(BaseAgent[BlogChatInput]):
    """Answers questions about the blog corpus.

    The system prompt carries the treatment catalogue and the current blog
    context block, so one instance serves one conversation turn.
    """

    temperature = 0.7

    def __init__(
        self,
        treatments: list[str],
        blog_context: str,
        user_name: str | None = None,
        has_history: bool = False,
        **kwargs,
    ) -> None:
        self.treatments = treatments
        self.blog_context = blog_context
        self.user_name = user_name
        self.has_history = has_history
        super().__init__(**kwargs)

    @property
    def system_prompt(self) -> str:
        treatment_lines = "\n".join(f"- {treatment}" for treatment in self.treatments)
        prompt = f"""You are the Blog AI assistant for a medical tourism clinic. You analyse the blog's content, content strategy and marketing opportunities.

**CORE CAPABILITIES:**
- Analyse keyword usage and frequency across all blog posts
- Identify content gaps and suggest new blog topics
- Compare blog content with the available treatments to find opportunities
- Give SEO and content marketing recommendations

**AVAILABLE TREATMENTS ({len(self.treatments)}):**
{treatment_lines}

**CURRENT BLOG CONTEXT:**
{self.blog_context}

**RESPONSE STYLE:**
- Professional, analytical and actionable
- Base answers on the blog data above; if it is missing, say so
- Always compare findings with the available treatments
- Use Markdown: **bold**, *italic*, lists, headings and tables
- End with concrete next steps for the content strategy"""

        if self.user_name:
            prompt += f"\n\nYou are talking to {self.user_name}. Address them by name when appropriate."
        if self.has_history:
            prompt += "\n\n**CONVERSATION CONTEXT:** This is an ongoing conversation. Build on the earlier messages."
        else:
            prompt += "\n\n**NEW CONVERSATION:** This is the start of a new conversation."
        return prompt

    def _build_prompt(self, input_data: BlogChatInput) -> str:
        if not input_data.history:
            return input_data.message
        transcript = format_conversation(input_data.history)
        return f"{transcript}\n\nUser: {input_data.message}"
