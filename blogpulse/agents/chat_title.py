"""Short titles for blog chat conversations."""

from pydantic import BaseModel

from blogpulse.agents.base_agent import BaseAgent

MAX_TITLE_WORDS = 5


class ChatTitleInput(BaseModel):
    conversation_snippet: str


class ChatTitleAgent(BaseAgent[ChatTitleInput]):
    temperature = 0.3

    @property
    def system_prompt(self) -> str:
        return (
            "You name blog analysis conversations. Reply with a title of at most "
            f"{MAX_TITLE_WORDS} words and nothing else: no quotes, no punctuation at the end."
        )

    def _build_prompt(self, input_data: ChatTitleInput) -> str:
        return (
            "Based on the following blog analysis conversation, create a short, "
            "concise title focused on the main topic or insight discussed.\n\n"
            f'Conversation: "{input_data.conversation_snippet}"'
        )
