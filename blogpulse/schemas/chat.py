"""Blog chat request and response schemas."""

from typing import Literal

from pydantic import BaseModel, Field


class ChatMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class BlogChatRequest(BaseModel):
    message: str = Field(min_length=1)
    history: list[ChatMessage] = Field(default_factory=list)
    wordpress_url: str | None = None


class ChatTitleRequest(BaseModel):
    conversation: str = Field(min_length=1, max_length=4000)


class ChatTitleResponse(BaseModel):
    title: str
