"""Blog AI chat endpoints."""

import logging

from fastapi import APIRouter
from fastapi.responses import StreamingResponse

from blogpulse.agents.blog_chat import BlogChatAgent
from blogpulse.api.v1.analytics import for_site
from blogpulse.dependencies import CurrentUser, Ingestion
from blogpulse.schemas.chat import BlogChatRequest, ChatTitleRequest, ChatTitleResponse
from blogpulse.services.ai_summary import generate_chat_title, stream_blog_chat
from blogpulse.services.ingestion import format_for_ai_context, get_blog_data

logger = logging.getLogger(__name__)

router = APIRouter()

BLOG_CONTEXT_UNAVAILABLE = "Blog data could not be loaded at this time."


@router.post("/stream")
async def chat_stream(
    request: BlogChatRequest,
    current_user: CurrentUser,
    ingestion: Ingestion,
) -> StreamingResponse:
    """Stream the assistant's answer as plain text."""
    config = for_site(ingestion, request.wordpress_url)
    blog_data = await get_blog_data(config)
    blog_context = format_for_ai_context(blog_data) if blog_data.posts else BLOG_CONTEXT_UNAVAILABLE

    history = [message.model_dump() for message in request.history]
    agent = BlogChatAgent(
        treatments=list(config.treatments),
        blog_context=blog_context,
        user_name=current_user.name,
        has_history=bool(history),
    )
    logger.info(
        "Blog chat turn",
        extra={"user_id": current_user.id, "history_length": len(history)},
    )
    return StreamingResponse(
        stream_blog_chat(request.message, history, agent),
        media_type="text/plain; charset=utf-8",
    )


@router.post("/title", response_model=ChatTitleResponse)
async def chat_title(
    request: ChatTitleRequest,
    current_user: CurrentUser,
) -> ChatTitleResponse:
    """Short title for a conversation."""
    title = await generate_chat_title(request.conversation)
    return ChatTitleResponse(title=title)
