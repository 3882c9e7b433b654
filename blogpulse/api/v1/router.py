"""API v1 router aggregator."""

from fastapi import APIRouter

from blogpulse.api.v1 import analytics, chat, keywords, schedule, seo

api_router = APIRouter()

api_router.include_router(analytics.router, prefix="/analytics", tags=["Analytics"])
api_router.include_router(keywords.router, prefix="/keywords", tags=["Keywords"])
api_router.include_router(chat.router, prefix="/chat", tags=["Chat"])
api_router.include_router(seo.router, prefix="/seo", tags=["SEO"])
api_router.include_router(schedule.router, prefix="/schedule", tags=["Schedule"])
