"""FastAPI dependencies shared by the v1 routes."""

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from blogpulse.config import settings
from blogpulse.core.database import get_session
from blogpulse.core.exceptions import InvalidTokenError
from blogpulse.core.security import verify_access_token
from blogpulse.repositories.blog_repository import (
    AnalyticsRepository,
    SeoScoreRepository,
    SqlScheduleRepository,
)
from blogpulse.services.content_calendar import ContentCalendarService
from blogpulse.services.ingestion import IngestionConfig

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True, slots=True)
class AuthenticatedUser:
    id: str
    name: str | None = None


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> AuthenticatedUser:
    """Resolve the bearer token into the requesting user."""
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated: a bearer token is required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        claims = verify_access_token(credentials.credentials)
    except InvalidTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        ) from e
    return AuthenticatedUser(id=str(claims["sub"]), name=claims.get("name"))


def get_ingestion_config() -> IngestionConfig:
    return IngestionConfig.from_settings(app_settings=settings)


DbSession = Annotated[AsyncSession, Depends(get_session)]
CurrentUser = Annotated[AuthenticatedUser, Depends(get_current_user)]
Ingestion = Annotated[IngestionConfig, Depends(get_ingestion_config)]


def get_analytics_repository(session: DbSession) -> AnalyticsRepository:
    return AnalyticsRepository(session)


def get_seo_score_repository(session: DbSession) -> SeoScoreRepository:
    return SeoScoreRepository(session)


def get_calendar_service(session: DbSession) -> ContentCalendarService:
    return ContentCalendarService(SqlScheduleRepository(session))


Analytics = Annotated[AnalyticsRepository, Depends(get_analytics_repository)]
SeoScores = Annotated[SeoScoreRepository, Depends(get_seo_score_repository)]
Calendar = Annotated[ContentCalendarService, Depends(get_calendar_service)]
