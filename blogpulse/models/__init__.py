"""SQLAlchemy database models."""

from blogpulse.models.base import Base
from blogpulse.models.blog import BlogAnalytics, BlogSchedule, BlogSeoScore

__all__ = [
    "Base",
    "BlogAnalytics",
    "BlogSchedule",
    "BlogSeoScore",
]
