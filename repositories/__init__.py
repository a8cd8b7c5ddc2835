"""
SQLAlchemy-based Repositories

This package provides async repository pattern using SQLAlchemy ORM.

Usage:
    from repositories import PostRepository
    from database import get_session

    async with get_session() as session:
        repo = PostRepository(session)
        posts = await repo.get_feed_posts(limit=50)
"""

from .base import BaseRepository
from .posts import PostRepository
from .users import UserRepository
from .errors import (
    ReportingError,
    InvalidIdentifierError,
    PostNotFoundError,
    UserNotFoundError,
    InvalidStatusError,
)

__all__ = [
    "BaseRepository",
    "PostRepository",
    "UserRepository",
    # Errors
    "ReportingError",
    "InvalidIdentifierError",
    "PostNotFoundError",
    "UserNotFoundError",
    "InvalidStatusError",
]
