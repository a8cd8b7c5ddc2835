"""
Database Module - Civic Issue Feed

Structure:
    database/
    ├── __init__.py      # This file - public API
    ├── session.py       # SQLAlchemy async session management
    ├── init.py          # Database initialization utilities
    └── models/          # SQLAlchemy ORM models
        ├── __init__.py
        ├── base.py
        ├── users.py
        └── posts.py

Usage:
    from database import get_session
    from database.models import Post

    async with get_session() as session:
        result = await session.execute(select(Post))
        posts = result.scalars().all()
"""

# SQLAlchemy Models
from .models import (
    Base,
    TimestampMixin,
    User,
    Issue,
    Post,
    Comment,
    Upvote,
)

# Session Management
from .session import (
    init_engine,
    close_engine,
    build_engine,
    build_session_factory,
    create_tables,
    get_session,
    get_session_dependency,
)

# Initialization
from .init import init_database_async

__all__ = [
    # SQLAlchemy Models
    "Base",
    "TimestampMixin",
    "User",
    "Issue",
    "Post",
    "Comment",
    "Upvote",
    # Session Management
    "init_engine",
    "close_engine",
    "build_engine",
    "build_session_factory",
    "create_tables",
    "get_session",
    "get_session_dependency",
    # Init
    "init_database_async",
]
