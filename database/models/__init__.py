"""
SQLAlchemy ORM Models

This module defines all database models using SQLAlchemy ORM.
Models are organized by domain:
- Users: citizens and admins
- Posts: issues, reported posts, comments and upvotes
"""

from .base import Base, TimestampMixin, UUIDPrimaryKeyMixin, new_id
from .users import User
from .posts import Issue, Post, Comment, Upvote

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    "UUIDPrimaryKeyMixin",
    "new_id",
    # Users
    "User",
    # Posts
    "Issue",
    "Post",
    "Comment",
    "Upvote",
]
