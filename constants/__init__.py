"""
Constants package for Civic Issue Feed.

Contains shared enums.
"""

from .enums import (
    ScoringMode,
    UrgencyLevel,
    PostStatus,
    ScoreSource,
    IssueCategory,
    # Dict versions
    POST_STATUSES,
)

__all__ = [
    # Enums
    "ScoringMode",
    "UrgencyLevel",
    "PostStatus",
    "ScoreSource",
    "IssueCategory",
    # Dict versions
    "POST_STATUSES",
]
