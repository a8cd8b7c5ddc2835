"""
Ranker Module - feed ranking

Blends text scores with upvote presence and orders the feed.

Components:
- FeedRanker: main ranking logic
- IncrementalScoreStore: running per-post score totals
- CallBudget, RankedPost, FeedResult: request-scoped models
"""

from .models import CallBudget, RankedPost, FeedResult, serialize_post
from .config import (
    WEIGHT_TEXT_SCORE,
    WEIGHT_UPVOTE,
    blend_score,
    upvote_presence,
    incremental_average,
    clamp,
)
from .store import IncrementalScoreStore
from .ranker import FeedRanker


__all__ = [
    # Main classes
    "FeedRanker",
    "IncrementalScoreStore",
    # Models
    "CallBudget",
    "RankedPost",
    "FeedResult",
    "serialize_post",
    # Config
    "WEIGHT_TEXT_SCORE",
    "WEIGHT_UPVOTE",
    # Utilities
    "blend_score",
    "upvote_presence",
    "incremental_average",
    "clamp",
]
