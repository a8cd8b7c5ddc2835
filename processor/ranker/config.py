"""
Configuration and utilities for feed ranking.

Contains:
- Blend weights
- Per-request cost limits
- Utility functions for ranking calculations
"""
from config import settings


# ============================================
# BLEND WEIGHTS
# ============================================

WEIGHT_TEXT_SCORE = 0.8     # averaged ML / heuristic / stored score
WEIGHT_UPVOTE = 0.2         # any upvote at all


# ============================================
# COST LIMITS
# ============================================

def default_call_budget() -> int:
    """Provider calls allowed per feed request."""
    return settings.FEED_CALL_BUDGET


def default_max_comments() -> int:
    """Comments scored per post in on-the-fly modes."""
    return settings.FEED_MAX_COMMENTS_SCORED


# ============================================
# UTILITY FUNCTIONS
# ============================================

def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    """Clamp value to [low, high]."""
    return max(low, min(high, value))


def upvote_presence(upvote_count: int) -> float:
    """1.0 if the post has any upvote, else 0.0."""
    return 1.0 if upvote_count > 0 else 0.0


def blend_score(text_score: float, upvotes: float) -> float:
    """
    Final feed score.

    Args:
        text_score: Averaged text score in [0, 1]
        upvotes: Upvote presence (0.0 or 1.0)

    Returns:
        0.8 * text_score + 0.2 * upvotes
    """
    return WEIGHT_TEXT_SCORE * text_score + WEIGHT_UPVOTE * upvotes


def incremental_average(score_sum: float, score_count: int) -> float:
    """Running average of a post's accumulated scores, clamped to [0, 1]."""
    return clamp((score_sum or 0.0) / max(1, score_count or 0))
