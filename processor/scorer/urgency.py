"""
Urgency Aggregator

Keyword-based comment urgency (0.0 - 3.0) and the blend of a post's
stored urgency with its comments into a discrete level (1 - 3).
"""
from typing import Optional, Sequence, Tuple

from loguru import logger

from constants import UrgencyLevel
from .config import (
    URGENCY_KEYWORDS,
    PREFIX_KEYWORDS,
    PARTIAL_MATCH_DISCOUNT,
    TOKEN_STRIP_CHARS,
    CONFIDENCE_PER_MATCH,
    DEFAULT_COMMENT_SCORE,
    DEFAULT_COMMENT_CONFIDENCE,
    MAX_COMMENT_SCORE,
    MIN_COMMENT_SCORE,
    POST_WEIGHT,
    COMMENT_WEIGHT,
    THRESHOLD_AGGREGATE_HIGH,
    THRESHOLD_AGGREGATE_MEDIUM,
    categorize_urgency,
)
from .models import UrgencyScore


def match_keyword(token: str) -> Optional[float]:
    """
    Multiplier for one cleaned, lowercased token.

    Exact match first, then the most specific keyword the token starts
    with (discounted).

    Returns:
        Multiplier, or None if nothing matches
    """
    multiplier = URGENCY_KEYWORDS.get(token)
    if multiplier is not None:
        return multiplier

    for keyword, multiplier in PREFIX_KEYWORDS:
        if token.startswith(keyword):
            return multiplier * PARTIAL_MATCH_DISCOUNT
    return None


def calculate_comment_urgency(comment_text: str) -> UrgencyScore:
    """
    Analyze a comment and return its urgency score.

    Args:
        comment_text: Raw comment content

    Returns:
        UrgencyScore with score in [0.5, 3.0], level and confidence
    """
    if not comment_text:
        return UrgencyScore(
            score=DEFAULT_COMMENT_SCORE,
            level=UrgencyLevel.MODERATE,
            confidence=DEFAULT_COMMENT_CONFIDENCE,
        )

    total_score = 0.0
    match_count = 0

    for word in comment_text.lower().split():
        multiplier = match_keyword(word.strip(TOKEN_STRIP_CHARS))
        if multiplier is None:
            continue
        total_score += multiplier
        match_count += 1

    if match_count == 0:
        avg_score = DEFAULT_COMMENT_SCORE
        confidence = DEFAULT_COMMENT_CONFIDENCE
    else:
        avg_score = total_score / match_count
        confidence = min(1.0, match_count * CONFIDENCE_PER_MATCH)

    if avg_score > MAX_COMMENT_SCORE:
        avg_score = MAX_COMMENT_SCORE
    # Reset, not clamp: anything under the floor reads as "no evidence"
    if avg_score < MIN_COMMENT_SCORE:
        avg_score = DEFAULT_COMMENT_SCORE

    return UrgencyScore(
        score=avg_score,
        level=categorize_urgency(avg_score),
        confidence=confidence,
    )


def calculate_aggregate_urgency(
    post_urgency: int,
    comment_scores: Sequence[float]
) -> Tuple[int, UrgencyLevel]:
    """
    Combine a post's urgency with its comment scores.

    final = 0.5 * post_urgency + 0.5 * mean(comment_scores)

    Args:
        post_urgency: Stored urgency level (1-3)
        comment_scores: Per-comment scores on the 0-3 scale

    Returns:
        (urgency 1-3, descriptive level of the blended score)
    """
    post_score = float(post_urgency)

    if comment_scores:
        comment_avg = sum(comment_scores) / len(comment_scores)
    else:
        comment_avg = post_score

    final_score = (post_score * POST_WEIGHT) + (comment_avg * COMMENT_WEIGHT)

    final_int = 1
    if final_score > THRESHOLD_AGGREGATE_HIGH:
        final_int = 3
    elif final_score > THRESHOLD_AGGREGATE_MEDIUM:
        final_int = 2

    return final_int, categorize_urgency(final_score)


def log_urgency_calculation(
    post_id: str,
    post_urgency: int,
    comment_scores: Sequence[float],
    final_urgency: int,
    final_level: UrgencyLevel,
) -> None:
    """Log one urgency recomputation."""
    comment_avg = sum(comment_scores) / len(comment_scores) if comment_scores else 0.0
    logger.info(
        f"[urgency_update] post_id={post_id} initial={post_urgency} "
        f"comments_count={len(comment_scores)} comment_avg={comment_avg:.2f} "
        f"final={final_urgency} level={final_level.value}"
    )
