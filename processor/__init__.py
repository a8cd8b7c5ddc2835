"""
Processor package for the Civic Issue Feed.

Scoring pipeline:
- Scorer: text -> urgency score (ML, heuristic or stored level)
- Ranker: score and order the feed
- Ingestion: score side effects of reports and comments
"""

from .scorer import (
    ScoreProvider,
    ScoreResult,
    get_score_provider,
    calculate_comment_urgency,
    calculate_aggregate_urgency,
)
from .ranker import FeedRanker, FeedResult, IncrementalScoreStore
from .ingestion import ReportIngestion, predict_urgency

__all__ = [
    # Scorer
    "ScoreProvider",
    "ScoreResult",
    "get_score_provider",
    "calculate_comment_urgency",
    "calculate_aggregate_urgency",
    # Ranker
    "FeedRanker",
    "FeedResult",
    "IncrementalScoreStore",
    # Ingestion
    "ReportIngestion",
    "predict_urgency",
]
