"""
Scorer Module - urgency scoring

Turns free text into urgency scores and levels.

Components:
- ScoreProvider implementations (ML, heuristic, stored level)
- Comment urgency and aggregate post urgency
- Score / urgency tables and helpers
"""

from .models import UrgencyScore, ScoreResult
from .config import (
    URGENCY_KEYWORDS,
    score_to_urgency,
    urgency_to_score,
    categorize_urgency,
)
from .providers import (
    ScoreProvider,
    MLScoreProvider,
    HeuristicScoreProvider,
    StoredLevelScoreProvider,
    heuristic_score,
    extract_urgency,
    get_score_provider,
)
from .urgency import (
    calculate_comment_urgency,
    calculate_aggregate_urgency,
    log_urgency_calculation,
)


__all__ = [
    # Models
    "UrgencyScore",
    "ScoreResult",
    # Providers
    "ScoreProvider",
    "MLScoreProvider",
    "HeuristicScoreProvider",
    "StoredLevelScoreProvider",
    "heuristic_score",
    "extract_urgency",
    "get_score_provider",
    # Aggregation
    "calculate_comment_urgency",
    "calculate_aggregate_urgency",
    "log_urgency_calculation",
    # Config
    "URGENCY_KEYWORDS",
    "score_to_urgency",
    "urgency_to_score",
    "categorize_urgency",
]
