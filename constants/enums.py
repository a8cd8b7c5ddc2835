"""
Shared Enums

Application-wide enums used across multiple modules.
"""
from enum import Enum


class ScoringMode(str, Enum):
    """Which score provider feeds the ranker."""
    ML = "ml"
    HEURISTIC = "heuristic"
    NONE = "none"
    INCREMENTAL = "incremental"


class UrgencyLevel(str, Enum):
    """Descriptive urgency levels."""
    LOW = "low"
    MODERATE = "moderate"
    CRITICAL = "critical"


class PostStatus(str, Enum):
    """Post lifecycle states, updated by admins."""
    OPEN = "open"
    IN_PROGRESS = "inprogress"
    CLOSED = "closed"


class ScoreSource(str, Enum):
    """Where a continuous score came from."""
    ML = "ml"
    HEURISTIC = "heuristic"
    STORED = "stored"


class IssueCategory(str, Enum):
    """Known issue categories."""
    LIGHTING = "Lighting"
    ROAD = "Road"
    SANITATION = "Sanitation"
    UTILITIES = "Utilities"
    VANDALISM = "Vandalism"
    MISCELLANEOUS = "Miscellaneous"


# Dict versions for lookups
POST_STATUSES = {s.value: s.value for s in PostStatus}
