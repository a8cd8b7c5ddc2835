"""
Configuration and utilities for urgency scoring.

Contains:
- Heuristic term lists
- Score <-> urgency bucket tables
- Comment keyword multipliers
- Level thresholds
"""
from constants import UrgencyLevel


# ============================================
# HEURISTIC TERMS
# ============================================

# Checked in order, critical before moderate
CRITICAL_TERMS = ("emergency", "danger", "fire", "explosion", "injury", "critical", "urgent")
MODERATE_TERMS = ("broken", "delay", "blocked", "leak", "issue", "problem", "trash")

HEURISTIC_CRITICAL_SCORE = 0.85
HEURISTIC_MODERATE_SCORE = 0.6
HEURISTIC_BASELINE_SCORE = 0.3
HEURISTIC_EMPTY_SCORE = 0.0


# ============================================
# SCORE <-> URGENCY
# ============================================

THRESHOLD_URGENCY_HIGH = 0.8    # score >= 0.8 -> 3
THRESHOLD_URGENCY_MEDIUM = 0.5  # score >= 0.5 -> 2

STORED_URGENCY_SCORES = {
    # urgency: representative score
    3: 0.85,
    2: 0.6,
    1: 0.3,
}

LABEL_URGENCY = {
    # label: (urgency, score)
    "critical": (3, 0.9),
    "urgent": (3, 0.9),
    "moderate": (2, 0.65),
    "medium": (2, 0.65),
    "low": (1, 0.3),
    "minor": (1, 0.3),
}


# ============================================
# COMMENT KEYWORDS
# ============================================

URGENCY_KEYWORDS = {
    # Critical indicators
    "dangerous": 3.0,
    "critical": 3.0,
    "emergency": 3.0,
    "severe": 3.0,
    "urgent": 3.0,
    "fatal": 3.0,
    "death": 3.0,
    "dying": 3.0,
    "collapsed": 3.0,
    "collapse": 3.0,
    "broken": 2.5,
    "destroyed": 2.5,
    "accident": 2.5,
    "injury": 2.5,
    "injured": 2.5,
    "bleeding": 3.0,
    "fire": 3.0,
    "explod": 3.0,
    "hazard": 2.5,
    "gas": 2.5,

    # Moderate indicators
    "concern": 1.8,
    "serious": 2.0,
    "problem": 1.5,
    "issue": 1.2,
    "needs": 1.5,
    "needed": 1.5,
    "repair": 1.8,
    "damage": 2.0,
    "damaged": 2.0,
    "flood": 2.2,
    "flooding": 2.2,
    "waterlog": 2.2,
    "crack": 1.6,
    "hole": 1.5,
    "pothole": 1.8,
    "danger": 2.3,
    "risk": 2.0,
    "unsafe": 2.2,
    "sick": 2.0,
    "illness": 2.0,
    "disease": 2.0,
    "spread": 2.0,

    # Low indicators
    "minor": 0.8,
    "small": 0.7,
    "slight": 0.7,
    "bit": 0.6,
    "little": 0.6,
    "could": 0.9,
    "might": 0.9,
    "possible": 0.9,
    "maybe": 0.8,
    "suggests": 1.0,
    "seems": 0.9,
}

# Prefix matching tries the most specific keyword first
PREFIX_KEYWORDS = tuple(sorted(URGENCY_KEYWORDS.items(), key=lambda kv: (-len(kv[0]), kv[0])))

PARTIAL_MATCH_DISCOUNT = 0.8
TOKEN_STRIP_CHARS = ".,!?;:\"'()[]{}"
CONFIDENCE_PER_MATCH = 0.15

DEFAULT_COMMENT_SCORE = 1.0
DEFAULT_COMMENT_CONFIDENCE = 0.5
MAX_COMMENT_SCORE = 3.0
MIN_COMMENT_SCORE = 0.5


# ============================================
# LEVEL THRESHOLDS
# ============================================

THRESHOLD_LEVEL_LOW = 0.75       # score <= 0.75 -> low
THRESHOLD_LEVEL_MODERATE = 1.5   # score <= 1.5 -> moderate

# Aggregate post urgency (1-3 scale)
POST_WEIGHT = 0.5
COMMENT_WEIGHT = 0.5
THRESHOLD_AGGREGATE_HIGH = 2.25    # > 2.25 -> 3
THRESHOLD_AGGREGATE_MEDIUM = 1.125  # > 1.125 -> 2


# ============================================
# UTILITY FUNCTIONS
# ============================================

def score_to_urgency(score: float) -> int:
    """
    Map a continuous score to a discrete urgency bucket.

    Args:
        score: Score, nominally in [0, 1]

    Returns:
        3 for score >= 0.8, 2 for score >= 0.5, else 1
    """
    if score >= THRESHOLD_URGENCY_HIGH:
        return 3
    if score >= THRESHOLD_URGENCY_MEDIUM:
        return 2
    return 1


def urgency_to_score(urgency: int) -> float:
    """Representative score for a stored urgency level (0.0 if unknown)."""
    return STORED_URGENCY_SCORES.get(urgency, 0.0)


def categorize_urgency(score: float) -> UrgencyLevel:
    """
    Convert a 0-3 score to a descriptive level.

    low <= 0.75 < moderate <= 1.5 < critical
    """
    if score <= THRESHOLD_LEVEL_LOW:
        return UrgencyLevel.LOW
    if score <= THRESHOLD_LEVEL_MODERATE:
        return UrgencyLevel.MODERATE
    return UrgencyLevel.CRITICAL
