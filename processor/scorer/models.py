"""
Data models for the Scorer module.
"""
from dataclasses import dataclass
from typing import Optional

from constants import ScoreSource, UrgencyLevel


@dataclass
class UrgencyScore:
    """Keyword-based urgency of a single comment."""
    score: float          # 0.0 - 3.0
    level: UrgencyLevel
    confidence: float     # 0.0 - 1.0

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "level": self.level.value,
            "confidence": self.confidence,
        }


@dataclass
class ScoreResult:
    """Continuous score of a text plus its discrete urgency bucket."""
    score: float
    urgency: int
    source: ScoreSource
    fallback_reason: Optional[str] = None

    @property
    def used_fallback(self) -> bool:
        return self.fallback_reason is not None

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "urgency": self.urgency,
            "source": self.source.value,
            "fallback_reason": self.fallback_reason,
        }
