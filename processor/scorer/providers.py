"""
Score Providers - pluggable text -> urgency score in [0, 1].

Three implementations share one interface so callers never care which
one is behind a scoring mode:

- MLScoreProvider: external model, falls back to the heuristic on any failure
- HeuristicScoreProvider: local keyword scan
- StoredLevelScoreProvider: maps the post's stored urgency, ignores text
"""
import math
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional, Tuple

from loguru import logger

from constants import ScoreSource, ScoringMode
from ml import UrgencyAPIClient, MLClientError, get_urgency_client
from .config import (
    CRITICAL_TERMS,
    MODERATE_TERMS,
    HEURISTIC_CRITICAL_SCORE,
    HEURISTIC_MODERATE_SCORE,
    HEURISTIC_BASELINE_SCORE,
    HEURISTIC_EMPTY_SCORE,
    LABEL_URGENCY,
    score_to_urgency,
    urgency_to_score,
)
from .models import ScoreResult


def heuristic_score(text: str) -> float:
    """
    Lightweight local urgency estimate.

    Case-insensitive substring scan; critical terms win over moderate ones.

    Returns:
        0.85 critical, 0.6 moderate, 0.0 blank text, else 0.3
    """
    lower = (text or "").lower()
    for term in CRITICAL_TERMS:
        if term in lower:
            return HEURISTIC_CRITICAL_SCORE
    for term in MODERATE_TERMS:
        if term in lower:
            return HEURISTIC_MODERATE_SCORE
    if not lower.strip():
        return HEURISTIC_EMPTY_SCORE
    return HEURISTIC_BASELINE_SCORE


class ScoreProvider(ABC):
    """Produces a continuous urgency score for a text. Never raises."""

    source: ScoreSource

    @abstractmethod
    async def predict(self, text: str, stored_urgency: Optional[int] = None) -> ScoreResult:
        """
        Score a text.

        Args:
            text: Description or comment content
            stored_urgency: The post's stored urgency level, when known

        Returns:
            ScoreResult with score, discrete urgency and fallback reason
        """
        pass

    async def score(self, text: str, stored_urgency: Optional[int] = None) -> float:
        """Continuous score only."""
        result = await self.predict(text, stored_urgency)
        return result.score

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class HeuristicScoreProvider(ScoreProvider):
    """Local keyword heuristic."""

    source = ScoreSource.HEURISTIC

    def predict_sync(self, text: str, fallback_reason: Optional[str] = None) -> ScoreResult:
        value = heuristic_score(text)
        return ScoreResult(
            score=value,
            urgency=score_to_urgency(value),
            source=self.source,
            fallback_reason=fallback_reason,
        )

    async def predict(self, text: str, stored_urgency: Optional[int] = None) -> ScoreResult:
        return self.predict_sync(text)


class StoredLevelScoreProvider(ScoreProvider):
    """Derives the score from the post's already stored urgency level."""

    source = ScoreSource.STORED

    async def predict(self, text: str, stored_urgency: Optional[int] = None) -> ScoreResult:
        value = urgency_to_score(stored_urgency)
        urgency = stored_urgency if stored_urgency in (1, 2, 3) else 0
        return ScoreResult(score=value, urgency=urgency, source=self.source)


# ============================================
# ML RESPONSE DECODING
# ============================================

def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return float(value)


def _from_score(payload: Dict[str, Any]) -> Optional[Tuple[int, float]]:
    value = _as_number(payload.get("score"))
    if value is None:
        return None
    return score_to_urgency(value), value


def _from_label(payload: Dict[str, Any]) -> Optional[Tuple[int, float]]:
    label = payload.get("label")
    if not isinstance(label, str):
        return None
    return LABEL_URGENCY.get(label.strip().lower())


def _from_urgency(payload: Dict[str, Any]) -> Optional[Tuple[int, float]]:
    value = _as_number(payload.get("urgency"))
    if value is None:
        return None
    urgency = int(value)
    return urgency, urgency_to_score(urgency)


def _from_confidence(payload: Dict[str, Any]) -> Optional[Tuple[int, float]]:
    value = _as_number(payload.get("confidence"))
    if value is None:
        return None
    return score_to_urgency(value), value


# Tried in order; first match wins
RESPONSE_EXTRACTORS: Tuple[Tuple[str, Callable[[Dict[str, Any]], Optional[Tuple[int, float]]]], ...] = (
    ("score", _from_score),
    ("label", _from_label),
    ("urgency", _from_urgency),
    ("confidence", _from_confidence),
)


def extract_urgency(payload: Dict[str, Any]) -> Optional[Tuple[int, float]]:
    """
    Pull (urgency, score) out of an ML response.

    Precedence: score > label > urgency > confidence.

    Returns:
        (urgency, score), or None if no field is recognized
    """
    for field_name, extractor in RESPONSE_EXTRACTORS:
        extracted = extractor(payload)
        if extracted is not None:
            logger.debug(f"ml: urgency from '{field_name}' -> urgency={extracted[0]} score={extracted[1]:.2f}")
            return extracted
    return None


class MLScoreProvider(ScoreProvider):
    """
    External model with heuristic fallback.

    Without a configured client every call goes straight to the heuristic.
    """

    source = ScoreSource.ML

    def __init__(
        self,
        client: Optional[UrgencyAPIClient] = None,
        fallback: Optional[HeuristicScoreProvider] = None,
    ):
        self.client = client
        self.fallback = fallback or HeuristicScoreProvider()

    def _fall_back(self, text: str, reason: str) -> ScoreResult:
        logger.warning(f"ml: falling back to heuristic ({reason})")
        return self.fallback.predict_sync(text, fallback_reason=reason)

    async def predict(self, text: str, stored_urgency: Optional[int] = None) -> ScoreResult:
        if self.client is None:
            return self.fallback.predict_sync(text)

        try:
            response = await self.client.send(text)
        except MLClientError as e:
            return self._fall_back(text, f"{e.reason}: {e}")

        extracted = extract_urgency(response.payload)
        if extracted is None:
            return self._fall_back(text, f"unrecognized response: {response.payload}")

        urgency, value = extracted
        return ScoreResult(score=value, urgency=urgency, source=self.source)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(client={self.client!r})"


def get_score_provider(
    mode: ScoringMode,
    urgency_client: Optional[UrgencyAPIClient] = None,
) -> ScoreProvider:
    """
    Score provider for a scoring mode.

    Args:
        mode: Scoring mode resolved for the request
        urgency_client: Explicit ML client; defaults to the configured one

    Returns:
        ml / incremental -> MLScoreProvider, heuristic -> HeuristicScoreProvider,
        none -> StoredLevelScoreProvider
    """
    mode = ScoringMode(mode)
    if mode in (ScoringMode.ML, ScoringMode.INCREMENTAL):
        return MLScoreProvider(client=urgency_client or get_urgency_client())
    if mode == ScoringMode.HEURISTIC:
        return HeuristicScoreProvider()
    return StoredLevelScoreProvider()
