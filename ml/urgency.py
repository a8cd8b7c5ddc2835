"""
Urgency API client - text urgency classification service.

Request:  POST application/json {"text": "..."}
Response: JSON object with one of score / label / urgency / confidence.
"""
from typing import Any, Dict

from .base import MLClient


class UrgencyAPIClient(MLClient):
    """Client for the external text urgency model."""

    def build_request(self, value: str) -> Dict[str, Any]:
        return {"json": {"text": value}}
