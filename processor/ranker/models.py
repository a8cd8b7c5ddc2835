"""
Data models for the Ranker module.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import List

from constants import ScoringMode
from database.models import Post


class CallBudget:
    """
    Score provider calls left for one feed request.

    Shared by every post in the request; checked before each call.
    """

    def __init__(self, limit: int):
        self.limit = max(0, limit)
        self.used = 0

    @property
    def remaining(self) -> int:
        return self.limit - self.used

    @property
    def exhausted(self) -> bool:
        return self.used >= self.limit

    def try_spend(self) -> bool:
        """Take one call from the budget. False if none are left."""
        if self.exhausted:
            return False
        self.used += 1
        return True

    def __repr__(self) -> str:
        return f"CallBudget(used={self.used}, limit={self.limit})"


def serialize_post(post: Post) -> dict:
    """Post with issue, user, comments and upvote count."""
    data = post.to_dict()
    data["issue"] = post.issue.to_dict() if post.issue else None
    data["user"] = post.user.to_public_dict() if post.user else None
    data["comments"] = [
        {
            **comment.to_dict(),
            "user": comment.user.to_public_dict() if comment.user else None,
        }
        for comment in post.comments
    ]
    data["upvote_count"] = len(post.upvotes)
    # Accumulators are internal bookkeeping
    data.pop("score_sum", None)
    data.pop("score_count", None)
    return data


@dataclass
class RankedPost:
    """A post with its request-scoped score. Never persisted."""
    post: Post
    score: float
    computed_urgency: int
    scores_used: int = 0

    @property
    def post_id(self) -> str:
        return self.post.id

    def to_dict(self) -> dict:
        data = serialize_post(self.post)
        data["score"] = round(self.score, 4)
        data["computed_urgency"] = self.computed_urgency
        return data


@dataclass
class FeedResult:
    """Ranked feed for one request."""
    mode: ScoringMode
    posts: List[RankedPost]
    calls_used: int = 0
    ranked_at: datetime = field(default_factory=datetime.now)

    def to_list(self) -> List[dict]:
        return [ranked.to_dict() for ranked in self.posts]
