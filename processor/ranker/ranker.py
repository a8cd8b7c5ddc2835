"""
Feed Ranker

Scores every post of a feed request and sorts by score, highest first.
Runs per request; nothing it computes is persisted.
"""
from typing import List, Optional, Sequence

from loguru import logger

from constants import ScoringMode
from database.models import Post
from ..scorer import ScoreProvider, get_score_provider, score_to_urgency
from repositories import PostRepository
from .config import (
    blend_score,
    upvote_presence,
    default_call_budget,
    default_max_comments,
)
from .models import CallBudget, FeedResult, RankedPost
from .store import IncrementalScoreStore


class FeedRanker:
    """
    Ranks the feed.

    - incremental: reuses each post's running average, no provider calls
    - ml / heuristic / none: re-scores description and recent comments
      under a per-request call budget
    """

    def __init__(
        self,
        provider: Optional[ScoreProvider] = None,
        call_budget: Optional[int] = None,
        max_comments: Optional[int] = None,
    ):
        """
        Initialize ranker.

        Args:
            provider: Score provider for on-the-fly modes (default: chosen by mode)
            call_budget: Provider calls allowed per request
            max_comments: Comments scored per post
        """
        self.provider = provider
        self.call_budget = default_call_budget() if call_budget is None else call_budget
        self.max_comments = default_max_comments() if max_comments is None else max_comments

    async def get_feed(
        self,
        repository: PostRepository,
        mode: ScoringMode,
        limit: int = 50
    ) -> FeedResult:
        """
        Read the newest posts and rank them.

        Args:
            repository: Post repository bound to the request session
            mode: Scoring mode resolved for the request
            limit: Maximum posts read from the repository
        """
        posts = await repository.get_feed_posts(limit=limit)
        return await self.rank(posts, mode)

    async def rank(self, posts: Sequence[Post], mode: ScoringMode) -> FeedResult:
        """
        Rank posts given newest first.

        Returns:
            FeedResult sorted by score descending; equal scores keep input order
        """
        mode = ScoringMode(mode)
        budget = CallBudget(self.call_budget)

        if mode == ScoringMode.INCREMENTAL:
            ranked = [self.rank_incremental(post) for post in posts]
        else:
            provider = self.provider or get_score_provider(mode)
            ranked = []
            for post in posts:
                ranked.append(await self.rank_on_the_fly(post, provider, budget))

        # list.sort is stable
        ranked.sort(key=lambda r: r.score, reverse=True)

        if budget.exhausted and mode != ScoringMode.INCREMENTAL:
            logger.warning(f"Feed call budget exhausted: {budget}, {len(posts)} posts")

        logger.info(f"Feed ranked: mode={mode.value} posts={len(ranked)} calls={budget.used}")
        return FeedResult(mode=mode, posts=ranked, calls_used=budget.used)

    def rank_incremental(self, post: Post) -> RankedPost:
        """Rank from the stored running average."""
        text_score = IncrementalScoreStore.average(post)
        return RankedPost(
            post=post,
            score=blend_score(text_score, upvote_presence(len(post.upvotes))),
            computed_urgency=score_to_urgency(text_score),
            scores_used=1 if post.score_count else 0,
        )

    async def rank_on_the_fly(
        self,
        post: Post,
        provider: ScoreProvider,
        budget: CallBudget
    ) -> RankedPost:
        """
        Score the description and up to `max_comments` comments.

        Posts reached after the budget runs out average whatever was
        scored, possibly nothing (text score 0).
        """
        scores: List[float] = []

        if budget.try_spend():
            scores.append(await provider.score(post.description or "", stored_urgency=post.urgency))

        for comment in post.comments[:self.max_comments]:
            if not budget.try_spend():
                break
            scores.append(await provider.score(comment.content or "", stored_urgency=post.urgency))

        text_score = sum(scores) / len(scores) if scores else 0.0
        return RankedPost(
            post=post,
            score=blend_score(text_score, upvote_presence(len(post.upvotes))),
            computed_urgency=score_to_urgency(text_score),
            scores_used=len(scores),
        )
