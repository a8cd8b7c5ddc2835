"""
Report Ingestion - scoring side effects of new reports and comments.

Flow:
1. New report -> score description -> maybe override urgency -> classify
   image -> persist -> seed score accumulators
2. New comment -> persist -> add comment score to accumulators ->
   recompute stored urgency from all comments

Scoring is best-effort: bookkeeping failures are logged and never fail
the report or comment itself.
"""
from typing import List, Optional, Sequence, Tuple

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from constants import ScoringMode, UrgencyLevel
from database.models import Comment, Post
from ml import ImageClassificationClient, MLClientError, get_image_client, get_urgency_client
from repositories import PostRepository
from .ranker import IncrementalScoreStore
from .scorer import (
    ScoreProvider,
    MLScoreProvider,
    get_score_provider,
    calculate_comment_urgency,
    calculate_aggregate_urgency,
    log_urgency_calculation,
    urgency_to_score,
)

# Provider scores are [0, 1]; aggregation works on the 0-3 comment scale
COMMENT_SCALE = 3.0

# Stored baseline urgency is always one of these
VALID_URGENCIES = (1, 2, 3)
DEFAULT_URGENCY = 1


class ReportIngestion:
    """
    Handles report, comment, upvote and status events for one session.
    """

    def __init__(
        self,
        session: AsyncSession,
        mode: ScoringMode,
        provider: Optional[ScoreProvider] = None,
        image_client: Optional[ImageClassificationClient] = None,
    ):
        """
        Initialize ingestion.

        Args:
            session: Request-scoped database session
            mode: Scoring mode resolved for the request
            provider: Score provider (default: chosen by mode)
            image_client: Image classifier (default: configured one, if any)
        """
        self.mode = ScoringMode(mode)
        self.repository = PostRepository(session)
        self.score_store = IncrementalScoreStore(self.repository)
        self.provider = provider or get_score_provider(self.mode)
        self.image_client = image_client if image_client is not None else get_image_client()

    # ============================================
    # REPORTS
    # ============================================

    async def report_issue(
        self,
        user_id: str,
        issue_name: str,
        issue_desc: str = None,
        issue_cat: str = None,
        post_desc: str = "",
        status: str = None,
        urgency: int = 1,
        lat: float = 0.0,
        lng: float = 0.0,
        media_url: str = "",
    ) -> Post:
        """
        Create a post for an issue.

        Raises:
            InvalidIdentifierError: If user_id is not a UUID
        """
        user_id = self.repository.parse_id(user_id, "user_id")
        if urgency not in VALID_URGENCIES:
            logger.warning(f"Report urgency {urgency!r} out of range, using {DEFAULT_URGENCY}")
            urgency = DEFAULT_URGENCY

        init_score = urgency_to_score(urgency)
        try:
            prediction = await self.provider.predict(post_desc or "", stored_urgency=urgency)
        except Exception as e:
            logger.exception(f"Urgency prediction failed, keeping urgency={urgency}: {e}")
        else:
            init_score = prediction.score
            if prediction.urgency != 0 and prediction.urgency != urgency:
                logger.info(
                    f"Report urgency overridden: {urgency} -> {prediction.urgency} "
                    f"(score={prediction.score:.2f}, source={prediction.source.value})"
                )
                urgency = prediction.urgency

        classified_as = await self.classify_image(media_url)

        post = await self.repository.report_issue_via_post(
            user_id=user_id,
            issue_name=issue_name,
            issue_desc=issue_desc,
            issue_cat=issue_cat,
            post_desc=post_desc,
            status=status,
            urgency=urgency,
            lat=lat,
            lng=lng,
            media_url=media_url,
            classified_as=classified_as,
        )

        try:
            await self.score_store.add_score(post.id, init_score, 1)
        except Exception as e:
            logger.exception(f"Failed to seed score for post {post.id}: {e}")

        return await self.repository.get_post(post.id)

    async def classify_image(self, media_url: str) -> Optional[str]:
        """Classify the report image; None when disabled or on failure."""
        if self.image_client is None or not media_url:
            return None
        try:
            return await self.image_client.classify(media_url)
        except MLClientError as e:
            logger.warning(f"Image classification skipped: {e}")
            return None

    # ============================================
    # COMMENTS
    # ============================================

    async def add_comment(self, user_id: str, post_id: str, content: str) -> Comment:
        """
        Add a comment and refresh the post's scores.

        Raises:
            InvalidIdentifierError: If an id is not a UUID
            PostNotFoundError: If the post does not exist
        """
        user_id = self.repository.parse_id(user_id, "user_id")
        post_id = self.repository.parse_id(post_id, "post_id")

        comment = await self.repository.add_comment(user_id, post_id, content)

        if content and content.strip():
            try:
                post = await self.repository.get_post(post_id)
                score = await self.provider.score(content, stored_urgency=post.urgency)
                await self.score_store.add_score(post_id, score, 1)
            except Exception as e:
                logger.exception(f"Failed to update score for post {post_id}: {e}")

        try:
            await self.recalculate_urgency(post_id)
        except Exception as e:
            logger.exception(f"Failed to recalculate urgency for post {post_id}: {e}")

        return comment

    async def comment_scores(self, post: Post, comments: Sequence[Comment]) -> List[float]:
        """
        Per-comment scores on the 0-3 scale.

        `none` mode uses the keyword analyzer; other modes scale the
        provider's [0, 1] score.
        """
        if self.mode == ScoringMode.NONE:
            return [calculate_comment_urgency(c.content or "").score for c in comments]

        scores = []
        for comment in comments:
            value = await self.provider.score(comment.content or "", stored_urgency=post.urgency)
            scores.append(value * COMMENT_SCALE)
        return scores

    async def recalculate_urgency(self, post_id: str) -> Tuple[int, UrgencyLevel]:
        """
        Re-derive the stored urgency from all of the post's comments.

        Returns:
            (new urgency, level)
        """
        post = await self.repository.get_post(post_id)
        comments = await self.repository.get_post_comments(post_id)
        scores = await self.comment_scores(post, comments)

        final_urgency, level = calculate_aggregate_urgency(post.urgency, scores)
        log_urgency_calculation(post_id, post.urgency, scores, final_urgency, level)

        if final_urgency != post.urgency:
            await self.repository.update_post_urgency(post_id, final_urgency)
        return final_urgency, level

    # ============================================
    # UPVOTES & STATUS
    # ============================================

    async def toggle_upvote(self, user_id: str, post_id: str) -> bool:
        """
        Toggle an upvote.

        Returns:
            True if created, False if removed
        """
        user_id = self.repository.parse_id(user_id, "user_id")
        post_id = self.repository.parse_id(post_id, "post_id")
        return await self.repository.toggle_upvote(user_id, post_id)

    async def update_post_status(self, post_id: str, status: str, notes: str = None) -> Post:
        """Admin status change."""
        post_id = self.repository.parse_id(post_id, "post_id")
        post = await self.repository.update_post_status(post_id, status.strip().lower(), notes)
        logger.info(f"Post {post_id} status -> {post.status}")
        return post


async def predict_urgency(text: str, provider: Optional[ScoreProvider] = None) -> int:
    """
    Urgency preview for text being typed.

    Uses the ML provider (heuristic when ML is off or failing); never raises.
    """
    if provider is None:
        provider = MLScoreProvider(client=get_urgency_client())
    result = await provider.predict(text)
    return result.urgency
