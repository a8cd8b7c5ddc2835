"""
Incremental Score Store

Running sum / count of text scores per post, so the incremental feed
reads one average instead of re-scoring comment history.
"""
from typing import Tuple

from loguru import logger

from database.models import Post
from repositories import PostRepository
from .config import incremental_average


class IncrementalScoreStore:
    """
    Accumulator over PostRepository.

    Each update is one UPDATE statement, so concurrent increments to the
    same post are applied by the database without lost writes.
    """

    def __init__(self, repository: PostRepository):
        self.repository = repository

    async def add_score(
        self,
        post_id: str,
        delta_score: float,
        delta_count: int = 1
    ) -> Tuple[float, int]:
        """
        Add a score to a post's running total.

        new_sum = max(0, sum + delta_score), new_count = max(1, count + delta_count)

        Returns:
            (new_sum, new_count)

        Raises:
            PostNotFoundError: If the post does not exist
        """
        new_sum, new_count = await self.repository.update_post_score_add(
            post_id, delta_score, delta_count
        )
        logger.debug(
            f"[score_add] post_id={post_id} delta={delta_score:.3f}/{delta_count} "
            f"sum={new_sum:.3f} count={new_count}"
        )
        return new_sum, new_count

    @staticmethod
    def average(post: Post) -> float:
        """Clamped running average for a loaded post."""
        return incremental_average(post.score_sum, post.score_count)
