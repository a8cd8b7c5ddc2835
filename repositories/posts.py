"""
Post Repository

Handles all database operations for posts, issues, comments and upvotes,
including the score accumulators read by the incremental feed.
"""
from typing import Optional, Sequence, Tuple

from sqlalchemy import select, update, delete, case, desc
from sqlalchemy.orm import selectinload

from constants import IssueCategory, PostStatus, POST_STATUSES
from database.models import Post, Issue, Comment, Upvote
from .base import BaseRepository
from .errors import PostNotFoundError, InvalidStatusError


class PostRepository(BaseRepository[Post]):
    """Repository for post operations."""

    model = Post

    # ============================================
    # POST QUERIES
    # ============================================

    def _with_relations(self, stmt):
        """
        Preload user, issue, comments (with user) and upvotes.

        Rows already in the identity map are overwritten, since score and
        urgency updates bypass the ORM.
        """
        return stmt.execution_options(populate_existing=True).options(
            selectinload(Post.user),
            selectinload(Post.issue),
            selectinload(Post.comments).selectinload(Comment.user),
            selectinload(Post.upvotes),
        )

    async def get_feed_posts(self, limit: int = 50) -> Sequence[Post]:
        """
        Get posts for the feed, newest first.

        Args:
            limit: Maximum number of posts

        Returns:
            Posts with user, issue, comments and upvotes loaded
        """
        stmt = self._with_relations(
            select(Post).order_by(desc(Post.created_at)).limit(limit)
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def get_post(self, post_id: str) -> Post:
        """
        Get a single post with relations loaded.

        Raises:
            PostNotFoundError: If the post does not exist
        """
        stmt = self._with_relations(select(Post).where(Post.id == post_id))
        result = await self.session.execute(stmt)
        post = result.scalar_one_or_none()
        if post is None:
            raise PostNotFoundError(post_id)
        return post

    async def get_post_comments(self, post_id: str) -> Sequence[Comment]:
        """Get all comments of a post, oldest first."""
        stmt = (
            select(Comment)
            .where(Comment.post_id == post_id)
            .order_by(Comment.created_at)
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def get_all_posts_for_admin(
        self,
        status: Optional[str] = None,
        limit: int = 100
    ) -> Sequence[Post]:
        """
        Get posts for the admin dashboard.

        Args:
            status: Optional status filter ('open', 'inprogress', 'closed')
            limit: Maximum results
        """
        stmt = select(Post)
        if status:
            if status not in POST_STATUSES:
                raise InvalidStatusError(status)
            stmt = stmt.where(Post.status == status)
        stmt = self._with_relations(stmt.order_by(desc(Post.created_at)).limit(limit))
        result = await self.session.execute(stmt)
        return result.scalars().all()

    # ============================================
    # POST CREATION
    # ============================================

    async def get_or_create_issue(
        self,
        name: str,
        description: str = None,
        category: str = None,
    ) -> Issue:
        """Find an issue by name or create it."""
        stmt = select(Issue).where(Issue.name == name)
        result = await self.session.execute(stmt)
        issue = result.scalar_one_or_none()
        if issue is not None:
            return issue

        issue = Issue(
            name=name,
            description=description,
            category=category or IssueCategory.MISCELLANEOUS.value,
        )
        self.session.add(issue)
        await self.session.flush()
        return issue

    async def report_issue_via_post(
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
        classified_as: str = None,
    ) -> Post:
        """
        Create an issue if it does not exist, then create a post for it.

        Returns:
            The new post with relations loaded
        """
        issue = await self.get_or_create_issue(issue_name, issue_desc, issue_cat)

        post = Post(
            issue_id=issue.id,
            user_id=user_id,
            description=post_desc or "",
            status=status or PostStatus.OPEN.value,
            urgency=urgency,
            lat=lat,
            lng=lng,
            media_url=media_url or "",
            classified_as=classified_as,
            score_sum=0.0,
            score_count=0,
        )
        await self.add(post)
        return await self.get_post(post.id)

    # ============================================
    # COMMENTS & UPVOTES
    # ============================================

    async def add_comment(self, user_id: str, post_id: str, content: str) -> Comment:
        """Add a comment to a post."""
        if not await self.exists(post_id):
            raise PostNotFoundError(post_id)

        comment = Comment(post_id=post_id, user_id=user_id, content=content)
        self.session.add(comment)
        await self.session.flush()
        return comment

    async def toggle_upvote(self, user_id: str, post_id: str) -> bool:
        """
        Toggle a user's upvote on a post.

        Returns:
            True if an upvote was created, False if one was removed
        """
        if not await self.exists(post_id):
            raise PostNotFoundError(post_id)

        stmt = select(Upvote).where(
            Upvote.post_id == post_id,
            Upvote.user_id == user_id,
        )
        result = await self.session.execute(stmt)
        existing = result.scalar_one_or_none()

        if existing is not None:
            await self.session.execute(delete(Upvote).where(Upvote.id == existing.id))
            await self.session.flush()
            return False

        self.session.add(Upvote(post_id=post_id, user_id=user_id))
        await self.session.flush()
        return True

    # ============================================
    # SCORING UPDATES
    # ============================================

    async def update_post_urgency(self, post_id: str, urgency: int) -> None:
        """Persist a re-derived urgency level."""
        await self.session.execute(
            update(Post)
            .where(Post.id == post_id)
            .values(urgency=urgency)
            .execution_options(synchronize_session=False)
        )

    async def update_post_score_add(
        self,
        post_id: str,
        delta_score: float,
        delta_count: int
    ) -> Tuple[float, int]:
        """
        Add to a post's score accumulators in one UPDATE statement.

        The sum never goes below 0 and the count never below 1.

        Returns:
            (new_sum, new_count)

        Raises:
            PostNotFoundError: If the post does not exist
        """
        new_sum = Post.score_sum + delta_score
        new_count = Post.score_count + delta_count

        result = await self.session.execute(
            update(Post)
            .where(Post.id == post_id)
            .values(
                score_sum=case((new_sum < 0, 0.0), else_=new_sum),
                score_count=case((new_count < 1, 1), else_=new_count),
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise PostNotFoundError(post_id)

        row = await self.session.execute(
            select(Post.score_sum, Post.score_count).where(Post.id == post_id)
        )
        score_sum, score_count = row.one()
        return score_sum, score_count

    async def update_post_status(
        self,
        post_id: str,
        status: str,
        notes: str = None
    ) -> Post:
        """
        Update a post's status (admin).

        Raises:
            InvalidStatusError: If status is unknown
            PostNotFoundError: If the post does not exist
        """
        if status not in POST_STATUSES:
            raise InvalidStatusError(status)

        result = await self.session.execute(
            update(Post)
            .where(Post.id == post_id)
            .values(status=status, status_notes=notes or None, updated_at=self.now())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise PostNotFoundError(post_id)

        return await self.get_post(post_id)
