"""
Post Models

Models for issues, reported posts, comments and upvotes.
"""
from datetime import datetime
from typing import Optional, List

from sqlalchemy import String, Float, Integer, Text, Index, ForeignKey, UniqueConstraint, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship

from constants import IssueCategory, PostStatus
from .base import Base, TimestampMixin, UUIDPrimaryKeyMixin
from .users import User


class Issue(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """
    A named civic issue.

    Several posts may report the same issue; they share it by name.
    """
    __tablename__ = "issues"

    name: Mapped[str] = mapped_column(String(200), unique=True, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    category: Mapped[str] = mapped_column(
        String(50), nullable=False, default=IssueCategory.MISCELLANEOUS.value
    )

    posts: Mapped[List["Post"]] = relationship("Post", back_populates="issue")


class Post(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """
    A citizen report of an issue.

    `urgency` is the stored baseline level (1-3), re-derived after every
    comment. `score_sum` / `score_count` accumulate continuous scores so the
    incremental feed can average them without re-reading comments.
    """
    __tablename__ = "posts"

    issue_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("issues.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Content
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True, default="")
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=PostStatus.OPEN.value)
    status_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    lat: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    lng: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    media_url: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # Scoring
    urgency: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    classified_as: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    score_sum: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    score_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Relationships
    issue: Mapped["Issue"] = relationship("Issue", back_populates="posts")
    user: Mapped["User"] = relationship("User", back_populates="posts")
    comments: Mapped[List["Comment"]] = relationship(
        "Comment",
        back_populates="post",
        cascade="all, delete-orphan",
        order_by="Comment.created_at.desc()",
    )
    upvotes: Mapped[List["Upvote"]] = relationship(
        "Upvote",
        back_populates="post",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index('idx_posts_created', 'created_at'),
        Index('idx_posts_status', 'status'),
    )


class Comment(Base, UUIDPrimaryKeyMixin):
    """A comment on a post. Immutable once created."""
    __tablename__ = "comments"

    post_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now, nullable=True)

    post: Mapped["Post"] = relationship("Post", back_populates="comments")
    user: Mapped["User"] = relationship("User")


class Upvote(Base, UUIDPrimaryKeyMixin):
    """One user's upvote on one post."""
    __tablename__ = "upvotes"

    post_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now, nullable=True)

    post: Mapped["Post"] = relationship("Post", back_populates="upvotes")

    __table_args__ = (
        UniqueConstraint('post_id', 'user_id', name='uq_upvotes_post_user'),
    )
