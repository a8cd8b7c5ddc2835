"""
User Models

Citizens and admins who report, comment on and upvote posts.
"""
from typing import List, TYPE_CHECKING

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from .posts import Post


class User(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """
    Registered user.

    Credentials live with the external auth service; only identity and
    the admin flag are stored here.
    """
    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False)
    is_admin: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    posts: Mapped[List["Post"]] = relationship("Post", back_populates="user")

    def to_public_dict(self) -> dict:
        """Fields safe to embed in feed responses."""
        return {"id": self.id, "name": self.name, "email": self.email}
