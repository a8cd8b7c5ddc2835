"""
User Repository

Lookups and creation of users. Credentials are handled by the external
auth service.
"""
from typing import Optional

from sqlalchemy import select

from database.models import User
from .base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for user operations."""

    model = User

    async def get_by_email(self, email: str) -> Optional[User]:
        """Find a user by email (case-insensitive)."""
        stmt = select(User).where(User.email == email.strip().lower())
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create_user(self, name: str, email: str, is_admin: bool = False) -> User:
        """Create a new user."""
        user = User(name=name.strip(), email=email.strip().lower(), is_admin=is_admin)
        return await self.add(user)
