"""
Base Repository Pattern with SQLAlchemy

Provides common async CRUD operations for all repositories.
"""
from datetime import datetime
from typing import TypeVar, Generic, Optional, Type
import uuid

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from database.models.base import Base
from .errors import InvalidIdentifierError


# Generic type for model classes
ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """
    Base repository with common async database operations.

    Subclasses should set the `model` class attribute to their specific
    SQLAlchemy model class.

    Example:
        class UserRepository(BaseRepository[User]):
            model = User
    """

    model: Type[ModelT]

    def __init__(self, session: AsyncSession):
        """
        Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    # ============================================
    # READ OPERATIONS
    # ============================================

    async def get(self, entity_id: str) -> Optional[ModelT]:
        """
        Get entity by ID.

        Args:
            entity_id: Primary key value

        Returns:
            Entity or None if not found
        """
        return await self.session.get(self.model, entity_id)

    async def count(self) -> int:
        """Count all entities."""
        stmt = select(func.count()).select_from(self.model)
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def exists(self, entity_id: str) -> bool:
        """Check if entity exists."""
        stmt = select(func.count()).select_from(self.model).where(
            self.model.id == entity_id
        )
        result = await self.session.execute(stmt)
        return result.scalar_one() > 0

    # ============================================
    # WRITE OPERATIONS
    # ============================================

    async def add(self, entity: ModelT) -> ModelT:
        """
        Add a new entity.

        Args:
            entity: Entity to add

        Returns:
            Added entity with any auto-generated values
        """
        self.session.add(entity)
        await self.session.flush()
        return entity

    # ============================================
    # UTILITY METHODS
    # ============================================

    @staticmethod
    def parse_id(value, field: str = "id") -> str:
        """
        Normalize a UUID identifier.

        Args:
            value: Raw id (string or UUID)
            field: Name used in the error message

        Returns:
            Canonical lowercase UUID string

        Raises:
            InvalidIdentifierError: If value is not a UUID
        """
        if isinstance(value, uuid.UUID):
            return str(value)
        try:
            return str(uuid.UUID(str(value).strip()))
        except (ValueError, TypeError, AttributeError):
            raise InvalidIdentifierError(field, value)

    @staticmethod
    def now() -> datetime:
        """Get current datetime."""
        return datetime.now()
