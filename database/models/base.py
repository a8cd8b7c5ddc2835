"""
SQLAlchemy Base Model and Mixins

Provides base classes and common mixins for all models.
"""
import uuid
from datetime import datetime
from typing import Any, Dict

from sqlalchemy import DateTime, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def new_id() -> str:
    """Generate a new UUID primary key."""
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    Provides common utility methods.
    """

    def to_dict(self) -> Dict[str, Any]:
        """Convert model columns to a JSON-friendly dictionary."""
        result = {}
        for c in self.__table__.columns:
            value = getattr(self, c.name)
            if isinstance(value, datetime):
                value = value.isoformat()
            result[c.name] = value
        return result

    def __repr__(self) -> str:
        class_name = self.__class__.__name__
        pk = getattr(self, 'id', None)
        return f"<{class_name}(id={pk})>"


class UUIDPrimaryKeyMixin:
    """Mixin that adds a UUID string primary key."""
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)


class TimestampMixin:
    """
    Mixin that adds created_at and updated_at timestamps.

    Usage:
        class MyModel(Base, TimestampMixin):
            ...
    """
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.now,
        nullable=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.now,
        onupdate=datetime.now,
        nullable=True
    )
