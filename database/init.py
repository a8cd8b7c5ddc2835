"""
Database Initialization

Creates the schema at application startup.
"""
from loguru import logger


async def init_database_async() -> None:
    """
    Initialize database using SQLAlchemy.

    Creates all tables defined in the models.
    """
    from .session import create_tables
    await create_tables()
    logger.info("Database initialized with SQLAlchemy")
