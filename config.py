"""
Civic Issue Feed - Configuration
"""
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Paths
    BASE_DIR: Path = Path(__file__).parent
    DATA_DIR: Path = Field(default_factory=lambda: Path(__file__).parent / "data")
    DATABASE_PATH: Path = Field(default_factory=lambda: Path(__file__).parent / "data" / "civic.db")
    DATABASE_URL: Optional[str] = Field(default=None, description="Overrides DATABASE_PATH when set")

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_DIR: Optional[Path] = Field(default=None, description="Directory for rotating log files")

    # Scoring
    SCORING_MODE: Literal["ml", "heuristic", "none", "incremental"] = Field(default="none")

    # Feed
    FEED_LIMIT: int = Field(default=50, ge=1)
    FEED_CALL_BUDGET: int = Field(default=50, ge=0, description="Max score provider calls per feed request")
    FEED_MAX_COMMENTS_SCORED: int = Field(default=5, ge=0)
    ADMIN_FEED_LIMIT: int = Field(default=100, ge=1)

    # External ML services (empty URL = disabled)
    ML_API_URL: str = Field(default="")
    IMAGE_CLASSIFICATION_API_URL: str = Field(default="")
    ML_TEXT_TIMEOUT: float = Field(default=15.0, gt=0)
    ML_IMAGE_TIMEOUT: float = Field(default=20.0, gt=0)
    ML_CLIENT_TIMEOUT_BUFFER: float = Field(default=2.0, ge=0)

    # API
    API_HOST: str = Field(default="0.0.0.0")
    API_PORT: int = Field(default=8080)
    CORS_ALLOW_ORIGINS: list[str] = Field(default_factory=lambda: ["*"])

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


# Global settings instance
settings = Settings()


def ensure_directories():
    """Ensure all required directories exist."""
    dirs = [settings.DATA_DIR]
    if settings.LOG_DIR:
        dirs.append(settings.LOG_DIR)
    for dir_path in dirs:
        dir_path.mkdir(parents=True, exist_ok=True)
