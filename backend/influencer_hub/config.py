"""Application configuration."""

from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Environment
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "postgresql://influencers:influencers123@db:5432/influencers"

    # Unification pass
    ANCHOR_PLATFORMS: List[str] = ["TWITCH", "YOUTUBE", "KICK"]
    SATELLITE_PLATFORMS: List[str] = ["TIKTOK", "INSTAGRAM", "X", "FACEBOOK", "LINKEDIN"]
    UNIFICATION_INSERT_BATCH_SIZE: int = 500
    UNIFICATION_PROGRESS_EVERY: int = 100

    # Scheduled unification
    ENABLE_SCHEDULED_UNIFICATION: bool = False
    UNIFICATION_SCHEDULE: str = "0 3 * * *"  # daily at 3am

    # API server
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000

    # Campaign scoring
    SCORING_MAX_CONCURRENCY: int = 8
    SCORING_ANALYZE_LIMIT: int = 10

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
