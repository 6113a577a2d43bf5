"""Application configuration module."""

from typing import List, Optional
from pydantic import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # Database settings
    # When unset, the URL is assembled from DB_* variables (see common.db.connection)
    DATABASE_URL: Optional[str] = None
    SQL_ECHO: bool = False
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 30

    # Logging settings
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    LOG_JSON: bool = False

    # API settings
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Exam Sheet Evaluations"
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    # Bearer token verification
    JWT_SECRET_KEY: str = "dev-secret-key"
    JWT_ALGORITHM: str = "HS256"
    JWT_ISSUER: str = "driving-school-api"

    # History paging
    HISTORY_DEFAULT_PAGE_SIZE: int = 20
    HISTORY_MAX_PAGE_SIZE: int = 100

    # Development only: create tables and seed templates on startup
    SEED_ON_STARTUP: bool = False

    class Config:
        """Pydantic settings config."""
        env_file = ".env"
        case_sensitive = True


# Create global settings instance
settings = Settings()
