"""
Environment configuration for the notice board backend.
Uses Pydantic's settings management to read NOTICEBOARD_* environment
variables (or a .env file) with typed defaults.
"""
from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    model_config = SettingsConfigDict(
        env_prefix="NOTICEBOARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    APP_NAME: str = "Notice Board"
    DEBUG: bool = False

    # Server
    HOST: str = "127.0.0.1"
    PORT: int = 8080
    CORS_ORIGINS: List[str] = Field(default=["*"])

    # Persistence: "sqlalchemy" or "memory"
    REPOSITORY_BACKEND: str = "sqlalchemy"
    DATABASE_URL: str = "sqlite:///noticeboard.db"
    DATABASE_ECHO: bool = False

    # File uploads
    UPLOAD_DIR: str = "uploads"
    MAX_UPLOAD_SIZE_MB: int = 10
    ALLOWED_EXTENSIONS: List[str] = Field(
        default=["pdf", "doc", "docx", "xls", "xlsx", "hwp", "txt", "png", "jpg", "jpeg", "gif", "zip"]
    )

    # Pagination
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    @property
    def max_upload_size_bytes(self) -> int:
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
