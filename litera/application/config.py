"""Application configuration using Pydantic Settings."""

from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application settings
    app_name: str = "litera"
    app_version: str = "0.1.0"
    debug: bool = False

    # API settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Logging
    log_level: str = "INFO"

    # Storage backend: "local" or "dynamodb"
    storage_backend: str = "local"

    # AWS settings for the DynamoDB backend
    aws_region: str = "us-west-2"
    profiles_table_name: str = "LiteraProfiles"
    sessions_table_name: str = "LiteraReadingSessions"
    badges_table_name: str = "LiteraBadges"
    user_badges_table_name: str = "LiteraUserBadges"
    posts_table_name: str = "LiteraPosts"
    books_table_name: str = "LiteraBooks"
    user_books_table_name: str = "LiteraUserBooks"

    # Streaks
    default_timezone: str = "UTC"
    streak_min_minutes: int = 10

    # Google Books
    google_books_base_url: str = "https://www.googleapis.com/books/v1"
    google_books_api_key: Optional[str] = None
    google_books_cache_ttl: int = 24 * 60 * 60
    google_books_cache_size: int = 256
    google_books_max_retries: int = 2
    google_books_backoff_seconds: float = 2.0
    google_books_timeout: float = 10.0


# Create a singleton instance
settings = Settings()
