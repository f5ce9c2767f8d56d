"""Configuration management using Pydantic settings."""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # AWS Configuration
    aws_region: str = "us-east-1"
    sqs_endpoint_url: Optional[str] = None  # e.g. LocalStack

    # SQS Configuration
    sqs_visibility_timeout: int = 60  # lease held on messages that will be deleted
    sqs_wait_time_seconds: int = 0
    default_count: int = 1

    # Application
    log_level: str = "WARNING"
    log_format: str = "json"


def get_settings() -> Settings:
    """Get application settings instance."""
    return Settings()
