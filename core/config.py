"""
Core configuration using Pydantic Settings.
Loads from environment variables.
"""

from typing import Literal
from pydantic import Field, RedisDsn
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_name: str = Field(default="interview-scheduling-engine", alias="APP_NAME")
    app_env: Literal["development", "staging", "production"] = Field(
        default="development", alias="APP_ENV"
    )
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", alias="LOG_LEVEL"
    )
    app_base_url: str = Field(default="http://localhost:3000", alias="APP_BASE_URL")

    # API
    api_v1_prefix: str = "/api/v1"
    allowed_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:8000"],
        alias="ALLOWED_ORIGINS",
    )

    # Database
    database_url: str = Field(..., alias="DATABASE_URL")
    database_pool_size: int = Field(default=20, alias="DATABASE_POOL_SIZE")
    database_max_overflow: int = Field(default=10, alias="DATABASE_MAX_OVERFLOW")

    # Redis
    redis_url: RedisDsn = Field(..., alias="REDIS_URL")

    # Celery
    celery_broker_url: RedisDsn = Field(..., alias="CELERY_BROKER_URL")
    celery_result_backend: RedisDsn = Field(..., alias="CELERY_RESULT_BACKEND")

    # Google Gemini (question generation fallback)
    google_api_key: str | None = Field(default=None, alias="GOOGLE_API_KEY")
    question_generation_model: str = Field(
        default="gemini-2.0-flash", alias="QUESTION_GENERATION_MODEL"
    )

    # Interview access links
    interview_link_signing_enabled: bool = Field(
        default=True, alias="INTERVIEW_LINK_SIGNING_ENABLED"
    )
    interview_link_secret: str = Field(
        default="change-me-interview-link-secret", alias="INTERVIEW_LINK_SECRET"
    )
    interview_link_algorithm: str = Field(default="HS256", alias="INTERVIEW_LINK_ALGORITHM")
    interview_link_ttl_hours: int = Field(default=24 * 14, alias="INTERVIEW_LINK_TTL_HOURS")

    # External collaborators
    collaborator_timeout_seconds: float = Field(
        default=20.0, alias="COLLABORATOR_TIMEOUT_SECONDS"
    )
    collaborator_max_retries: int = Field(default=2, alias="COLLABORATOR_MAX_RETRIES")
    collaborator_retry_delay_seconds: float = Field(
        default=0.5, alias="COLLABORATOR_RETRY_DELAY_SECONDS"
    )

    # Auto-scheduling defaults (used when a campaign has no stored config)
    default_auto_schedule_enabled: bool = Field(
        default=True, alias="DEFAULT_AUTO_SCHEDULE_ENABLED"
    )
    default_score_threshold: float = Field(default=80, alias="DEFAULT_SCORE_THRESHOLD")
    default_scheduling_delay_hours: float = Field(
        default=24, alias="DEFAULT_SCHEDULING_DELAY_HOURS"
    )
    default_interval_between_rounds_hours: float = Field(
        default=24, alias="DEFAULT_INTERVAL_BETWEEN_ROUNDS_HOURS"
    )
    default_start_time: str = Field(default="10:00", alias="DEFAULT_START_TIME")
    default_timezone: str = Field(default="UTC", alias="DEFAULT_TIMEZONE")
    default_email_notification: bool = Field(
        default=True, alias="DEFAULT_EMAIL_NOTIFICATION"
    )

    # Logging
    log_request_body: bool = Field(default=False, alias="LOG_REQUEST_BODY")
    log_response_body: bool = Field(default=False, alias="LOG_RESPONSE_BODY")
    log_max_body_size: int = Field(default=1024, alias="LOG_MAX_BODY_SIZE")
    json_logs: bool = Field(default=True, alias="JSON_LOGS")

    # Email
    smtp_host: str = Field(default="smtp.gmail.com", alias="SMTP_HOST")
    smtp_port: int = Field(default=587, alias="SMTP_PORT")
    smtp_user: str | None = Field(default=None, alias="SMTP_USER")
    smtp_password: str | None = Field(default=None, alias="SMTP_PASSWORD")
    from_email: str = Field(default="noreply@example.com", alias="FROM_EMAIL")
    from_name: str = Field(default="Hiring Team", alias="FROM_NAME")


def get_settings() -> Settings:
    """Build a fresh settings object from the current environment."""
    return Settings()


# Global settings instance for process entry points
settings = get_settings()
