"""Configuration management for agencyhub."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Pydantic Logfire Configuration (optional)
    logfire_token: str | None = Field(default=None, description="Pydantic Logfire token for observability")
    environment: str = Field(default="development", description="Deployment environment reported to Logfire")

    # Automation Engine Configuration
    automation_due_date_check_interval_seconds: int = Field(
        default=60, gt=0, description="Interval between due-date automation checks (in seconds)"
    )
    automation_timezone: str = Field(
        default="UTC", description="IANA timezone used to interpret task due dates and times"
    )
    automation_seed_default_rules: bool = Field(
        default=True, description="Seed the built-in automation rules when the engine starts"
    )

    # Scheduled Job Retry Configuration
    automation_job_max_retries: int = Field(default=3, ge=1, description="Maximum attempts per scheduled job run")
    automation_job_retry_base_delay: float = Field(
        default=2.0, ge=0, description="Base delay in seconds for exponential backoff between attempts"
    )

    def require_credential(self, field_name: str, service_name: str) -> str:
        """Validate that a required credential is set, raising a clear error if missing.

        Args:
            field_name: Name of the field to check
            service_name: Human-readable service name for error message

        Returns:
            The credential value

        Raises:
            ValueError: If the credential is None or empty
        """
        value = getattr(self, field_name)
        if not value:
            raise ValueError(
                f"{service_name} credential not configured. "
                f"Set {field_name.upper()} environment variable or add to .env file."
            )
        return value


# Application Constants
class Constants:
    """Application-wide constants."""

    # HTTP Status Codes
    HTTP_OK: int = 200
    HTTP_SERVICE_UNAVAILABLE: int = 503

    # Due dates without an explicit time fall due at the end of the day
    DEFAULT_DUE_TIME: str = "23:59"

    # Template placeholder fallbacks when the context carries no user/project
    DEFAULT_USER_NAME: str = "Usuário"
    DEFAULT_PROJECT_NAME: str = "Projeto"

    # Identifier prefixes
    RULE_ID_PREFIX: str = "auto"
    NOTIFICATION_ID_PREFIX: str = "notif"

    # Scheduled job identifiers
    DUE_DATE_CHECK_JOB_ID: str = "due_date_check"

    # Job Tracker Configuration
    TRACKER_DEAD_LETTER_QUEUE_MAXLEN: int = 100  # Max items in dead letter queue
    TRACKER_ERROR_MAX_LENGTH: int = 500  # Truncate long job errors
    TRACKER_DEAD_LETTER_THRESHOLD: int = 3  # Consecutive failures before dead-lettering


def get_settings() -> Settings:
    """Get application settings (singleton pattern)."""
    return Settings()


# Global settings instance
settings = get_settings()
constants = Constants()
