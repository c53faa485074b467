"""
Module: settings.py
Description: Library configuration using pydantic-settings.

Configures AWS access and default poll parameters from environment
variables with validation and defaults. Supports .env files for local
development against an SQS emulator.
"""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Library settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Application settings
    app_name: str = Field(default="SQS Queue Poller", description="Application name")
    log_level: str = Field(default="INFO", description="Logging level")

    # AWS settings
    aws_region: str = Field(default="us-east-1", description="AWS region")
    sqs_endpoint_url: Optional[str] = Field(
        default=None,
        description="Override SQS endpoint (e.g. http://localhost:4566 for local emulators)"
    )

    # Poll defaults
    poll_max_number_of_messages: int = Field(
        default=10,
        description="Messages requested per receive call"
    )
    poll_wait_time_seconds: Optional[int] = Field(
        default=None,
        description="Long-poll duration in seconds (unset uses the queue default)"
    )
    poll_visibility_timeout: Optional[int] = Field(
        default=None,
        description="Visibility timeout in seconds for received messages"
    )
    poll_skip_delete: bool = Field(
        default=False,
        description="Never delete messages after the handler returns"
    )
    poll_idle_timeout: Optional[int] = Field(
        default=None,
        description="Stop polling after this many consecutive empty receives"
    )

    @field_validator('sqs_endpoint_url')
    @classmethod
    def validate_endpoint_url(cls, v: Optional[str]) -> Optional[str]:
        """Validate the endpoint override is an HTTP/HTTPS URL."""
        if v is None or v == "":
            return None
        if not v.startswith(('http://', 'https://')):
            raise ValueError("sqs_endpoint_url must be a valid HTTP/HTTPS URL")
        return v

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid logging level."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of: {', '.join(valid_levels)}")
        return v.upper()


# Global settings instance
settings = Settings()
