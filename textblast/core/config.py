"""
textblast/core/config.py

Purpose: Application configuration

- Loads environment variables (and .env)
- Centralizes Twilio / monday.com credentials and campaign pacing
- Validates configuration on startup
- Environment-specific settings
"""

from pydantic import Field, validator
from pydantic_settings import BaseSettings
from typing import Optional, Literal


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Validates all required configs on startup.
    """

    # Environment
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"

    # Twilio (message provider)
    TWILIO_ACCOUNT_SID: Optional[str] = Field(
        default=None,
        description="Twilio account SID"
    )
    TWILIO_AUTH_TOKEN: Optional[str] = Field(
        default=None,
        description="Twilio auth token"
    )
    TWILIO_FROM: Optional[str] = Field(
        default=None,
        description="Sender identity (E.164 number or messaging service number)"
    )
    TWILIO_API_BASE: str = Field(
        default="https://api.twilio.com/2010-04-01",
        description="Twilio REST API base URL"
    )
    TWILIO_TIMEOUT: float = Field(
        default=10.0,
        description="Twilio request timeout in seconds"
    )

    # monday.com (record source)
    MONDAY_API_KEY: Optional[str] = Field(
        default=None,
        description="monday.com API token"
    )
    MONDAY_API_URL: str = Field(
        default="https://api.monday.com/v2",
        description="monday.com GraphQL endpoint"
    )
    MONDAY_BOARD_ID: Optional[str] = Field(
        default=None,
        description="Board holding the campaign recipients"
    )
    MONDAY_PHONE_COLUMN_ID: str = Field(
        default="text_mkpfez9j",
        description="Column id of the phone number text column"
    )
    MONDAY_PAGE_LIMIT: int = Field(
        default=500,
        description="Maximum items read from the board per campaign"
    )
    MONDAY_TIMEOUT: float = Field(
        default=30.0,
        description="monday.com request timeout in seconds"
    )

    # Campaign pacing (provider rate ceiling)
    CAMPAIGN_BATCH_SIZE: int = Field(
        default=10,
        description="Messages sent concurrently per batch"
    )
    CAMPAIGN_BATCH_DELAY_MS: int = Field(
        default=1000,
        description="Pause between batches in milliseconds"
    )

    # Application
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    API_PREFIX: str = Field(
        default="",
        description="API route prefix"
    )
    CORS_ORIGINS: list = Field(
        default=["*"],
        description="Allowed CORS origins"
    )
    PORT: int = Field(
        default=3001,
        description="Port used when running the app directly"
    )

    @validator("CAMPAIGN_BATCH_SIZE")
    def validate_batch_size(cls, v):
        """Batch size must allow at least one send per batch."""
        if v < 1:
            raise ValueError("CAMPAIGN_BATCH_SIZE must be at least 1")
        return v

    @validator("CAMPAIGN_BATCH_DELAY_MS")
    def validate_batch_delay(cls, v):
        if v < 0:
            raise ValueError("CAMPAIGN_BATCH_DELAY_MS cannot be negative")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"

    @property
    def twilio_configured(self) -> bool:
        return bool(self.TWILIO_ACCOUNT_SID and self.TWILIO_AUTH_TOKEN and self.TWILIO_FROM)

    @property
    def monday_configured(self) -> bool:
        return bool(self.MONDAY_API_KEY and self.MONDAY_BOARD_ID)

    @property
    def batch_delay_seconds(self) -> float:
        return self.CAMPAIGN_BATCH_DELAY_MS / 1000

    class Config:
        env_file = ".env"
        case_sensitive = True
        env_file_encoding = "utf-8"
        extra = "ignore"


# Global settings instance
settings = Settings()


def validate_settings():
    """
    Validates critical settings on application startup.
    Raises ValueError if any required setting is missing or invalid.

    Outside production missing credentials only disable the affected
    endpoints; they are reported, not fatal.
    """
    errors = []

    if not settings.TWILIO_API_BASE:
        errors.append("TWILIO_API_BASE is required")
    if not settings.MONDAY_API_URL:
        errors.append("MONDAY_API_URL is required")

    # Production-specific validations
    if settings.is_production:
        if not settings.twilio_configured:
            errors.append("TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN and TWILIO_FROM are required in production")
        if not settings.monday_configured:
            errors.append("MONDAY_API_KEY and MONDAY_BOARD_ID are required in production")

    if errors:
        raise ValueError(f"Configuration validation failed: {', '.join(errors)}")

    return True
