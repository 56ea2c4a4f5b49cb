"""
Configuration module for Donor Service API.
Uses Pydantic BaseSettings for validation - app fails fast if required config is missing.
"""
import re
import sys
import logging
from pathlib import Path
from typing import List

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Application settings with validation.
    Required fields will cause the app to fail fast if not provided.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database Configuration
    donor_svc_db_dir: str = Field(default="data", description="Database directory")
    donor_svc_db_file: str = Field(default="donor_svc.db", description="Database filename")
    donor_svc_db_busy_timeout: int = Field(default=5000, description="SQLite busy timeout in milliseconds")
    donor_svc_seed_sample_data: bool = Field(default=True, description="Insert sample blood banks and inventory into empty tables")

    # API Configuration
    donor_svc_host: str = Field(default="0.0.0.0", description="API host")
    donor_svc_port: int = Field(default=3000, description="API port")
    donor_svc_reload: bool = Field(default=False, description="Enable hot reload")

    # Redis & Celery Configuration
    donor_svc_redis_url: str = Field(default="redis://localhost:6379", description="Redis URL")
    donor_svc_redis_db: int = Field(default=0, description="Redis database number")
    donor_svc_celery_task_serializer: str = Field(default="json", description="Celery task serializer")
    donor_svc_celery_result_serializer: str = Field(default="json", description="Celery result serializer")
    donor_svc_celery_accept_content: str = Field(default="json", description="Celery accepted content types (comma-separated)")
    donor_svc_celery_timezone: str = Field(default="UTC", description="Celery timezone")
    donor_svc_celery_enable_utc: bool = Field(default=True, description="Enable UTC for Celery")

    # Low stock sweep
    low_stock_donor_threshold: int = Field(default=10, ge=0, description="Donor count below which a low-stock alert is sent")
    low_stock_check_interval_seconds: int = Field(default=3600, ge=60, description="Seconds between periodic low-stock sweeps")

    # Donor registration
    donor_phone_pattern: str = Field(default=r"^\+91\d{10}$", description="Regex every donor phone number must match")

    # Hospital authentication
    donor_svc_jwt_secret: str = Field(
        ...,  # Required - no default means fail fast if missing
        description="Shared secret used to sign hospital access tokens",
        min_length=32,
    )
    donor_svc_jwt_algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    donor_svc_jwt_expiry_hours: int = Field(default=24, ge=1, description="Access token lifetime in hours")

    # Default hospital account, created at startup when missing
    hospital_username: str = Field(default="hospital", description="Default hospital username")
    hospital_password: str = Field(default="password123", description="Default hospital password")
    hospital_name: str = Field(default="General Hospital", description="Default hospital display name")
    hospital_area: str = Field(default="Shivajinagar", description="Default hospital area")

    # Twilio SMS Configuration (Optional)
    twilio_account_sid: str = Field(default="", description="Twilio account SID")
    twilio_auth_token: str = Field(default="", description="Twilio auth token")
    twilio_phone_number: str = Field(default="", description="Twilio sender phone number")

    @model_validator(mode="after")
    def validate_secrets(self) -> "Settings":
        """
        Validate optional integrations at startup and fail fast with clear error messages.
        """
        errors = []

        try:
            re.compile(self.donor_phone_pattern)
        except re.error as e:
            errors.append(f"DONOR_PHONE_PATTERN is not a valid regular expression: {e}")

        twilio_values = [self.twilio_account_sid, self.twilio_auth_token, self.twilio_phone_number]
        if any(twilio_values) and not all(twilio_values):
            logger.warning(
                "Twilio is partially configured - TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN and "
                "TWILIO_PHONE_NUMBER are all required, SMS alerts will only be logged"
            )
        elif not any(twilio_values):
            logger.warning("Twilio not configured - SMS alerts will only be logged")

        if self.hospital_password == "password123":
            logger.warning("HOSPITAL_PASSWORD is the built-in default - change it outside development")

        if errors:
            error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            logger.critical(error_msg)
            sys.exit(1)

        return self

    @property
    def database_path(self) -> str:
        """Get the full database path."""
        return str(Path(self.donor_svc_db_dir) / self.donor_svc_db_file)

    @property
    def celery_broker_url(self) -> str:
        """Get the Celery broker URL with database selection."""
        return f"{self.donor_svc_redis_url}/{self.donor_svc_redis_db}"

    @property
    def celery_result_backend(self) -> str:
        """Get the Celery result backend URL with database selection."""
        return f"{self.donor_svc_redis_url}/{self.donor_svc_redis_db}"

    @property
    def celery_accept_content_list(self) -> List[str]:
        """Get the Celery accepted content types as a list."""
        return [c.strip() for c in self.donor_svc_celery_accept_content.split(",")]

    @property
    def twilio_configured(self) -> bool:
        """True when every Twilio credential is present."""
        return bool(self.twilio_account_sid and self.twilio_auth_token and self.twilio_phone_number)

    def ensure_directories(self) -> None:
        """Ensure required directories exist."""
        Path(self.donor_svc_db_dir).mkdir(parents=True, exist_ok=True)


# Create global settings instance - fails fast if required config is missing
settings = Settings()

# Ensure directories exist on import
settings.ensure_directories()

DATABASE_PATH = settings.database_path
DATABASE_BUSY_TIMEOUT = settings.donor_svc_db_busy_timeout

API_HOST = settings.donor_svc_host
API_PORT = settings.donor_svc_port
API_RELOAD = settings.donor_svc_reload

REDIS_URL = settings.donor_svc_redis_url
CELERY_BROKER_URL = settings.celery_broker_url
CELERY_RESULT_BACKEND = settings.celery_result_backend
CELERY_TASK_SERIALIZER = settings.donor_svc_celery_task_serializer
CELERY_RESULT_SERIALIZER = settings.donor_svc_celery_result_serializer
CELERY_ACCEPT_CONTENT = settings.celery_accept_content_list
CELERY_TIMEZONE = settings.donor_svc_celery_timezone
CELERY_ENABLE_UTC = settings.donor_svc_celery_enable_utc

LOW_STOCK_DONOR_THRESHOLD = settings.low_stock_donor_threshold
LOW_STOCK_CHECK_INTERVAL_SECONDS = settings.low_stock_check_interval_seconds
