"""
Application configuration.

Environment-based settings, built once at process start and passed to the
components that need them.
"""
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_WEBHOOK_URL = "https://aibackend.cp-devcode.com/webhook/1ef572d1-3263-4784-bc19-c38b3fbc09d0"


class Settings(BaseSettings):
    # --------------------
    # Booking store
    # --------------------
    BOOKING_STORE_URL: str = Field(
        description="SQLAlchemy async URL of the booking store, e.g. postgresql+asyncpg://service_role@db:5432/postgres",
    )
    BOOKING_STORE_SERVICE_KEY: str = Field(
        description="Privileged credential used to connect to the booking store",
    )
    DB_ECHO: bool = False

    # --------------------
    # Notification webhook
    # --------------------
    NOTIFICATION_WEBHOOK_URL: str = DEFAULT_WEBHOOK_URL
    NOTIFICATION_TIMEOUT_SECONDS: float = 10.0

    # --------------------
    # Scheduler
    # --------------------
    RECONCILE_INTERVAL_SECONDS: int = 60

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(extra="ignore")


def get_settings() -> Settings:
    """Build settings from the environment. Raises ValidationError if a required secret is missing."""
    return Settings()
