"""Application settings and configuration management."""
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):
    """Booking engine behaviour."""

    # Same-day cutoff is compared against the wall clock in this timezone
    reference_timezone: str = "Europe/Rome"
    cache_ttl_seconds: int = 300  # 5 minutes

    # Only used when the availability service omits generalSettings
    default_min_stay_days: int = 2
    default_tax_percentage: float = 0.10  # fraction, 0.10 == 10%

    # Prepay share for SPLIT_PAYMENT rate policies without prepayPercentage
    default_prepay_percentage: float = 30.0
    currency: str = "eur"

    model_config = SettingsConfigDict(env_prefix="ENGINE_")


class BookingAPISettings(BaseSettings):
    """Availability / catalog / voucher service configuration."""

    base_url: str = "http://localhost:5000/api/v1"
    request_timeout: int = 15

    calendar_path: str = "/rooms/availability/calendar"
    enhancements_path: str = "/enhancements"
    voucher_path: str = "/vouchers/validate"

    model_config = SettingsConfigDict(env_prefix="BOOKING_API_")


class RedisSettings(BaseSettings):
    """Redis configuration for the shared snapshot cache."""

    host: str = "localhost"
    port: int = 6379
    db: int = 0
    password: Optional[str] = None
    ssl: bool = False
    socket_timeout: int = 5
    socket_connect_timeout: int = 5
    key_prefix: str = "availability:snapshot:"

    model_config = SettingsConfigDict(env_prefix="REDIS_")


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["json", "console"] = "json"

    model_config = SettingsConfigDict(env_prefix="LOG_")


class Settings(BaseSettings):
    """Main application settings."""

    environment: Literal["dev", "staging", "prod"] = "dev"
    debug: bool = False

    # Shown as a [CODE] prefix on log lines when bound
    property_code: str = ""

    cache_backend: Literal["memory", "redis"] = "memory"

    # Sub-settings
    engine: EngineSettings = EngineSettings()
    booking_api: BookingAPISettings = BookingAPISettings()
    redis: RedisSettings = RedisSettings()
    logging: LoggingSettings = LoggingSettings()

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def booking_api_base_url(self) -> str:
        """Base URL without trailing slash."""
        return self.booking_api.base_url.rstrip("/")


# Global settings instance
settings = Settings()
