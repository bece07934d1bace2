"""Application settings and configuration management using Pydantic."""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings

VALID_WEEKDAYS = ["mon", "tue", "wed", "thu", "fri", "sat", "sun"]


class Settings(BaseSettings):
    """Main application settings combining all configuration sections."""

    # Environment and deployment
    environment: str = "development"
    debug: bool = False
    app_version: str = "1.0.0"

    # Market data provider (Finnhub)
    finnhub_api_key: Optional[str] = None
    finnhub_base_url: str = "https://finnhub.io/api/v1"
    market_data_timeout_seconds: float = 10.0
    market_data_cache_seconds: int = 3600
    news_max_articles: int = 6

    # Email delivery
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_user: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_use_tls: bool = True
    smtp_timeout_seconds: float = 30.0
    email_sender_name: str = "Signalist"
    dashboard_url: str = "https://stock-market-dev.vercel.app/"

    # Price alert schedules (UTC)
    alert_hour: int = 13
    alert_weekly_day: str = "mon"
    alert_monthly_day: int = 1
    alert_max_concurrency: int = 5

    # Engagement schedules (UTC)
    news_summary_hour: int = 12
    inactive_reminder_hour: int = 10
    inactive_reminder_interval_days: int = 7
    inactive_user_days: int = 15

    # API settings
    endpoint_host: str = "0.0.0.0"
    endpoint_port: int = 8000
    endpoint_auth_token: Optional[str] = None
    api_reload: bool = False
    api_log_level: str = "INFO"

    # Database settings
    database_url: Optional[str] = None
    data_directory: str = "data"
    database_echo_sql: bool = False
    database_pool_pre_ping: bool = True
    database_pool_recycle: int = 3600

    # Scheduler settings
    scheduler_max_workers: int = 3

    # Logging settings
    log_level: str = "INFO"
    log_format: str = "structured"  # 'structured' or 'plain'
    log_file_enabled: bool = True
    log_file_path: str = "data/signalist.log"
    log_max_file_size: str = "10MB"
    log_backup_count: int = 5

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",  # Ignore extra environment variables
    }

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment setting."""
        valid_environments = ["development", "testing", "production"]
        if v.lower() not in valid_environments:
            raise ValueError(f"Environment must be one of: {valid_environments}")
        return v.lower()

    @field_validator("endpoint_port", "smtp_port")
    @classmethod
    def validate_port(cls, v):
        """Validate port number is in valid range."""
        if v < 1 or v > 65535:
            raise ValueError("Port must be between 1 and 65535")
        return v

    @field_validator("alert_hour", "news_summary_hour", "inactive_reminder_hour")
    @classmethod
    def validate_hour(cls, v):
        """Validate a UTC schedule hour."""
        if v < 0 or v > 23:
            raise ValueError("Schedule hour must be between 0 and 23")
        return v

    @field_validator("alert_weekly_day")
    @classmethod
    def validate_weekday(cls, v):
        """Validate weekly alert day (cron day-of-week abbreviation)."""
        if v.lower() not in VALID_WEEKDAYS:
            raise ValueError(f"Weekly alert day must be one of: {VALID_WEEKDAYS}")
        return v.lower()

    @field_validator("alert_monthly_day")
    @classmethod
    def validate_month_day(cls, v):
        """Validate monthly alert day; capped at 28 so every month has it."""
        if v < 1 or v > 28:
            raise ValueError("Monthly alert day must be between 1 and 28")
        return v

    @field_validator("alert_max_concurrency", "inactive_user_days", "news_max_articles")
    @classmethod
    def validate_positive(cls, v):
        if v < 1:
            raise ValueError("Value must be at least 1")
        return v

    @field_validator("log_level", "api_log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v):
        """Validate log format."""
        valid_formats = ["structured", "plain"]
        if v.lower() not in valid_formats:
            raise ValueError(f"Log format must be one of: {valid_formats}")
        return v.lower()

    def get_database_url(self) -> str:
        """Get the complete database URL."""
        if self.database_url:
            return self.database_url

        # Default to SQLite in data directory
        db_dir = Path(self.data_directory)
        db_dir.mkdir(exist_ok=True)
        db_path = db_dir / "signalist.db"
        return f"sqlite:///{db_path}"

    def is_market_data_configured(self) -> bool:
        """Check whether a market data API key is available."""
        return bool(self.finnhub_api_key)

    def is_email_configured(self) -> bool:
        """Check whether SMTP credentials are available."""
        return bool(self.smtp_user and self.smtp_password)


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings: Application configuration instance
    """
    return Settings()


def get_required_env_vars() -> list[str]:
    """
    Get list of required environment variables.

    Returns:
        list: List of required environment variable names
    """
    return [
        "FINNHUB_API_KEY",
        "SMTP_USER",
        "SMTP_PASSWORD",
        "ENDPOINT_AUTH_TOKEN",
    ]


def validate_required_settings() -> bool:
    """
    Validate that all required settings are properly configured.

    Missing market data or SMTP credentials are not fatal: lookups degrade
    to "no data" and sends fail per message. Only the API token is required
    to serve requests.

    Returns:
        bool: True if the application can start, False otherwise
    """
    from .logging import get_logger

    logger = get_logger(__name__)

    try:
        settings = get_settings()
    except Exception as e:
        logger.error("Configuration validation failed", error=str(e))
        return False

    if not settings.is_market_data_configured():
        logger.warning("FINNHUB_API_KEY not set; quote lookups will return no data")
    if not settings.is_email_configured():
        logger.warning("SMTP credentials not set; email delivery will fail")

    if not settings.endpoint_auth_token:
        logger.error("ENDPOINT_AUTH_TOKEN not set")
        return False

    return True
