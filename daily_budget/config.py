"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="DAILY_BUDGET_",
        extra="ignore",
    )

    # Database
    database_url: str = "sqlite:///./daily_budget.db"

    # Service
    service_name: str = "daily-budget"
    log_level: str = "INFO"

    # Language used for period labels
    default_locale: str = "en"

    # Currency assigned to new users
    default_currency: str = "EUR"


settings = Settings()
