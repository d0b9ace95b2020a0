"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "finplan-gateway"
    log_level: str = "INFO"

    # Planning defaults
    analysis_window_months: int = 6
    annual_return_rate: float = 0.07  # Assumed long-run market return
    default_apr: float = 0.18  # Used when no debt account reports an APR


settings = Settings()
