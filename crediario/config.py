"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # External store (system of record for orders)
    store_api_base: str = "http://localhost:8001"

    # Service
    service_name: str = "crediario-gateway"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 5.0

    # Dates cross the store boundary as UTC timestamps at this hour
    neutral_hour_utc: int = 12
    # Calendar used to turn "now" into today's date
    business_timezone: str = "America/Sao_Paulo"


settings = Settings()
