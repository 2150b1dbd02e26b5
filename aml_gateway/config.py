"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "aml-gateway"
    log_level: str = "INFO"

    # Largest statement payload accepted by the analysis endpoints
    max_transactions: int = 20_000

    # Monthly mortgage payment assumed when an affordability request omits one (GBP)
    default_mortgage_estimate: float = 1_200.0


settings = Settings()
