"""Configuration management using Pydantic Settings"""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "vfcash-gateway"
    log_level: str = "INFO"
    api_prefix: str = "/api"  # Path the companion app posts to

    # Storage
    storage_backend: Literal["memory", "sql"] = "memory"
    database_url: str = "sqlite:///:memory:"
    max_transactions: int = 1000

    # Limits
    max_limit_value: float = 10_000_000  # 10 million EGP
    default_daily_transfer_limit: float = 5000
    default_monthly_transfer_limit: float = 50000
    default_daily_receive_limit: float = 10000
    default_monthly_receive_limit: float = 100000

    # Validation
    phone_number_pattern: str = r"^01[0-9]{9}$"  # Egyptian mobile numbers


settings = Settings()
