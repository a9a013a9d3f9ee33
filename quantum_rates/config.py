"""Configuration management using Pydantic Settings"""

from decimal import Decimal
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database (simulation history)
    database_url: str = "sqlite:///./quantum_rates.db"

    # Rate Tier Repository
    rate_tier_api_base: str = "http://localhost:3000"
    rate_tier_path: str = "/investment-tiers"
    legacy_update_payload: bool = True  # camelCase PUT body expected by the current backend

    # Service
    service_name: str = "quantum-rates"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 5.0

    # Investment rules
    tax_rate: Decimal = Decimal("0.02")
    day_count_basis: int = 360
    days_per_month: int = 30
    max_term_months: int = 60
    amount_tolerance: Decimal = Decimal("0.001")


settings = Settings()
