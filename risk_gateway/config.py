"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "risk-gateway"
    log_level: str = "INFO"

    # Scoring policy
    default_loan_period_months: int = 24
    loan_to_income_ceiling: float = 0.5  # 50% debt-to-income is maximal risk

    # High-risk alerts
    alert_webhook_url: str = "http://localhost:50001/api/alerts"
    alert_timeout_seconds: float = 10.0

    # HTTP Client
    http_timeout_seconds: float = 5.0
    alert_max_retries: int = 3
    alert_backoff_base: float = 0.5  # Exponential backoff base in seconds


settings = Settings()
