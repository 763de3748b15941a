"""Configuration management using Pydantic Settings"""

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_POLICY_PATH = Path(__file__).resolve().parent / "data" / "lending_rules.json"


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Policy dataset (loaded once at startup; policy_url wins when set)
    policy_path: Path = DEFAULT_POLICY_PATH
    policy_url: Optional[str] = None

    # Service
    service_name: str = "loan-gateway"
    log_level: str = "INFO"
    correlation_header: str = "X-Correlation-ID"

    # Simulated processing latency applied by the API layer only
    assessment_delay_seconds: float = 0.0

    # HTTP Client
    http_timeout_seconds: float = 5.0


settings = Settings()
