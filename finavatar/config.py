"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./finavatar.db"

    # Generative AI service
    advisor_api_base: str = "https://generativelanguage.googleapis.com"
    advisor_api_key: str = ""
    advisor_model: str = "gemini-1.5-pro"

    # Service
    service_name: str = "finavatar"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 30.0
    advisor_max_retries: int = 3
    advisor_backoff_base: float = 0.5  # Exponential backoff base in seconds


settings = Settings()
