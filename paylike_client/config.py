"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Client configuration loaded from PAYLIKE_* environment variables"""

    model_config = SettingsConfigDict(
        env_prefix="PAYLIKE_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Credentials
    api_key: str = ""

    # Remote API
    api_base: str = "https://api.paylike.io"

    # HTTP Client
    http_timeout_seconds: float = 5.0

    # Observability
    service_name: str = "paylike-client"
    log_level: str = "INFO"
    log_response_bodies: bool = False  # Dump raw bodies at DEBUG level


settings = Settings()
