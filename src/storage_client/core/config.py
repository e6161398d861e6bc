"""Configuration management for storage-client."""

from typing import Literal, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    log_level: str = "WARNING"
    log_format: Literal["json", "console"] = "json"
    otel_enabled: bool = False
    otel_service_name: str = "storage-client"

    # Connection defaults, only read by the CLI and ClientConfig.from_settings
    url: Optional[str] = None
    api_key: Optional[str] = None
    access_token: Optional[str] = None
    timeout: float = 30.0

    model_config = {
        "env_prefix": "STORAGE_CLIENT_",
        "case_sensitive": False,
    }


settings = Settings()
