"""Application configuration."""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # Access-control device
    base_url: Optional[str] = None  # e.g., "http://192.168.1.64/ISAPI"
    username: Optional[str] = None
    password: Optional[str] = None

    # Web server
    host: str = "0.0.0.0"
    port: int = 3000

    # Digest auth
    probe_timeout: float = 5.0
    request_timeout: float = 10.0
    max_nonce_count: int = 9999

    # Logging
    log_level: str = "INFO"

    model_config = {
        "env_prefix": "DOOR_API_",
        "env_file": ".env",
    }

    @property
    def device_configured(self) -> bool:
        """Check if device URL and credentials are set."""
        return bool(self.base_url and self.username and self.password)

    def get_base_url(self) -> str:
        """Device base URL without trailing slash."""
        return (self.base_url or "").rstrip('/')


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
