"""Client settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="API_CLIENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Backend
    base_address: str = ""
    timeout_seconds: float = 30.0
    user_agent: str = "scoped-api-client/0.1.0"

    # Request/response logging
    request_response_logging: bool = False
    log_body_max_chars: int = 2000

    @property
    def has_base_address(self) -> bool:
        """Check if a backend base address is configured."""
        return bool(self.base_address.strip())


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
