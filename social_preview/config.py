"""Application configuration using pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # App
    app_debug: bool = False
    app_host: str = "0.0.0.0"
    app_port: int = 3000

    # Frontend URL for CORS
    frontend_url: str = "*"

    # Optional directory of static assets served at "/"
    static_dir: str = ""

    # Logging
    log_level: str = "INFO"

    # Outbound fetch bounds
    fetch_timeout_seconds: float = 10.0
    fetch_max_bytes: int = 2 * 1024 * 1024
    fetch_max_redirects: int = 10
    fetch_user_agent: str = (
        "Mozilla/5.0 (compatible; SocialLinkPreview/1.0; "
        "+https://github.com)"
    )

    # Rate limiting (per client, sliding window)
    rate_limit_max_requests: int = 30
    rate_limit_window_seconds: float = 60.0
    rate_limit_sweep_interval_seconds: float = 300.0

    # Honour X-Forwarded-For / X-Real-IP when behind a proxy
    trust_forwarded_for: bool = False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
