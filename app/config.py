# app/config.py
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


def cache_url_enabled(url: Optional[str]) -> bool:
    """Whether a REDIS_URL value names a real cache; empty, "memory" and "skip..." do not."""
    url = (url or "").strip()
    return bool(url) and url != "memory" and not url.startswith("skip")


class Settings(BaseSettings):
    database_url: str
    env: Literal["dev", "stage", "prod"] = "dev"
    debug: bool = False
    log_level: str = "INFO"
    access_log: bool = True
    sql_echo: bool = False
    auto_init_db: bool = True

    # Cache layer; empty, "memory" or "skip..." disables it
    redis_url: str = ""
    trending_cache_ttl_seconds: int = 3600
    trending_window_days: Optional[int] = None  # None = all play events

    # Recommendation composer
    popularity_window_days: int = 30
    recommendation_history_limit: int = 100
    recommendation_signals: list[str] = ["follows", "popularity"]

    # Used to build rss_url in podcast responses
    public_api_base_url: str = "http://localhost:8080/api/v1"

    @property
    def is_dev(self) -> bool:
        return self.env == "dev" or self.debug is True

    @property
    def cache_enabled(self) -> bool:
        return cache_url_enabled(self.redis_url)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()  # type: ignore[call-arg]
