from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import AnyHttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Proxy settings loaded from environment with defaults.

    Environment variable mapping follows pydantic's rules (e.g., PORT, NODE_ENV,
    CACHE_DURATION_MS, HTTP_TIMEOUT_SECONDS, RATES_API_URL).
    """

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore"
    )

    # Basic app metadata
    app_name: str = "Lirat Exchange Proxy"
    debug: bool = False
    version: str = "0.1.0"

    # Process / serving
    port: int = 5000
    node_env: str = "development"
    static_dir: Path = Path("build")
    cors_origins: List[str] = ["*"]

    # Caching & upstream
    cache_duration_ms: int = 15 * 60 * 1000  # 15 minutes
    http_timeout_seconds: float = 10.0
    rates_api_url: AnyHttpUrl = "https://lirat.org/wp-json/alba-cur/cur/1.json"
    damascus_history_api_url: AnyHttpUrl = (
        "https://lirat.org/wp-json/currency-route/currency/9/damascus.json"
    )
    aleppo_history_api_url: AnyHttpUrl = (
        "https://lirat.org/wp-json/currency-route/currency/9/aleppo.json"
    )
    idlib_history_api_url: AnyHttpUrl = (
        "https://lirat.org/wp-json/currency-route/currency/9/idlib.json"
    )

    @property
    def production(self) -> bool:
        return self.node_env.lower() == "production"

    def init_post_load(self) -> None:
        """Validate derived constraints that field types cannot express."""
        if self.cache_duration_ms <= 0:
            raise ValueError("cache_duration_ms must be positive")
        if self.http_timeout_seconds <= 0:
            raise ValueError("http_timeout_seconds must be positive")

    def history_urls(self) -> dict:
        """City -> upstream history URL, keyed by lowercase city name."""
        return {
            "damascus": str(self.damascus_history_api_url),
            "aleppo": str(self.aleppo_history_api_url),
            "idlib": str(self.idlib_history_api_url),
        }


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    settings.init_post_load()
    return settings
