from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_TIMEOUT_SECONDS = 30.0


class Settings(BaseSettings):
    api_base_url: str = "http://localhost:3001/api"
    api_timeout_seconds: float = DEFAULT_API_TIMEOUT_SECONDS
    api_service_token: Optional[str] = None
    feature_dashboard_cache: bool = False
    dashboard_cache_ttl_seconds: float = 45.0
    top_transactions_limit: int = 5
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def model_post_init(self, __context):
        self.api_base_url = self.api_base_url.rstrip("/")
        if self.api_timeout_seconds <= 0:
            self.api_timeout_seconds = DEFAULT_API_TIMEOUT_SECONDS

settings = Settings()
