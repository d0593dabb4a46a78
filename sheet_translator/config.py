from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = "Spreadsheet Translation API"
    api_key: str
    database_url: str = "sqlite:///data/jobs.db"
    gcloud_bucket: str
    openrouter_api_key: Optional[str] = None
    gemini_model: str = "google/gemini-flash-1.5-8b"
    gemini_base_url: str = "https://openrouter.ai/api/v1"
    gemini_timeout: int = 120
    requests_per_minute: int = 60
    cors_origins: List[str] = ["http://localhost:3000"]
    port: int = 1000
    log_level: str = "INFO"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
