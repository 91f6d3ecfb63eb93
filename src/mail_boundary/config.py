from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    detection_line_window: int = 30
    detection_max_candidate_length: int = 600

    normalize_cache_limit: int = 200


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
