from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from typing import Optional


DEFAULT_API_BASE_URL = "https://api.bintray.com/"
DEFAULT_DL_BASE_URL = "https://dl.bintray.com/"


class Settings(BaseSettings):
    # Service endpoints
    api_base_url: str = DEFAULT_API_BASE_URL
    dl_base_url: str = DEFAULT_DL_BASE_URL

    # Credentials (anonymous access when unset)
    username: Optional[str] = None
    api_key: Optional[str] = None

    # HTTP
    request_timeout: float = 60.0

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="REPOWATCH_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
