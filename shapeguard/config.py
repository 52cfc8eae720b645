from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Validation
    DEFAULT_ROOT_NAME: str = "input"
    MAX_DEPTH: int = Field(default=256, ge=1)
    MAX_ERRORS: int = Field(default=50, ge=1)

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False  # True for structured JSON, False for colored console output

    model_config = SettingsConfigDict(env_prefix="SHAPEGUARD_", env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()
