from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Rule engine defaults
    DEFAULT_CASCADE_MODE: Literal["continue", "stop"] = "continue"
    CLASS_CASCADE_MODE: Literal["continue", "stop"] = "continue"
    DEFAULT_RULESET: str = "default"

    # Messages
    LANGUAGE_ENABLED: bool = True  # False skips built-in templates; unset messages become NO_DEFAULT_MESSAGE

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False  # True for production (structured JSON), False for dev (colored)

    model_config = SettingsConfigDict(env_prefix="RULECRAFT_", env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()
