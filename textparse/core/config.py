"""
Library configuration.

Centralized settings read from environment variables (prefix ``TEXTPARSE_``)
or an optional ``.env`` file.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """textparse settings"""

    model_config = SettingsConfigDict(
        env_prefix="TEXTPARSE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Logging
    LOG_LEVEL: str = "WARNING"
    LOG_FORMAT: str = "text"  # text or json
    LOG_FILE: Optional[str] = None

    # Content fetching
    HTTP_TIMEOUT: float = 10.0
    HTTP_FOLLOW_REDIRECTS: bool = False
    HTTP_DEFAULT_CHARSET: str = "iso-8859-1"
    FILE_ENCODING: str = "utf-8"

    # Parsing context loaded by the command line tool
    CONTEXT_FILE: Optional[str] = None


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
