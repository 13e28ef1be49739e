"""
Service configuration and logging setup.

Settings are read from environment variables with the CFG_ prefix
(e.g. CFG_REMOTE_SERVICE_URL, CFG_LOG_LEVEL) or from a local .env file.
"""

import logging
from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_TYPE_KEYWORDS = [
    "int", "char", "float", "double", "long",
    "short", "unsigned", "signed", "void", "bool",
]


class Settings(BaseSettings):
    """CFG service settings"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CFG_",
        extra="ignore",
    )

    # Line classification
    type_keywords: List[str] = DEFAULT_TYPE_KEYWORDS
    signature_markers: List[str] = ["int checkTemperature"]

    # Remote CFG producer (disabled when no URL is set)
    remote_service_url: Optional[str] = None
    remote_timeout: float = 10.0

    # HTTP / logging
    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
