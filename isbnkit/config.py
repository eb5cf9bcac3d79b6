import logging
from pathlib import Path
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Registry document from isbn-international.org and its JSON side-car
    RANGE_MESSAGE_PATH: Optional[Path] = None
    RANGE_CACHE_PATH: Optional[Path] = None

    DEFAULT_SEPARATOR: str = "-"

    LOG_LEVEL: str = "INFO"

    @field_validator("LOG_LEVEL", mode="before")
    def _upper_log_level(cls, v):
        """Accept 'debug', ' Info ' etc. from the environment."""
        if isinstance(v, str):
            return v.strip().upper()
        return v

    class Config:
        env_prefix = "ISBNKIT_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"  # Ignore extra fields from .env


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
