"""
Configuration management for siprec-metadata.
Handles environment variables and library settings.
"""

import logging
import os
from typing import Optional
from dotenv import load_dotenv

# Load environment variables from .env file if it exists
load_dotenv()


def _optional_int(name: str) -> Optional[int]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return int(value)


class Config:
    """Library configuration class."""

    # Logging Configuration
    LOG_LEVEL: str = os.getenv('SIPREC_LOG_LEVEL', 'INFO')
    LOG_DIR: str = os.getenv('SIPREC_LOG_DIR', 'logs')
    LOG_TO_FILE: bool = os.getenv('SIPREC_LOG_TO_FILE', 'false').lower() == 'true'

    # Document Defaults
    DEFAULT_DATA_MODE: str = os.getenv('SIPREC_DATA_MODE', 'complete')
    NAME_LANGUAGE: str = os.getenv('SIPREC_NAME_LANG', 'it')

    # Identifier Generation
    ID_SEED: Optional[int] = _optional_int('SIPREC_ID_SEED')

    @classmethod
    def ensure_directories(cls) -> None:
        """Create necessary directories if they don't exist."""
        if cls.LOG_TO_FILE:
            os.makedirs(cls.LOG_DIR, exist_ok=True)

    @classmethod
    def validate_config(cls) -> None:
        """Validate configuration settings."""
        if not isinstance(logging.getLevelName(cls.LOG_LEVEL.upper()), int):
            raise ValueError(f"Invalid SIPREC_LOG_LEVEL: {cls.LOG_LEVEL}")

        if not cls.DEFAULT_DATA_MODE.strip():
            raise ValueError("SIPREC_DATA_MODE cannot be empty")

        if not cls.NAME_LANGUAGE.strip():
            raise ValueError("SIPREC_NAME_LANG cannot be empty")


# Global configuration instance
config = Config()
