"""Configuration system for domactor."""

import logging
import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


def _get_float(env_var: str, default: float) -> float:
    """Parse a non-negative float from the environment, falling back to the default."""
    env_value = os.getenv(env_var)
    if env_value:
        try:
            parsed = float(env_value)
            if parsed < 0:
                return default
            return parsed
        except (ValueError, TypeError):
            logger.debug(f'Ignoring invalid value for {env_var}: {env_value!r}')

    return default


class EnvConfig(BaseSettings):
    """Environment variable configuration using pydantic-settings."""

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=True,
        extra='allow'
    )

    # Logging
    DOMACTOR_LOGGING_LEVEL: str = Field(default='info')
    CDP_LOGGING_LEVEL: str = Field(default='WARNING')

    # Command timing
    DOMACTOR_COMMAND_TIMEOUT: float = Field(default=5.0, ge=0)
    DOMACTOR_DOCUMENT_TIMEOUT: float = Field(default=1.0, ge=0)
    DOMACTOR_TYPING_DELAY: float = Field(default=0.018, ge=0)


class Config:
    """Configuration class backed by environment variables.

    Re-reads environment variables on every access so tests and callers can
    change settings at runtime.
    """

    _instance: 'Config | None' = None

    def __new__(cls) -> 'Config':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @property
    def LOGGING_LEVEL(self) -> str:
        return os.getenv('DOMACTOR_LOGGING_LEVEL', 'info').lower()

    @property
    def CDP_LOGGING_LEVEL(self) -> str:
        return os.getenv('CDP_LOGGING_LEVEL', 'WARNING')

    @property
    def COMMAND_TIMEOUT(self) -> float:
        return _get_float('DOMACTOR_COMMAND_TIMEOUT', 5.0)

    @property
    def DOCUMENT_TIMEOUT(self) -> float:
        return _get_float('DOMACTOR_DOCUMENT_TIMEOUT', 1.0)

    @property
    def TYPING_DELAY(self) -> float:
        return _get_float('DOMACTOR_TYPING_DELAY', 0.018)

    def load_config(self) -> EnvConfig:
        """Load a validated snapshot of the environment, including `.env`."""
        return EnvConfig()


# Create singleton instance
CONFIG = Config()
