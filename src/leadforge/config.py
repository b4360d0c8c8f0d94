"""LeadForge configuration module.

Configuration is loaded from:
1. .env file (if present)
2. Environment variables

Usage:
    >>> from leadforge.config import config
    >>> print(config.WHATSAPP_BASE_URL)
    https://wa.me
"""

import logging
import os
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class ConfigError(Exception):
    """Raised when configuration validation fails."""

    pass


class Config:
    """Application configuration class that loads settings from environment variables.

    Attributes:
        APP_ENV: Application environment name (dev, prod).
        DEBUG: Forces DEBUG logging regardless of LOG_LEVEL.
        LOG_LEVEL: Logging level name.
        WHATSAPP_BASE_URL: Base URL of the messaging deep link.
        OUTREACH_SENDER_NAME: Signature used in direct outreach emails.
        MANUAL_QUALITY_SCORE: Quality score assigned to manually entered leads.
        DUMP_PATH: Default lead dump used by the CLI (LEADFORGE_DUMP_PATH).
    """

    def __init__(self) -> None:
        """Initialize configuration by loading from environment variables."""
        # Application environment
        self.APP_ENV = self._get_optional("APP_ENV", "dev")
        self.DEBUG = self._get_bool("DEBUG")
        self.LOG_LEVEL = self._get_optional("LOG_LEVEL", "INFO")

        # Outreach
        self.WHATSAPP_BASE_URL = self._get_optional(
            "WHATSAPP_BASE_URL", "https://wa.me"
        ).rstrip("/")
        self.OUTREACH_SENDER_NAME = self._get_optional(
            "OUTREACH_SENDER_NAME", "LeadForge"
        )

        # Manual entry
        self.MANUAL_QUALITY_SCORE = self._get_int("MANUAL_QUALITY_SCORE", 50)

        # CLI
        self.DUMP_PATH = self._get_optional("LEADFORGE_DUMP_PATH")

    def _get_optional(self, name: str, default: str = "") -> str:
        """Get an optional configuration value from environment variables."""
        if name in os.environ:
            return os.environ[name]
        return default

    def _get_bool(self, name: str) -> bool:
        """Get a boolean configuration value from environment variables.

        Returns:
            True if the environment variable exists and is set to 'true' or '1'.
        """
        return name in os.environ and os.environ[name].lower() in ["true", "1"]

    def _get_int(self, name: str, default: int) -> int:
        """Get an integer configuration value.

        Raises:
            ConfigError: If the variable is set but is not an integer.
        """
        raw = self._get_optional(name, str(default))
        try:
            return int(raw)
        except ValueError as e:
            raise ConfigError(
                f"Environment variable {name} must be an integer, got {raw!r}"
            ) from e

    def validate_for_cli(self, path: Optional[str] = None) -> str:
        """Resolve the lead dump path the CLI should read.

        Raises:
            ConfigError: If neither an explicit path nor LEADFORGE_DUMP_PATH is set.
        """
        resolved = path or self.DUMP_PATH
        if not resolved:
            raise ConfigError(
                "A lead dump path is required (argument or LEADFORGE_DUMP_PATH)"
            )
        return resolved

    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.APP_ENV.lower() in ["dev", "development"]

    def get_log_level(self) -> int:
        """Get logging level as integer.

        Returns:
            Logging level constant (e.g., logging.INFO).
        """
        level_map = {
            "DEBUG": logging.DEBUG,
            "INFO": logging.INFO,
            "WARNING": logging.WARNING,
            "ERROR": logging.ERROR,
            "CRITICAL": logging.CRITICAL,
        }
        return level_map.get(self.LOG_LEVEL.upper(), logging.INFO)


# Create global singleton instance
config = Config()
