"""Configuration management using environment variables.

This module loads configuration from .env file and provides
typed access to configuration values with sensible defaults.

Author: Pat G Cappelaere, IBM Federal Consulting
Created: 2026-10-18
Version: 1.0.0
License: MIT
"""

import os
from pathlib import Path
from typing import Optional, List
from dotenv import load_dotenv

# Load .env file from project root
load_dotenv()


class Config:
    """Configuration class for the loan intake and review service.

    Loads configuration from environment variables with fallback defaults.
    All values are loaded once at module import time.

    Example:
        >>> from utils.config import config
        >>> print(config.PRIMARY_MODEL)
        'gemini/gemini-1.5-pro'
        >>> print(config.MAX_RETRIES)
        3
    """

    # LLM Configuration
    PRIMARY_MODEL: str = os.getenv("PRIMARY_MODEL", "gemini/gemini-1.5-pro")
    FALLBACK_MODEL: Optional[str] = os.getenv("FALLBACK_MODEL") or None
    MAX_RETRIES: int = int(os.getenv("MAX_RETRIES", "3"))
    LLM_TEMPERATURE: float = float(os.getenv("LLM_TEMPERATURE", "0.1"))
    LLM_MAX_TOKENS: int = int(os.getenv("LLM_MAX_TOKENS", "4000"))

    # Provider API keys are read by litellm itself (GEMINI_API_KEY, OPENAI_API_KEY, ...)
    GEMINI_API_KEY: Optional[str] = os.getenv("GEMINI_API_KEY")

    # Application Configuration
    ID_STRATEGY: str = os.getenv("ID_STRATEGY", "short")
    CURRENCY_SYMBOL: str = os.getenv("CURRENCY_SYMBOL", "₹")
    MAX_UPLOAD_BYTES: int = int(os.getenv("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))

    # Persistence Configuration
    PERSIST_APPLICATIONS: bool = os.getenv("PERSIST_APPLICATIONS", "false").lower() == "true"
    OUTPUTS_DIR: Path = Path(os.getenv("OUTPUTS_DIR", "outputs"))

    # Logging Configuration
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE: Optional[str] = os.getenv("LOG_FILE", "logs/loan_review.log")
    LOG_FORMAT: str = os.getenv(
        "LOG_FORMAT",
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    @classmethod
    def applications_dir(cls) -> Path:
        """Directory holding one JSON snapshot per application.

        Example:
            >>> Config.applications_dir()
            PosixPath('outputs/applications')
        """
        return cls.OUTPUTS_DIR / "applications"

    @classmethod
    def validate(cls) -> List[str]:
        """Validate configuration and return list of issues.

        Returns:
            List of validation error messages. Empty list if all valid.

        Example:
            >>> errors = Config.validate()
            >>> if errors:
            ...     print("Configuration errors:", errors)
        """
        errors = []

        if not cls.PRIMARY_MODEL:
            errors.append("PRIMARY_MODEL must be set")

        # Validate numeric ranges
        if cls.MAX_RETRIES < 1:
            errors.append(f"MAX_RETRIES must be >= 1, got {cls.MAX_RETRIES}")

        if cls.LLM_TEMPERATURE < 0 or cls.LLM_TEMPERATURE > 2:
            errors.append(f"LLM_TEMPERATURE must be 0-2, got {cls.LLM_TEMPERATURE}")

        if cls.MAX_UPLOAD_BYTES < 1:
            errors.append(f"MAX_UPLOAD_BYTES must be >= 1, got {cls.MAX_UPLOAD_BYTES}")

        if cls.ID_STRATEGY.lower() not in ("short", "uuid"):
            errors.append(f"ID_STRATEGY must be 'short' or 'uuid', got {cls.ID_STRATEGY}")

        return errors

    @classmethod
    def print_config(cls):
        """Print current configuration (for debugging)."""
        print("Configuration:")
        print(f"  PRIMARY_MODEL: {cls.PRIMARY_MODEL}")
        print(f"  FALLBACK_MODEL: {cls.FALLBACK_MODEL}")
        print(f"  MAX_RETRIES: {cls.MAX_RETRIES}")
        print(f"  LLM_TEMPERATURE: {cls.LLM_TEMPERATURE}")
        print(f"  ID_STRATEGY: {cls.ID_STRATEGY}")
        print(f"  PERSIST_APPLICATIONS: {cls.PERSIST_APPLICATIONS}")
        print(f"  OUTPUTS_DIR: {cls.OUTPUTS_DIR}")
        print(f"  LOG_LEVEL: {cls.LOG_LEVEL}")


# Global config instance
config = Config()


# Validate configuration on import
_validation_errors = config.validate()
if _validation_errors:
    import warnings
    for error in _validation_errors:
        warnings.warn(f"Configuration warning: {error}")
