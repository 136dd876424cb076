"""Logging configuration for the lending_api application.

This module provides logging configuration for the REST API and the
components it drives.

Author: Pat G Cappelaere, IBM Federal Consulting
Created: 2026-10-18
Version: 1.0.0
License: MIT
"""

import logging

from utils.config import config


def setup_logging(name) -> logging.Logger:
    """Configure logging for the application.

    Sets up the root logger with the configured level and a standard format,
    then reduces verbosity for noisy third-party loggers.

    Returns:
        Logger instance for the calling module
    """
    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
        format=config.LOG_FORMAT,
        force=True
    )

    # Reduce verbosity of noisy third-party loggers
    logging.getLogger("LiteLLM").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("python_multipart").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.error").setLevel(logging.INFO)

    return logging.getLogger(name)
