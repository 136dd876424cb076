"""Centralized logging configuration for the loan review service.

This module provides a unified logging setup for the workflow, the decision
agent and the API, with console and rotating file output and configurable
log levels.

Author: Pat G Cappelaere, IBM Federal Consulting
Created: 2026-10-18
Version: 1.0.0
License: MIT

Example:
    >>> import logging
    >>> from utils.logging_config import setup_logging
    >>>
    >>> # Setup logging once at application start
    >>> setup_logging()
    >>>
    >>> # Get logger in any module
    >>> logger = logging.getLogger(__name__)
    >>> logger.info("Application submitted")
"""

import logging
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Optional

from .config import config


# Global flag to track if logging has been configured
_logging_configured = False


def setup_logging(
    log_level: Optional[str] = None,
    log_file: Optional[str] = None,
    log_format: Optional[str] = None,
    console_output: bool = True,
    file_output: bool = True,
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
    force: bool = False
) -> None:
    """Setup centralized logging configuration.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            If None, uses config.LOG_LEVEL.
        log_file: Path to log file. If None, uses config.LOG_FILE.
        log_format: Log message format. If None, uses config.LOG_FORMAT.
        console_output: Enable console logging (default: True).
        file_output: Enable file logging (default: True).
        max_bytes: Maximum size of log file before rotation (default: 10MB).
        backup_count: Number of backup log files to keep (default: 5).
        force: Force reconfiguration even if already configured (default: False).

    Note:
        Subsequent calls are ignored unless force=True.
    """
    global _logging_configured

    if _logging_configured and not force:
        return

    log_level = log_level or config.LOG_LEVEL
    log_file = log_file or config.LOG_FILE
    log_format = log_format or config.LOG_FORMAT

    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()

    formatter = logging.Formatter(log_format)

    if console_output:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    if file_output and log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    # Suppress noisy third-party loggers
    logging.getLogger('LiteLLM').setLevel(logging.WARNING)
    logging.getLogger('LiteLLM.utils').setLevel(logging.WARNING)
    logging.getLogger('httpx').setLevel(logging.WARNING)
    logging.getLogger('httpcore').setLevel(logging.WARNING)
    logging.getLogger('python_multipart').setLevel(logging.WARNING)

    # LiteLLM logs its own request dumps; keep them out of our handlers
    logging.getLogger('LiteLLM').propagate = False

    _logging_configured = True

    root_logger.info("="*60)
    root_logger.info("Logging configured successfully")
    root_logger.info(f"Log level: {log_level}")
    if file_output and log_file:
        root_logger.info(f"Log file: {log_file}")
    root_logger.info("="*60)


def log_performance(logger: logging.Logger, operation: str, duration: float) -> None:
    """Log performance metrics for an operation.

    Example:
        >>> import time
        >>> start = time.time()
        >>> agent.process_application(form, documents)
        >>> log_performance(logger, "Decision provider call", time.time() - start)
    """
    logger.info(f"Performance: {operation} completed in {duration:.2f}s")
