"""
Logging and Error Tracking

This module provides centralized logging configuration for page_loader and
a tracker for the resource failures that a page run recovers from.
"""

import logging
import logging.handlers
import os
import sys
from datetime import datetime
from typing import Optional, Dict, Any, List
from pathlib import Path


APP_LOGGER_NAME = "page_loader"
DEBUG_ENV_TOKEN = "page-loader"


class PageLoaderLogger:
    """
    Centralized logging setup for page_loader.

    Console output goes to stderr; stdout is reserved for the saved page
    path. A rotating log file is added when a log directory is given.
    """

    def __init__(self, log_dir: Optional[str] = None, app_name: str = APP_LOGGER_NAME):
        """
        Initialize the logging system.

        Args:
            log_dir: Directory to store log files, or None for console only
            app_name: Name of the root logger for the package
        """
        self.log_dir = Path(log_dir) if log_dir else None
        self.app_name = app_name

        if self.log_dir is not None:
            self.log_dir.mkdir(parents=True, exist_ok=True)

    def setup_logger(self, level: int = logging.WARNING) -> logging.Logger:
        """
        Set up the package logger with console and optional file handlers.

        Args:
            level: Console logging level (default: WARNING)

        Returns:
            Configured logger instance
        """
        logger = logging.getLogger(self.app_name)
        logger.setLevel(logging.DEBUG)

        # Re-initialisation replaces the handlers we installed before
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

        detailed_formatter = logging.Formatter(
            '%(asctime)s | %(name)s | %(levelname)s | %(funcName)s:%(lineno)d | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        console_formatter = logging.Formatter(
            '%(asctime)s | %(levelname)s | %(message)s',
            datefmt='%H:%M:%S'
        )

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(console_formatter)
        logger.addHandler(console_handler)

        if self.log_dir is not None:
            log_file = self.log_dir / f"{self.app_name}.log"
            file_handler = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=10*1024*1024,  # 10MB
                backupCount=5,
                encoding='utf-8'
            )
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(detailed_formatter)
            logger.addHandler(file_handler)

        logger.propagate = False
        return logger

    def log_system_info(self):
        """Log system information for debugging."""
        logger = logging.getLogger(f"{self.app_name}.system")

        logger.debug(f"Python version: {sys.version}")
        logger.debug(f"Platform: {sys.platform}")
        logger.debug(f"Working directory: {os.getcwd()}")
        if self.log_dir is not None:
            logger.debug(f"Log directory: {self.log_dir.absolute()}")


class ErrorTracker:
    """
    Records failures that were recovered from during a page run.
    """

    def __init__(self, logger: logging.Logger):
        self.logger = logger
        self.errors: List[Dict[str, Any]] = []

    def log_error(self,
                  message: str,
                  context: str = None,
                  url: str = None) -> str:
        """
        Record a recovered failure.

        Args:
            message: Human readable cause
            context: What was being done (e.g. the resource type)
            url: URL being processed when the failure occurred

        Returns:
            Error ID for tracking
        """
        error_id = f"ERR_{datetime.now().strftime('%Y%m%d_%H%M%S')}_{len(self.errors):03d}"

        self.errors.append({
            'id': error_id,
            'timestamp': datetime.now(),
            'message': message,
            'context': context,
            'url': url,
        })

        log_message = f"[{error_id}] {message}"
        if context:
            log_message += f" (Context: {context})"
        if url:
            log_message += f" (URL: {url})"
        self.logger.warning(log_message)

        return error_id

    def get_error_summary(self) -> Dict[str, Any]:
        """
        Get a summary of recorded failures.

        Returns:
            Dictionary with failure count, counts per context and the last five
        """
        by_context: Dict[str, int] = {}
        for error in self.errors:
            key = error['context'] or 'unknown'
            by_context[key] = by_context.get(key, 0) + 1

        return {
            'total_errors': len(self.errors),
            'error_contexts': by_context,
            'recent_errors': self.errors[-5:],
        }


def debug_requested(environ: Optional[Dict[str, str]] = None) -> bool:
    """True when DEBUG names page-loader (DEBUG=page-loader or DEBUG=*)."""
    environ = os.environ if environ is None else environ
    tokens = [t.strip() for t in environ.get("DEBUG", "").split(",")]
    return DEBUG_ENV_TOKEN in tokens or "*" in tokens


def get_logger(name: str = None) -> logging.Logger:
    """
    Get a logger under the package namespace.

    Args:
        name: Name of the module/component (optional)

    Returns:
        Logger instance
    """
    if name:
        return logging.getLogger(f"{APP_LOGGER_NAME}.{name}")
    return logging.getLogger(APP_LOGGER_NAME)


def initialize_logging(level: int = logging.WARNING, log_dir: Optional[str] = None) -> logging.Logger:
    """
    Initialize logging for a CLI run.

    Args:
        level: Console logging level
        log_dir: Directory for a rotating log file (optional)
    """
    setup = PageLoaderLogger(log_dir)
    logger = setup.setup_logger(level)
    setup.log_system_info()
    return logger


def create_error_tracker(logger_name: str = None) -> ErrorTracker:
    """
    Create an error tracker instance.

    Args:
        logger_name: Name of the logger to use

    Returns:
        ErrorTracker instance
    """
    return ErrorTracker(get_logger(logger_name))
