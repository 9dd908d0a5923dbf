"""Centralized logging configuration with environment variable support."""

import os
import logging
import sys
from pythonjsonlogger import jsonlogger


NOISY_LOGGERS = ("httpx", "httpcore", "urllib3", "supabase", "postgrest", "anthropic", "openai")


class LoggingConfig:
    """Centralized logging configuration."""

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
    LOG_FORMAT = os.environ.get("LOG_FORMAT", "json").lower()
    LOG_MASK_SENSITIVE = os.environ.get("LOG_MASK_SENSITIVE", "true").lower() == "true"
    LOG_SLOW_OPERATION_THRESHOLD_MS = int(os.environ.get("LOG_SLOW_OPERATION_THRESHOLD_MS", "2000"))

    _configured = False

    @classmethod
    def setup_logging(cls, force: bool = False) -> None:
        """Configure the root logger once per process (serverless cold start)."""
        if cls._configured and not force:
            return

        root_logger = logging.getLogger()
        level = getattr(logging, cls.LOG_LEVEL, logging.INFO)
        root_logger.setLevel(level)
        root_logger.handlers.clear()

        # stdout for serverless/Vercel
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(level)

        if cls.LOG_FORMAT == "json":
            formatter = jsonlogger.JsonFormatter(
                "%(timestamp)s %(levelname)s %(name)s %(message)s",
                timestamp=True
            )
        else:
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )

        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

        cls._configured = True


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the given name."""
    return logging.getLogger(name)
