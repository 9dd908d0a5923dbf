"""Structured logging utilities with correlation IDs, stage timing, and sensitive data handling."""

import logging
import time
import uuid
import re
import hashlib
from contextvars import ContextVar
from typing import Any, Optional, Dict
from contextlib import contextmanager

from src.utils.logging_config import LoggingConfig, get_logger


_correlation_id_var: ContextVar[Optional[str]] = ContextVar('correlation_id', default=None)


def generate_correlation_id() -> str:
    """Generate a unique correlation ID for request tracing."""
    return f"req_{uuid.uuid4().hex[:12]}"


def get_correlation_id() -> Optional[str]:
    """Get the current correlation ID from context."""
    return _correlation_id_var.get()


def set_correlation_id(correlation_id: Optional[str]) -> None:
    """Set the correlation ID in context."""
    _correlation_id_var.set(correlation_id)


@contextmanager
def correlation_context(correlation_id: Optional[str] = None):
    """Context manager for correlation ID propagation."""
    if correlation_id is None:
        correlation_id = generate_correlation_id()

    old_id = get_correlation_id()
    set_correlation_id(correlation_id)
    try:
        yield correlation_id
    finally:
        set_correlation_id(old_id)


def mask_sensitive_data(text: str) -> str:
    """Mask credentials and phone numbers in free text (URLs, error messages)."""
    if not text or not LoggingConfig.LOG_MASK_SENSITIVE:
        return text

    # API keys passed as query parameters (Google, Apify)
    text = re.sub(
        r'(?i)([?&](?:key|token|api_key)=)[^&\s]+',
        r'\1[REDACTED]',
        text
    )

    text = re.sub(
        r'(?i)(api[_-]?key|secret|password|auth)[\s:=]+([A-Za-z0-9_-]{20,})',
        r'\1=[REDACTED]',
        text
    )

    text = re.sub(
        r'\b\+?\d[\d\s().-]{7,}\b',
        '[REDACTED_PHONE]',
        text
    )

    return text


def mask_phone_number(phone: str) -> str:
    """Keep the channel prefix and last 4 digits of an SMS/WhatsApp sender."""
    if not LoggingConfig.LOG_MASK_SENSITIVE or not phone:
        return phone

    prefix = ""
    if ":" in phone:
        prefix, phone = phone.split(":", 1)
        prefix += ":"
    if len(phone) <= 4:
        return f"{prefix}****"
    return f"{prefix}***{phone[-4:]}"


def mask_token(token: str) -> str:
    """Hash a confirmation token so log lines can be correlated without leaking it."""
    if not LoggingConfig.LOG_MASK_SENSITIVE or not token:
        return token
    return f"tok_{hashlib.sha256(token.encode()).hexdigest()[:8]}"


MASKED_FIELDS = {
    "phone_number": mask_phone_number,
    "confirmation_token": mask_token,
    "error": mask_sensitive_data,
}


class StructuredLogger:
    """Logger wrapper that turns keyword arguments into structured fields.

    Fields named in MASKED_FIELDS are masked before they reach the handler,
    so callers pass raw senders and tokens.
    """

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def _get_extra(self, **kwargs: Any) -> Dict[str, Any]:
        extra: Dict[str, Any] = {}

        correlation_id = get_correlation_id()
        if correlation_id:
            extra["correlation_id"] = correlation_id

        for key, value in kwargs.items():
            masker = MASKED_FIELDS.get(key)
            extra[key] = masker(value) if masker and isinstance(value, str) else value
        return extra

    def debug(self, message: str, **kwargs: Any) -> None:
        self.logger.debug(message, extra=self._get_extra(**kwargs))

    def info(self, message: str, **kwargs: Any) -> None:
        self.logger.info(message, extra=self._get_extra(**kwargs))

    def warning(self, message: str, **kwargs: Any) -> None:
        self.logger.warning(message, extra=self._get_extra(**kwargs))

    def error(self, message: str, exc_info: bool = False, **kwargs: Any) -> None:
        self.logger.error(message, extra=self._get_extra(**kwargs), exc_info=exc_info)


def get_structured_logger(name: str) -> StructuredLogger:
    """Get a structured logger instance."""
    return StructuredLogger(get_logger(name))


@contextmanager
def log_timing(operation_name: str, logger: Optional[StructuredLogger] = None, **context: Any):
    """Context manager for timing operations."""
    if logger is None:
        logger = get_structured_logger(__name__)

    start_time = time.time()
    logger.debug(f"Starting {operation_name}", operation=operation_name, **context)

    try:
        yield
    finally:
        elapsed_ms = (time.time() - start_time) * 1000
        logger.info(
            f"Completed {operation_name}",
            operation=operation_name,
            processing_time_ms=round(elapsed_ms, 2),
            **context
        )

        if elapsed_ms > LoggingConfig.LOG_SLOW_OPERATION_THRESHOLD_MS:
            logger.warning(
                f"Slow operation detected: {operation_name}",
                operation=operation_name,
                processing_time_ms=round(elapsed_ms, 2),
                threshold_ms=LoggingConfig.LOG_SLOW_OPERATION_THRESHOLD_MS,
                **context
            )
