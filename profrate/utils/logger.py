"""Logging utilities for the annotator.

Wraps the standard ``logging`` module with helpers that attach a sanitized,
length-capped JSON context to each message, so credentials never reach the
log output.
"""
import json
import logging
import re
from typing import Any, Optional

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)

logger = logging.getLogger('profrate')


def configure_logging(level: str = "INFO", fmt: Optional[str] = None) -> None:
    """Apply the configured level (and optionally format) to the profrate logger."""
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    if fmt:
        formatter = logging.Formatter(fmt, datefmt='%Y-%m-%d %H:%M:%S')
        for handler in logging.getLogger().handlers:
            handler.setFormatter(formatter)


def sanitize_text(text: str) -> str:
    """Remove credentials from text.

    Args:
        text: Input text that may contain sensitive data

    Returns:
        Sanitized text with sensitive patterns replaced
    """
    if not text:
        return text

    # Email addresses
    text = re.sub(r'[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}', '<email>', text)

    # Authorization header values
    text = re.sub(r'(Basic|Bearer)\s+[A-Za-z0-9+/=._-]+', r'\1 <token>', text)

    # Long opaque tokens
    text = re.sub(r'[a-zA-Z0-9]{40,}', '<token>', text)

    return text


def safe_json(obj: Any, max_length: int = 1000) -> str:
    """Safely serialize object to JSON with sensitive data sanitized.

    Args:
        obj: Object to serialize
        max_length: Maximum length of output string

    Returns:
        Sanitized JSON string
    """
    try:
        json_str = json.dumps(obj, ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        return "<unable to serialize>"

    sanitized = sanitize_text(json_str)
    if len(sanitized) > max_length:
        sanitized = sanitized[:max_length] + "... [truncated]"
    return sanitized


def _emit(level: int, message: str, context: dict) -> None:
    if context:
        logger.log(level, f"{message} | Context: {safe_json(context)}")
    else:
        logger.log(level, message)


def log_info(message: str, **kwargs) -> None:
    """Log info message with optional sanitized context."""
    _emit(logging.INFO, message, kwargs)


def log_warning(message: str, **kwargs) -> None:
    """Log warning message with optional sanitized context."""
    _emit(logging.WARNING, message, kwargs)


def log_error(message: str, **kwargs) -> None:
    """Log error message with optional sanitized context."""
    _emit(logging.ERROR, message, kwargs)


def log_debug(message: str, **kwargs) -> None:
    """Log debug message with optional sanitized context."""
    _emit(logging.DEBUG, message, kwargs)


def log_api_response(operation: str, status_code: int, **kwargs) -> None:
    """Log a completed API call.

    Args:
        operation: Description of the API operation
        status_code: HTTP status code
        **kwargs: Additional context
    """
    log_info(f"API {operation} completed", status_code=status_code, **kwargs)


def log_resolution(display: str, ok: bool, **kwargs) -> None:
    """Log the outcome of resolving one instructor name.

    Args:
        display: Instructor name as shown on the page
        ok: Whether a rating record was matched
        **kwargs: Additional context (score, reason, ...)
    """
    if ok:
        log_info("Instructor resolved", instructor=display, **kwargs)
    else:
        log_info("Instructor unresolved", instructor=display, **kwargs)


def log_cache_event(event: str, key: str, **kwargs) -> None:
    """Log a session cache event (hit, coalesced, miss, stored)."""
    log_debug(f"Rating cache {event}", key=key, **kwargs)
