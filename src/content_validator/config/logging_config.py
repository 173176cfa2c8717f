"""
Centralized logging configuration for the content validator.

Human-readable console output by default, JSON lines when requested.
"""

import re
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from content_validator.config.constants import LOG_PREVIEW_CHARS

_CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[module]}</cyan> | {message}"
)

_SECRET_PATTERNS = [
    re.compile(r"sk-[A-Za-z0-9_\-]{8,}"),
    re.compile(r"AIza[0-9A-Za-z_\-]{20,}"),
    re.compile(r"(?i)(api[_-]?key\s*[=:]\s*)\S+"),
]


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    json: bool = False,
) -> None:
    """
    Configure Loguru handlers.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file
        json: Emit serialized JSON records instead of the console format
    """
    # Remove default handler
    logger.remove()
    logger.configure(extra={"module": "content_validator"})

    logger.add(
        sys.stderr,
        serialize=json,
        format=_CONSOLE_FORMAT,
        level=level,
        backtrace=True,
        diagnose=False,  # Variable values could include API keys
    )

    # File handler (optional)
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_path,
            serialize=True,
            level="DEBUG",  # Always debug to file
            rotation="10 MB",
            retention="30 days",
        )

    # Suppress noisy third-party loggers
    logger.disable("httpx")
    logger.disable("httpcore")


def get_logger(name: str):
    """
    Get a logger for a specific module.

    Args:
        name: Module name (usually __name__)

    Returns:
        Logger instance with module binding
    """
    return logger.bind(module=name)


def sanitize_for_log(text: str, limit: int = LOG_PREVIEW_CHARS) -> str:
    """
    Shorten text and mask anything that looks like a credential.

    Args:
        text: Prompt, response or error text
        limit: Maximum characters kept

    Returns:
        Single-line preview safe to log
    """
    if not text:
        return ""
    cleaned = text
    for pattern in _SECRET_PATTERNS:
        if pattern.groups:
            cleaned = pattern.sub(r"\1***", cleaned)
        else:
            cleaned = pattern.sub("***", cleaned)
    cleaned = " ".join(cleaned.split())
    if len(cleaned) > limit:
        cleaned = cleaned[:limit] + "..."
    return cleaned
