"""
Configuration module for the content validator.

Provides settings, constants, the provider registry and logging configuration.
"""

from content_validator.config.settings import get_settings, reload_settings, Settings
from content_validator.config.logging_config import (
    setup_logging,
    get_logger,
    sanitize_for_log,
)
from content_validator.config.constants import (
    # Model Configuration
    OPENAI_DEFAULT_MODEL,
    GEMINI_DEFAULT_MODEL,
    MAX_TOKENS,
    TEMPERATURE,
    # Provider call policy
    PROVIDER_TIMEOUT_SECONDS,
    PROVIDER_MAX_RETRIES,
    # Score combination
    AGREEMENT_TOLERANCE,
    SLOT_A,
    SLOT_B,
)

__all__ = [
    # Settings
    'get_settings',
    'reload_settings',
    'Settings',
    # Logging
    'setup_logging',
    'get_logger',
    'sanitize_for_log',
    # Constants
    'OPENAI_DEFAULT_MODEL',
    'GEMINI_DEFAULT_MODEL',
    'MAX_TOKENS',
    'TEMPERATURE',
    'PROVIDER_TIMEOUT_SECONDS',
    'PROVIDER_MAX_RETRIES',
    'AGREEMENT_TOLERANCE',
    'SLOT_A',
    'SLOT_B',
]
