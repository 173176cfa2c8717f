"""
Constants and configuration values for the content validator.

Defines thresholds, defaults, and system-wide constants.
"""

from typing import Final

# AI Model Configuration
OPENAI_DEFAULT_MODEL: Final[str] = "gpt-4o-mini"
GEMINI_DEFAULT_MODEL: Final[str] = "gemini-2.5-flash"
MAX_TOKENS: Final[int] = 2048
TEMPERATURE: Final[float] = 0.0  # Deterministic scoring

# Provider call policy
# Worst case per request: 2 rounds x 2 attempts x 10s + 2 x 0.5s wait = 41s
PROVIDER_TIMEOUT_SECONDS: Final[float] = 10.0
PROVIDER_MAX_RETRIES: Final[int] = 1  # At most one retry per call
RETRY_WAIT_SECONDS: Final[float] = 0.5

# Score combination
AGREEMENT_TOLERANCE: Final[float] = 0.10  # Fraction of the criterion ceiling
SINGLE_SOURCE_CONFIDENCE: Final[float] = 0.5
STUB_CONFIDENCE: Final[float] = 0.0

# Preprocessing
SHORT_CONTENT_CHARS: Final[int] = 50
LONG_CONTENT_CHARS: Final[int] = 10_000
DEFAULT_PREREQUISITES: Final[tuple] = ("General Knowledge",)

# Slots
SLOT_A: Final[str] = "provider_a"
SLOT_B: Final[str] = "provider_b"

# Logging
LOG_PREVIEW_CHARS: Final[int] = 120
