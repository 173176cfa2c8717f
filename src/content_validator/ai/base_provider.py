"""
Base provider class for AI API interactions.

Provides shared functionality for provider adapters: SDK error
translation, sanitized call logging, and per-call token counts that
are reported on each verdict. Providers keep no per-request state.
"""

import asyncio
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from content_validator.ai.response_parser import parse_validation_response
from content_validator.config.logging_config import get_logger, sanitize_for_log
from content_validator.core.exceptions import (
    ConfigurationError,
    ContentValidatorError,
    ParseError,
    ProviderError,
    ProviderTimeoutError,
    TransportError,
)
from content_validator.core.models import ProviderId, RubricSpec, ValidationOutput

logger = get_logger(__name__)


@dataclass(frozen=True)
class Completion:
    """Raw text of one completed provider call and what it cost."""
    text: str
    duration_ms: float
    prompt_tokens: Optional[int] = None
    completion_tokens: Optional[int] = None


@dataclass
class TokenUsage:
    """Tokens consumed by the calls behind one verdict, retries included."""
    prompt_tokens: int = 0
    completion_tokens: int = 0

    def add(self, completion: Completion) -> None:
        self.prompt_tokens += completion.prompt_tokens or 0
        self.completion_tokens += completion.completion_tokens or 0


def _status_code(exc: BaseException) -> Optional[int]:
    """HTTP status carried by an SDK exception, if any."""
    for attr in ("status_code", "code", "status"):
        value = getattr(exc, attr, None)
        if isinstance(value, int) and 100 <= value <= 599:
            return value
    response = getattr(exc, "response", None)
    value = getattr(response, "status_code", None)
    if isinstance(value, int):
        return value
    return None


class APIErrorContext:
    """
    Context manager for consistent API error handling.

    Translates SDK exceptions into the provider error taxonomy:
    - timeouts -> ProviderTimeoutError
    - HTTP 429, 5xx and connection failures -> TransportError
    - HTTP 401/403/404 and other 4xx -> ConfigurationError
    - anything else -> ProviderError (not retried)

    Our own exceptions and cancellation pass through untouched.

    Usage:
        with APIErrorContext("validation call", self.name):
            response = await client.call(...)
    """

    def __init__(self, operation: str, provider_name: str = "unknown"):
        """
        Initialize error context.

        Args:
            operation: Description of the operation being performed
            provider_name: Name of the provider (for error messages)
        """
        self.operation = operation
        self.provider_name = provider_name

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            return False
        if not issubclass(exc_type, Exception) or isinstance(exc_val, ContentValidatorError):
            return False

        exc_name = exc_type.__name__
        message = sanitize_for_log(str(exc_val), limit=300)
        details = {"provider": self.provider_name, "operation": self.operation, "type": exc_name}

        if any(name in exc_name for name in ("Timeout", "TimedOut", "DeadlineExceeded")):
            raise ProviderTimeoutError(
                f"Timeout during {self.operation}: {message}", details
            ) from exc_val

        status = _status_code(exc_val)
        if status is not None:
            details["status"] = status
            if status == 429 or status >= 500:
                raise TransportError(
                    f"HTTP {status} during {self.operation}: {message}", details
                ) from exc_val
            if 400 <= status < 500:
                raise ConfigurationError(
                    f"HTTP {status} during {self.operation}: {message}", details
                ) from exc_val

        if any(name in exc_name for name in ("Connection", "Connect", "Network", "Transport")):
            raise TransportError(
                f"Failed to connect during {self.operation}: {message}", details
            ) from exc_val

        raise ProviderError(
            f"API error during {self.operation}: {message}", details
        ) from exc_val


class BaseProvider(ABC):
    """
    Abstract base class for AI providers.

    Provides common functionality:
    - Time-limited invoke() with response parsing
    - Sanitized call logging
    - Configuration check

    Subclasses must implement:
    - complete()
    - name
    - provider_id

    A provider instance may serve many validation requests, possibly
    concurrently, so nothing request-specific is stored on it.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Display name, usually the model name."""

    @property
    @abstractmethod
    def provider_id(self) -> ProviderId:
        """Identifier reported in results."""

    @property
    def is_configured(self) -> bool:
        """False when the provider has no usable credential or model."""
        return True

    # ==================== ABSTRACT METHODS ====================

    @abstractmethod
    async def complete(self, prompt: str, system_prompt: Optional[str] = None) -> Completion:
        """
        Send a prompt and return the raw completion with its token counts.

        Raises:
            ConfigurationError, ProviderTimeoutError, TransportError,
            ProviderError
        """

    async def invoke(
        self,
        prompt: str,
        rubric: RubricSpec,
        timeout_seconds: float,
        system_prompt: Optional[str] = None,
        usage: Optional[TokenUsage] = None,
    ) -> ValidationOutput:
        """
        Send a prompt and parse the verdict within a time limit.

        Args:
            prompt: Rendered prompt
            rubric: Active rubric the response is checked against
            timeout_seconds: Time limit for the whole call
            system_prompt: System message
            usage: Caller-owned counter; tokens are added even when the
                   response is later rejected by the parser

        Returns:
            ValidationOutput (normalization warnings included)

        Raises:
            ConfigurationError, ProviderTimeoutError, TransportError,
            ParseError, ProviderError
        """
        try:
            completion = await asyncio.wait_for(
                self.complete(prompt, system_prompt), timeout=timeout_seconds
            )
        except asyncio.TimeoutError as exc:
            raise ProviderTimeoutError(
                f"No response within {timeout_seconds:g}s",
                details={"provider": self.name},
            ) from exc

        if usage is not None:
            usage.add(completion)

        outcome = parse_validation_response(completion.text, rubric, self.provider_id)
        if not outcome.ok:
            raise ParseError(outcome.error, details={"provider": self.name})
        return outcome.output

    # ==================== CALL LOGGING ====================

    def _log_call(
        self,
        prompt: str,
        response: str,
        duration_ms: float,
        prompt_tokens: int = None,
        completion_tokens: int = None,
    ) -> Completion:
        """Log a completed call with sanitized summaries and wrap it as a Completion."""
        completion = Completion(
            text=response,
            duration_ms=round(duration_ms, 1),
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
        )
        logger.info(
            f"{self.name} responded in {completion.duration_ms:.0f}ms "
            f"({len(response)} chars, tokens in/out: {prompt_tokens}/{completion_tokens})"
        )
        logger.debug(f"{self.name} -> {sanitize_for_log(response, limit=200)}")
        return completion

    def _log_send(self, prompt: str) -> float:
        """Log an outgoing call and return its start time."""
        logger.debug(f"{self.name} <- {sanitize_for_log(prompt)}")
        return time.perf_counter()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, configured={self.is_configured})"
