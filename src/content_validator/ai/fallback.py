"""
Fallback/Degradation controller.

invoke_with_fallback() is the only place where provider calls are retried
and replaced by stub verdicts; each attempt is time-limited by
BaseProvider.invoke(). It always returns a ProviderVerdict; provider
failures never propagate past it. Caller cancellation
(asyncio.CancelledError) is not intercepted.

Policy per failure kind:
- ConfigurationError: no retry, stub
- ProviderTimeoutError / TransportError: one retry, then stub
- ParseError (malformed or rejected response): no retry, stub
"""

import time
from dataclasses import dataclass
from typing import Optional

from tenacity import AsyncRetrying, RetryCallState, retry_if_exception, stop_after_attempt, wait_fixed

from content_validator.ai.base_provider import BaseProvider, TokenUsage
from content_validator.ai.response_parser import verdict_text
from content_validator.ai.stub_provider import StubProvider
from content_validator.analysis.guardrails import (
    find_response_manipulation,
    score_pattern_warning,
    unexplained_markers_warning,
)
from content_validator.config.constants import (
    PROVIDER_MAX_RETRIES,
    PROVIDER_TIMEOUT_SECONDS,
    RETRY_WAIT_SECONDS,
)
from content_validator.config.logging_config import get_logger, sanitize_for_log
from content_validator.core.exceptions import (
    ConfigurationError,
    ParseError,
    ProviderError,
)
from content_validator.core.models import ProviderAudit, RubricSpec, ValidationOutput

logger = get_logger(__name__)


@dataclass(frozen=True)
class FallbackPolicy:
    """Timeout, retry and screening settings applied to every provider call."""
    timeout_seconds: float = PROVIDER_TIMEOUT_SECONDS
    max_retries: int = PROVIDER_MAX_RETRIES
    retry_wait_seconds: float = RETRY_WAIT_SECONDS
    screen_responses: bool = True

    @classmethod
    def from_settings(cls, settings) -> "FallbackPolicy":
        return cls(
            timeout_seconds=settings.provider_timeout_seconds,
            max_retries=settings.provider_max_retries,
            retry_wait_seconds=settings.retry_wait_seconds,
            screen_responses=settings.guardrails_enabled,
        )


@dataclass(frozen=True)
class ProviderVerdict:
    """
    Resolved outcome of one provider call in one round.

    genuine is False whenever output came from the stub. Token counts
    cover every attempt, including rejected responses.
    """
    slot: str
    round: int
    output: ValidationOutput
    genuine: bool
    attempts: int = 0
    duration_ms: float = 0.0
    provider_name: str = ""
    error_kind: Optional[str] = None
    error: Optional[str] = None
    prompt_tokens: int = 0
    completion_tokens: int = 0

    def to_audit(self) -> ProviderAudit:
        return ProviderAudit(
            slot=self.slot,
            round=self.round,
            provider=self.output.provider,
            genuine=self.genuine,
            attempts=self.attempts,
            duration_ms=round(self.duration_ms, 1),
            error_kind=self.error_kind,
            error=self.error,
            prompt_tokens=self.prompt_tokens,
            completion_tokens=self.completion_tokens,
        )


def _is_retryable(exc: BaseException) -> bool:
    return isinstance(exc, ProviderError) and exc.retryable


async def invoke_with_fallback(
    slot: str,
    round_number: int,
    provider: BaseProvider,
    prompt: str,
    system_prompt: Optional[str],
    content: str,
    rubric: RubricSpec,
    stub: StubProvider,
    policy: FallbackPolicy,
) -> ProviderVerdict:
    """
    Call a provider under the fallback policy.

    Args:
        slot: Slot name ("provider_a" / "provider_b")
        round_number: 1 or 2
        provider: Real provider adapter
        prompt: Rendered prompt
        system_prompt: System message
        content: Preprocessed content, used by the stub
        rubric: Active rubric
        stub: Stub used for substitution
        policy: Timeout/retry/screening policy

    Returns:
        ProviderVerdict, genuine or stub
    """
    start = time.perf_counter()
    attempts = 0
    usage = TokenUsage()
    tag = f"[R{round_number} {slot} {provider.name}]"

    def substitute(error_kind: str, error: str) -> ProviderVerdict:
        safe_error = sanitize_for_log(error, limit=300)
        logger.warning(f"{tag} substituting stub verdict ({error_kind}): {safe_error}")
        return ProviderVerdict(
            slot=slot,
            round=round_number,
            output=stub.validate(content, rubric, reason=error_kind),
            genuine=False,
            attempts=attempts,
            duration_ms=(time.perf_counter() - start) * 1000,
            provider_name=provider.name,
            error_kind=error_kind,
            error=safe_error,
            prompt_tokens=usage.prompt_tokens,
            completion_tokens=usage.completion_tokens,
        )

    if not provider.is_configured:
        return substitute(ConfigurationError.__name__, "provider has no API key or model configured")

    async def attempt_call() -> ValidationOutput:
        nonlocal attempts
        attempts += 1
        return await provider.invoke(prompt, rubric, policy.timeout_seconds, system_prompt, usage=usage)

    def log_retry(retry_state: RetryCallState) -> None:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            f"{tag} attempt {retry_state.attempt_number} failed "
            f"({type(exc).__name__}), retrying in {policy.retry_wait_seconds:g}s"
        )

    retrying = AsyncRetrying(
        stop=stop_after_attempt(policy.max_retries + 1),
        wait=wait_fixed(policy.retry_wait_seconds),
        retry=retry_if_exception(_is_retryable),
        before_sleep=log_retry,
        reraise=True,
    )

    try:
        output = await retrying(attempt_call)
    except (ProviderError, ConfigurationError) as e:
        return substitute(type(e).__name__, str(e))
    except Exception as e:
        # Adapter bug or unexpected SDK behaviour; still must not reach the caller
        logger.opt(exception=e).error(f"{tag} unexpected error from provider")
        return substitute(type(e).__name__, str(e))

    if policy.screen_responses:
        text = verdict_text(output)
        reason = find_response_manipulation(text)
        if reason:
            return substitute(ParseError.__name__, reason)

        screen_warnings = [
            unexplained_markers_warning(text, content),
            score_pattern_warning(
                {k: c.score for k, c in output.score_breakdown.items()},
                {c.key: c.max_points for c in rubric.criteria},
            ),
        ]
        screen_warnings = [w for w in screen_warnings if w]
        if screen_warnings:
            output = output.model_copy(update={"warnings": output.warnings + screen_warnings})

    for warning in output.warnings:
        logger.warning(f"{tag} {warning}")

    duration_ms = (time.perf_counter() - start) * 1000
    logger.info(f"{tag} genuine verdict {output.overall_score:g}/100 in {duration_ms:.0f}ms")
    return ProviderVerdict(
        slot=slot,
        round=round_number,
        output=output,
        genuine=True,
        attempts=attempts,
        duration_ms=duration_ms,
        provider_name=provider.name,
        prompt_tokens=usage.prompt_tokens,
        completion_tokens=usage.completion_tokens,
    )
