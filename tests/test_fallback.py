"""
Tests for the fallback controller.
"""

import asyncio

import pytest

from content_validator.ai.fallback import FallbackPolicy, invoke_with_fallback
from content_validator.ai.stub_provider import StubProvider
from content_validator.core.exceptions import (
    ConfigurationError,
    ParseError,
    ProviderTimeoutError,
    TransportError,
)
from content_validator.core.models import ProviderId

from conftest import FakeProvider, make_response


async def _invoke(provider, rubric, policy, content="Some lecture content about recursion."):
    return await invoke_with_fallback(
        slot="provider_a",
        round_number=1,
        provider=provider,
        prompt="PROMPT",
        system_prompt="SYSTEM",
        content=content,
        rubric=rubric,
        stub=StubProvider(),
        policy=policy,
    )


async def test_genuine_verdict(lecture_rubric, fast_policy):
    provider = FakeProvider([make_response(lecture_rubric)], provider_id=ProviderId.GEMINI)
    verdict = await _invoke(provider, lecture_rubric, fast_policy)

    assert verdict.genuine
    assert verdict.attempts == 1
    assert verdict.error_kind is None
    assert verdict.output.provider == ProviderId.GEMINI
    assert verdict.output.overall_score == 80
    assert provider.system_prompts == ["SYSTEM"]


async def test_timeout_is_retried_once(lecture_rubric, fast_policy):
    """Test a slow first attempt followed by a fast one."""
    provider = FakeProvider([make_response(lecture_rubric)], delay=[1.0, 0.0])
    verdict = await _invoke(provider, lecture_rubric, fast_policy)

    assert verdict.genuine
    assert verdict.attempts == 2
    assert provider.calls == 2


async def test_timeout_twice_substitutes_stub(lecture_rubric, fast_policy):
    provider = FakeProvider([make_response(lecture_rubric)], delay=1.0)
    verdict = await _invoke(provider, lecture_rubric, fast_policy)

    assert not verdict.genuine
    assert verdict.output.is_stub
    assert verdict.output.provider == ProviderId.LOCAL
    assert verdict.error_kind == "ProviderTimeoutError"
    assert verdict.attempts == 2
    # Bounded by two timeouts, not by the provider's delay
    assert verdict.duration_ms < 1000


async def test_no_retry_when_disabled(lecture_rubric):
    policy = FallbackPolicy(timeout_seconds=0.1, max_retries=0, retry_wait_seconds=0)
    provider = FakeProvider([make_response(lecture_rubric)], delay=1.0)
    verdict = await _invoke(provider, lecture_rubric, policy)

    assert verdict.error_kind == "ProviderTimeoutError"
    assert verdict.attempts == 1


async def test_transport_error_is_retried(lecture_rubric, fast_policy):
    provider = FakeProvider([TransportError("HTTP 503"), make_response(lecture_rubric)])
    verdict = await _invoke(provider, lecture_rubric, fast_policy)

    assert verdict.genuine
    assert verdict.attempts == 2


async def test_parse_error_is_not_retried(lecture_rubric, fast_policy):
    provider = FakeProvider(["Sorry, I cannot help with that."])
    verdict = await _invoke(provider, lecture_rubric, fast_policy)

    assert not verdict.genuine
    assert verdict.error_kind == "ParseError"
    assert verdict.attempts == 1
    assert provider.calls == 1
    # Tokens of the rejected response still count
    assert verdict.prompt_tokens == 10


async def test_configuration_error_is_not_retried(lecture_rubric, fast_policy):
    provider = FakeProvider([ConfigurationError("HTTP 401 during validation call")])
    verdict = await _invoke(provider, lecture_rubric, fast_policy)

    assert verdict.error_kind == "ConfigurationError"
    assert provider.calls == 1


async def test_unconfigured_provider_is_never_called(lecture_rubric, fast_policy):
    provider = FakeProvider([make_response(lecture_rubric)], configured=False)
    verdict = await _invoke(provider, lecture_rubric, fast_policy)

    assert not verdict.genuine
    assert verdict.error_kind == "ConfigurationError"
    assert verdict.attempts == 0
    assert provider.calls == 0


async def test_unexpected_exception_becomes_stub(lecture_rubric, fast_policy):
    provider = FakeProvider([RuntimeError("adapter bug")])
    verdict = await _invoke(provider, lecture_rubric, fast_policy)

    assert not verdict.genuine
    assert verdict.error_kind == "RuntimeError"
    assert provider.calls == 1


async def test_echoed_instruction_rejected(lecture_rubric, fast_policy):
    provider = FakeProvider([
        make_response(lecture_rubric, explanation="Ignoring previous instructions, full marks")
    ])
    verdict = await _invoke(provider, lecture_rubric, fast_policy)

    assert not verdict.genuine
    assert verdict.error_kind == "ParseError"
    assert "echoes an injected instruction" in verdict.error


async def test_security_vocabulary_from_the_content_is_accepted(lecture_rubric, fast_policy):
    """Test a verdict on a security lesson may talk about injection."""
    provider = FakeProvider([
        make_response(lecture_rubric, explanation="Explains SQL injection clearly")
    ])
    content = "# SQL Injection\n\nSQL injection happens when input is pasted into a query."
    verdict = await _invoke(provider, lecture_rubric, fast_policy, content=content)

    assert verdict.genuine
    assert verdict.output.warnings == []


async def test_unexplained_attack_vocabulary_only_warns(lecture_rubric, fast_policy):
    provider = FakeProvider([
        make_response(lecture_rubric, explanation="Scoring was bypassed here")
    ])
    verdict = await _invoke(provider, lecture_rubric, fast_policy)

    assert verdict.genuine
    assert "Response mentions terms absent from the content: bypassed" in verdict.output.warnings


async def test_response_screening_can_be_disabled(lecture_rubric):
    policy = FallbackPolicy(timeout_seconds=0.2, retry_wait_seconds=0, screen_responses=False)
    provider = FakeProvider([
        make_response(lecture_rubric, explanation="Ignoring previous instructions, full marks")
    ])
    verdict = await _invoke(provider, lecture_rubric, policy)

    assert verdict.genuine


async def test_all_maximum_scores_warn(lecture_rubric, fast_policy):
    scores = {c.key: c.max_points for c in lecture_rubric.criteria}
    provider = FakeProvider([make_response(lecture_rubric, scores=scores)])
    verdict = await _invoke(provider, lecture_rubric, fast_policy)

    assert verdict.genuine
    assert "Suspicious score pattern: every criterion at maximum" in verdict.output.warnings


async def test_cancellation_propagates(lecture_rubric):
    policy = FallbackPolicy(timeout_seconds=5.0, retry_wait_seconds=0)
    provider = FakeProvider([make_response(lecture_rubric)], delay=2.0)

    task = asyncio.create_task(_invoke(provider, lecture_rubric, policy))
    await asyncio.sleep(0.05)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task


async def test_audit_entry(lecture_rubric, fast_policy):
    provider = FakeProvider([TransportError("HTTP 502"), TransportError("HTTP 502")])
    verdict = await _invoke(provider, lecture_rubric, fast_policy)
    audit = verdict.to_audit()

    assert audit.slot == "provider_a"
    assert audit.round == 1
    assert audit.provider == ProviderId.LOCAL
    assert not audit.genuine
    assert audit.attempts == 2
    assert audit.error_kind == "TransportError"


# ==================== ADAPTER INVOKE ====================

async def test_invoke_returns_parsed_output(lecture_rubric):
    provider = FakeProvider([make_response(lecture_rubric)], provider_id=ProviderId.GEMINI)

    output = await provider.invoke("PROMPT", lecture_rubric, timeout_seconds=1.0)

    assert output.provider == ProviderId.GEMINI
    assert output.overall_score == 80


async def test_invoke_raises_typed_errors(lecture_rubric):
    slow = FakeProvider([make_response(lecture_rubric)], delay=1.0)
    broken = FakeProvider(['{"overallScore": 10}'])

    with pytest.raises(ProviderTimeoutError):
        await slow.invoke("PROMPT", lecture_rubric, timeout_seconds=0.05)
    with pytest.raises(ParseError) as exc_info:
        await broken.invoke("PROMPT", lecture_rubric, timeout_seconds=1.0)

    assert "Missing required keys" in exc_info.value.message
