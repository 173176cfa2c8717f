"""
Tests for the two-round orchestrator.
"""

import pytest

from content_validator.ai.comparison_provider import ComparisonProvider
from content_validator.core.models import ProviderId
from content_validator.core.workflow_state import ValidationPhase
from content_validator.prompts.templates import NO_PEER_ASSESSMENT, SYSTEM_MESSAGE

from conftest import FakeProvider, make_response


def _comparison(provider_a, provider_b, policy, **kwargs):
    return ComparisonProvider([("a", provider_a), ("b", provider_b)], policy=policy, **kwargs)


async def test_two_rounds_call_each_provider_twice(lecture_rubric, fast_policy):
    a = FakeProvider([make_response(lecture_rubric, fraction=0.8)], ProviderId.OPENAI, "gpt")
    b = FakeProvider([make_response(lecture_rubric, fraction=0.6)], ProviderId.GEMINI, "gemini")

    outcome = await _comparison(a, b, fast_policy).run("BASE", "content", lecture_rubric)

    assert a.calls == 2 and b.calls == 2
    assert a.prompts[0] == "BASE" and b.prompts[0] == "BASE"
    assert a.system_prompts[0] == SYSTEM_MESSAGE
    assert outcome.state.phase == ValidationPhase.ROUND2_DONE
    assert outcome.state.errors == []
    assert outcome.round_results(1).provider_a.provider == ProviderId.OPENAI
    assert outcome.round_results(2).provider_b.provider == ProviderId.GEMINI


async def test_round2_prompt_embeds_peer_round1(lecture_rubric, fast_policy):
    """Test each Round-2 prompt carries the other provider's Round-1 explanations."""
    a = FakeProvider(
        [make_response(lecture_rubric, explanation="Alpha sees strong structure")], ProviderId.OPENAI, "gpt"
    )
    b = FakeProvider(
        [make_response(lecture_rubric, explanation="Beta wants more examples")], ProviderId.GEMINI, "gemini"
    )

    outcome = await _comparison(a, b, fast_policy).run("BASE", "content", lecture_rubric)

    assert "Beta wants more examples" in a.prompts[1]
    assert "Alpha sees strong structure" not in a.prompts[1]
    assert "Alpha sees strong structure" in b.prompts[1]
    assert a.prompts[1].startswith("BASE")
    assert "GEMINI (gemini)" in a.prompts[1]
    assert outcome.round2_prompts["provider_a"] == a.prompts[1]


async def test_round2_waits_for_both_round1_calls(lecture_rubric, fast_policy):
    """Test the barrier: no Round-2 call starts before every Round-1 call finished."""
    fast = FakeProvider([make_response(lecture_rubric)], ProviderId.OPENAI, "fast", delay=0.0)
    slow = FakeProvider([make_response(lecture_rubric)], ProviderId.GEMINI, "slow", delay=0.1)

    await _comparison(fast, slow, fast_policy).run("BASE", "content", lecture_rubric)

    round1_end = max(fast.finished_at[0], slow.finished_at[0])
    assert fast.started_at[1] >= round1_end
    assert slow.started_at[1] >= round1_end


async def test_round1_calls_run_concurrently(lecture_rubric, fast_policy):
    a = FakeProvider([make_response(lecture_rubric)], ProviderId.OPENAI, "a", delay=0.1)
    b = FakeProvider([make_response(lecture_rubric)], ProviderId.GEMINI, "b", delay=0.1)

    await _comparison(a, b, fast_policy).run("BASE", "content", lecture_rubric)

    # Both started before either finished
    assert b.started_at[0] < a.finished_at[0]
    assert a.started_at[0] < b.finished_at[0]


async def test_stub_peer_in_round2(lecture_rubric, fast_policy):
    """Test a stubbed Round-1 verdict is embedded with the no-assessment note."""
    a = FakeProvider([make_response(lecture_rubric)], ProviderId.OPENAI, "gpt")
    b = FakeProvider(["not json"], ProviderId.GEMINI, "gemini")

    outcome = await _comparison(a, b, fast_policy).run("BASE", "content", lecture_rubric)

    assert NO_PEER_ASSESSMENT in a.prompts[1]
    assert "[STUB]" in a.prompts[1]
    assert not outcome.round1["provider_b"].genuine
    assert [e["type"] for e in outcome.state.errors] == ["ParseError", "ParseError"]


async def test_progress_events(lecture_rubric, fast_policy):
    events = []
    a = FakeProvider([make_response(lecture_rubric)], ProviderId.OPENAI, "gpt")
    b = FakeProvider([make_response(lecture_rubric)], ProviderId.GEMINI, "gemini")

    comparison = _comparison(a, b, fast_policy, progress_callback=lambda t, d: events.append((t, d)))
    await comparison.run("BASE", "content", lecture_rubric)

    kinds = [t for t, _ in events]
    assert kinds[0] == "round_start"
    assert kinds.count("provider_complete") == 4
    assert kinds.count("round_complete") == 2
    assert kinds.index("round_complete") < [i for i, k in enumerate(kinds) if k == "round_start"][1]


async def test_failing_progress_callback_is_ignored(lecture_rubric, fast_policy):
    def broken(event_type, data):
        raise ValueError("display closed")

    a = FakeProvider([make_response(lecture_rubric)], ProviderId.OPENAI, "gpt")
    b = FakeProvider([make_response(lecture_rubric)], ProviderId.GEMINI, "gemini")

    outcome = await _comparison(a, b, fast_policy, progress_callback=broken).run(
        "BASE", "content", lecture_rubric
    )

    assert outcome.round2["provider_a"].genuine


async def test_audit_and_token_usage(lecture_rubric, fast_policy):
    a = FakeProvider([make_response(lecture_rubric)], ProviderId.OPENAI, "gpt")
    b = FakeProvider([make_response(lecture_rubric)], ProviderId.GEMINI, "gemini")
    comparison = _comparison(a, b, fast_policy)

    outcome = await comparison.run("BASE", "content", lecture_rubric)
    audit = outcome.audit()
    usage = outcome.token_usage()

    assert [(e.round, e.slot) for e in audit] == [
        (1, "provider_a"), (1, "provider_b"), (2, "provider_a"), (2, "provider_b")
    ]
    assert usage["provider_a"]["total_tokens"] == 2 * 15
    assert all(e.prompt_tokens == 10 and e.completion_tokens == 5 for e in audit)


async def test_repeated_runs_keep_no_state_on_providers(lecture_rubric, fast_policy):
    """Test each run reports only its own token usage."""
    a = FakeProvider([make_response(lecture_rubric)], ProviderId.OPENAI, "gpt")
    b = FakeProvider([make_response(lecture_rubric)], ProviderId.GEMINI, "gemini")
    comparison = _comparison(a, b, fast_policy)

    for _ in range(5):
        outcome = await comparison.run("BASE", "content", lecture_rubric)

    assert outcome.token_usage()["provider_b"]["prompt_tokens"] == 2 * 10
    assert not hasattr(a, "call_history")


def test_requires_exactly_two_providers(lecture_rubric):
    a = FakeProvider([make_response(lecture_rubric)])

    with pytest.raises(ValueError):
        ComparisonProvider([("a", a)])
