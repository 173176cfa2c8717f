"""
Shared fixtures: scripted providers and sample content.
"""

import asyncio
import json
from typing import Dict, List, Optional, Union

import pytest
from loguru import logger

from content_validator.ai.base_provider import BaseProvider, Completion
from content_validator.ai.comparison_provider import ComparisonProvider
from content_validator.ai.fallback import FallbackPolicy
from content_validator.core.engine import DualValidationEngine
from content_validator.core.models import (
    AssignmentContext,
    ContentType,
    Difficulty,
    ProviderId,
    RubricSpec,
)
from content_validator.core.rubrics import ASSIGNMENT_RUBRIC, LECTURE_NOTE_RUBRIC


def make_response(
    rubric: RubricSpec,
    scores: Optional[Dict[str, float]] = None,
    fraction: float = 0.8,
    explanation: str = "Reasonable work on this criterion.",
    overall: Optional[float] = None,
) -> str:
    """Build a well-formed provider response for a rubric."""
    if scores is None:
        scores = {c.key: round(c.max_points * fraction) for c in rubric.criteria}
    breakdown = {
        key: {"score": score, "explanation": f"{explanation} ({key})"}
        for key, score in scores.items()
    }
    return json.dumps({
        "overallScore": sum(scores.values()) if overall is None else overall,
        "scoreBreakdown": breakdown,
        "detailedFeedback": {
            "strengths": ["Clear headings", "Good examples"],
            "weaknesses": ["Few exercises"],
            "suggestion": "Add a short practice section.",
        },
    })


Script = Union[str, BaseException]


class FakeProvider(BaseProvider):
    """
    Provider that replays scripted responses.

    Each call pops the next item: a string is returned as the response,
    an exception is raised. The last item repeats once the script is
    exhausted. A list of delays is consumed the same way. Prompts are
    recorded for inspection.
    """

    def __init__(
        self,
        script: List[Script],
        provider_id: ProviderId = ProviderId.OPENAI,
        name: str = "fake",
        delay: Union[float, List[float]] = 0.0,
        configured: bool = True,
    ):
        self.script = list(script)
        self._provider_id = provider_id
        self._name = name
        self.delays = list(delay) if isinstance(delay, list) else [delay]
        self.configured = configured
        self.prompts: List[str] = []
        self.system_prompts: List[Optional[str]] = []
        self.started_at: List[float] = []
        self.finished_at: List[float] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def provider_id(self) -> ProviderId:
        return self._provider_id

    @property
    def is_configured(self) -> bool:
        return self.configured

    @property
    def calls(self) -> int:
        return len(self.prompts)

    async def complete(self, prompt: str, system_prompt: Optional[str] = None) -> Completion:
        loop = asyncio.get_running_loop()
        self.prompts.append(prompt)
        self.system_prompts.append(system_prompt)
        self.started_at.append(loop.time())
        item = self.script.pop(0) if len(self.script) > 1 else self.script[0]
        delay = self.delays.pop(0) if len(self.delays) > 1 else self.delays[0]
        if delay:
            await asyncio.sleep(delay)
        self.finished_at.append(loop.time())
        if isinstance(item, BaseException):
            raise item
        return self._log_call(prompt, item, duration_ms=delay * 1000, prompt_tokens=10, completion_tokens=5)


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop sinks added by setup_logging so they never outlive a captured stream."""
    yield
    logger.remove()


@pytest.fixture
def fast_policy():
    """Short timeout, no wait between retries."""
    return FallbackPolicy(timeout_seconds=0.2, max_retries=1, retry_wait_seconds=0)


@pytest.fixture
def lecture_rubric():
    return LECTURE_NOTE_RUBRIC


@pytest.fixture
def assignment_rubric():
    return ASSIGNMENT_RUBRIC


@pytest.fixture
def lecture_context():
    return AssignmentContext(
        topic="Recursion",
        topics_taught_so_far=["Functions", "Loops"],
        content_type=ContentType.LECTURE_NOTE,
    )


@pytest.fixture
def assignment_context():
    return AssignmentContext(
        topic="Sorting",
        topics_taught_so_far=["Arrays"],
        content_type=ContentType.ASSIGNMENT,
        difficulty=Difficulty.MEDIUM,
    )


@pytest.fixture
def sample_content():
    return (
        "# Recursion\n\n"
        "A recursive function calls itself on a smaller input until it "
        "reaches a base case.\n\n"
        "## Example\n\n"
        "```python\n"
        "def total(n):\n"
        "    return 0 if n == 0 else n + total(n - 1)\n"
        "```\n\n"
        "- Always define a base case\n"
        "- Make progress toward it on every call\n"
    )


@pytest.fixture
def make_engine(fast_policy):
    """Build an engine around two fake providers."""
    def _make(provider_a: FakeProvider, provider_b: FakeProvider, **kwargs) -> DualValidationEngine:
        comparison = ComparisonProvider(
            [("a", provider_a), ("b", provider_b)],
            policy=kwargs.pop("policy", fast_policy),
        )
        return DualValidationEngine(comparison, **kwargs)
    return _make
