"""
Tests for core models, rubrics and workflow state.
"""

import pytest
from pydantic import ValidationError

from content_validator.core.exceptions import ContractViolationError, StateTransitionError
from content_validator.core.models import (
    AssignmentContext,
    ContentType,
    Difficulty,
    RubricCriterion,
    RubricSpec,
    ValidationOutput,
)
from content_validator.core.rubrics import RUBRICS, get_rubric
from content_validator.core.workflow_state import ValidationPhase, ValidationState


# ==================== CONTEXT ====================

def test_context_accepts_camel_case():
    context = AssignmentContext.model_validate({
        "topic": "Graphs",
        "topicsTaughtSoFar": ["Trees"],
        "contentType": "ASSIGNMENT",
        "difficulty": "EASY",
    })

    assert context.topics_taught_so_far == ["Trees"]
    assert context.difficulty == Difficulty.EASY
    context.check_contract()


def test_context_contract_problems():
    context = AssignmentContext(topic="  ", topics_taught_so_far=[" "], content_type=ContentType.ASSIGNMENT)

    with pytest.raises(ContractViolationError) as exc_info:
        context.check_contract()

    assert len(exc_info.value.details["problems"]) == 3


def test_context_is_frozen():
    context = AssignmentContext(topic="Graphs", topics_taught_so_far=["Trees"])

    with pytest.raises(ValidationError):
        context.topic = "Other"


# ==================== RUBRICS ====================

def test_every_rubric_sums_to_100():
    for content_type, rubric in RUBRICS.items():
        assert rubric.content_type == content_type
        assert sum(c.max_points for c in rubric.criteria) == 100


def test_rubric_sizes():
    assert len(RUBRICS[ContentType.ASSIGNMENT].criteria) == 7
    assert len(RUBRICS[ContentType.LECTURE_NOTE].criteria) == 7
    assert len(RUBRICS[ContentType.PRE_READ].criteria) == 8


def test_get_rubric_accepts_strings():
    assert get_rubric("pre-read") is RUBRICS[ContentType.PRE_READ]
    assert get_rubric(ContentType.ASSIGNMENT) is RUBRICS[ContentType.ASSIGNMENT]
    with pytest.raises(ValueError):
        get_rubric("essay")


def test_rubric_rejects_bad_weights():
    with pytest.raises(ValidationError):
        RubricSpec(
            content_type=ContentType.PRE_READ,
            title="Broken",
            criteria=(RubricCriterion(key="a", name="A", max_points=50),),
        )
    with pytest.raises(ValidationError):
        RubricSpec(
            content_type=ContentType.PRE_READ,
            title="Duplicate",
            criteria=(
                RubricCriterion(key="a", name="A", max_points=50),
                RubricCriterion(key="a", name="B", max_points=50),
            ),
        )


def test_rubric_criterion_lookup():
    rubric = get_rubric(ContentType.LECTURE_NOTE)

    assert rubric.criterion("accuracyCurrency").max_points == 5
    with pytest.raises(KeyError):
        rubric.criterion("missing")


# ==================== OUTPUT ====================

def test_output_overall_must_match_breakdown():
    with pytest.raises(ValidationError):
        ValidationOutput(
            provider="OPENAI",
            overall_score=50,
            score_breakdown={"a": {"score": 10}},
        )


def test_output_to_wire():
    output = ValidationOutput(
        provider="OPENAI",
        overall_score=10,
        score_breakdown={"a": {"score": 10, "explanation": "fine"}},
    )
    wire = output.to_wire()

    assert wire["overallScore"] == 10
    assert wire["scoreBreakdown"]["a"] == {"score": 10, "explanation": "fine"}
    assert wire["detailedFeedback"] == {"strengths": [], "weaknesses": [], "suggestion": ""}


# ==================== WORKFLOW STATE ====================

def test_state_walks_phases_in_order():
    state = ValidationState()
    for phase in (
        ValidationPhase.ROUND1_PENDING,
        ValidationPhase.ROUND1_DONE,
        ValidationPhase.ROUND2_PENDING,
        ValidationPhase.ROUND2_DONE,
        ValidationPhase.COMBINED,
    ):
        state = state.with_phase(phase)

    assert state.is_complete
    assert state.to_dict()["history"][0] == "init"
    assert len(state.history) == 6


def test_round2_cannot_start_before_round1_done():
    state = ValidationState().with_phase(ValidationPhase.ROUND1_PENDING)

    with pytest.raises(StateTransitionError):
        state.with_phase(ValidationPhase.ROUND2_PENDING)


def test_state_is_immutable():
    state = ValidationState()
    new_state = state.with_error("ParseError", "bad json", {"slot": "provider_a"})

    assert state.errors == []
    assert new_state.errors[0]["type"] == "ParseError"
    assert new_state.phase == ValidationPhase.INIT
