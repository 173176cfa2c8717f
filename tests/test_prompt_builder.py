"""
Tests for prompt templates and rendering.
"""

import json

from content_validator.core.models import ContentType, ValidationOutput
from content_validator.prompts.builder import (
    NOT_PROVIDED,
    build_cross_validation_prompt,
    build_template_variables,
    build_validation_prompt,
    format_peer_assessment,
    render,
)
from content_validator.prompts.templates import (
    NO_PEER_ASSESSMENT,
    PEER_SECTION_END,
    PEER_SECTION_START,
    get_default_template,
)


def test_render_substitutes_known_placeholders():
    assert render("Topic: {TOPIC} / {BRIEF}", {"TOPIC": "Graphs", "BRIEF": "b"}) == "Topic: Graphs / b"


def test_render_leaves_unknown_placeholders():
    assert render("{TOPIC} {UNKNOWN} {lower}", {"TOPIC": "T"}) == "T {UNKNOWN} {lower}"


def test_render_is_single_pass():
    """Test values containing placeholders are not expanded again."""
    result = render("{CONTENT} | {TOPIC}", {"CONTENT": "literal {TOPIC}", "TOPIC": "Graphs"})

    assert result == "literal {TOPIC} | Graphs"


def test_template_variables_defaults(lecture_context, lecture_rubric):
    variables = build_template_variables(lecture_context, "body", lecture_rubric)

    assert variables["TOPIC"] == "Recursion"
    assert variables["PREREQUISITES"] == "Functions, Loops"
    assert variables["GUIDELINES"] == NOT_PROVIDED
    assert variables["BRIEF"] == NOT_PROVIDED
    assert variables["DIFFICULTY"] == NOT_PROVIDED
    assert variables["CONTENT_TYPE"] == "LECTURE_NOTE"
    assert "contentStructure" in variables["OUTPUT_FORMAT"]


def test_default_template_renders_everything(assignment_context, assignment_rubric):
    variables = build_template_variables(
        assignment_context, "Q1. Sort this list.", assignment_rubric, guidelines="Be strict"
    )
    prompt = build_validation_prompt(
        get_default_template(ContentType.ASSIGNMENT), variables, assignment_rubric
    )

    assert "**Topic:** Sorting" in prompt
    assert "**Difficulty:** MEDIUM" in prompt
    assert "**Guidelines:** Be strict" in prompt
    assert "Q1. Sort this list." in prompt
    assert "Difficulty Distribution (0-20 points)" in prompt
    assert "## Required JSON Output Format" in prompt
    # Nothing left unrendered
    assert "{TOPIC}" not in prompt and "{CONTENT}" not in prompt


def test_distinct_contexts_give_distinct_prompts(lecture_context, lecture_rubric):
    """Test different inputs never collapse to the same prompt."""
    template = get_default_template(ContentType.LECTURE_NOTE)
    other = lecture_context.model_copy(update={"topic": "Iteration"})

    p1 = build_validation_prompt(
        template, build_template_variables(lecture_context, "same", lecture_rubric), lecture_rubric
    )
    p2 = build_validation_prompt(
        template, build_template_variables(other, "same", lecture_rubric), lecture_rubric
    )
    p3 = build_validation_prompt(
        template, build_template_variables(lecture_context, "different", lecture_rubric), lecture_rubric
    )

    assert len({p1, p2, p3}) == 3


def test_caller_template_gets_missing_sections(lecture_context, lecture_rubric):
    """Test a minimal template still carries content and output contract."""
    variables = build_template_variables(lecture_context, "The body.", lecture_rubric)
    prompt = build_validation_prompt("Score this note about {TOPIC}.", variables, lecture_rubric)

    assert prompt.startswith("Score this note about Recursion.")
    assert "## Content to Evaluate" in prompt
    assert "The body." in prompt
    assert "## Required JSON Output Format" in prompt


def _output(is_stub=False):
    return ValidationOutput(
        provider="GEMINI",
        overall_score=7,
        score_breakdown={"x": {"score": 7, "explanation": "Needs more examples"}},
        detailed_feedback={"strengths": ["Clear"], "weaknesses": [], "suggestion": "Add one"},
        is_stub=is_stub,
    )


def test_peer_assessment_embeds_wire_json():
    section = format_peer_assessment(_output())
    body = section.split("\n", 1)[1].rsplit("\n", 1)[0]

    assert section.startswith(PEER_SECTION_START)
    assert section.endswith(PEER_SECTION_END)
    assert json.loads(body)["scoreBreakdown"]["x"]["explanation"] == "Needs more examples"


def test_stub_peer_is_labelled():
    """Test a stub peer verdict is embedded after the no-assessment note."""
    section = format_peer_assessment(_output(is_stub=True))
    body = section.split("\n", 1)[1].rsplit("\n", 1)[0]
    note, wire = body.split("\n", 1)

    assert note == NO_PEER_ASSESSMENT
    assert json.loads(wire)["scoreBreakdown"]["x"]["explanation"] == "Needs more examples"


def test_cross_validation_prompt():
    prompt = build_cross_validation_prompt("BASE PROMPT", "GEMINI (gemini-2.5-flash)", _output())

    assert prompt.startswith("BASE PROMPT\n\n## Cross-Validation")
    assert "GEMINI (gemini-2.5-flash)" in prompt
    assert "Needs more examples" in prompt
