"""
Prompt Builder.

Pure transformations from (template, variables) to prompt text:
- render(): single-pass placeholder substitution;
- build_validation_prompt(): Round-1 prompt for a rubric;
- build_cross_validation_prompt(): Round-2 prompt embedding the peer verdict.
"""

import json
import re
from typing import Dict, Mapping, Optional

from content_validator.config.constants import DEFAULT_PREREQUISITES
from content_validator.core.models import AssignmentContext, RubricSpec, ValidationOutput
from content_validator.prompts.templates import (
    CROSS_VALIDATION_INSTRUCTIONS,
    NO_PEER_ASSESSMENT,
    PEER_SECTION_END,
    PEER_SECTION_START,
    build_criteria_section,
    build_output_format,
)

_PLACEHOLDER = re.compile(r"\{([A-Z][A-Z0-9_]*)\}")

NOT_PROVIDED = "Not provided"


def render(template: str, variables: Mapping[str, str]) -> str:
    """
    Substitute {NAME} placeholders in one pass.

    Values are inserted literally and never re-scanned, so content that
    itself contains "{TOPIC}" stays as written. Placeholders without a
    value are left verbatim.

    Args:
        template: Template text
        variables: Placeholder name -> value

    Returns:
        Rendered text
    """
    def _sub(match: "re.Match[str]") -> str:
        name = match.group(1)
        if name in variables:
            return str(variables[name])
        return match.group(0)

    return _PLACEHOLDER.sub(_sub, template)


def build_template_variables(
    context: AssignmentContext,
    content: str,
    rubric: RubricSpec,
    guidelines: Optional[str] = None,
    brief: Optional[str] = None,
) -> Dict[str, str]:
    """
    Build the variable mapping for a validation prompt.

    Args:
        context: Validated assignment context
        content: Preprocessed, screened content
        rubric: Active rubric
        guidelines: Active guidelines text, if any
        brief: Task brief, if any

    Returns:
        Dict keyed by placeholder name
    """
    prerequisites = [t.strip() for t in context.topics_taught_so_far if t and t.strip()]
    return {
        "TOPIC": context.topic.strip(),
        "PREREQUISITES": ", ".join(prerequisites or DEFAULT_PREREQUISITES),
        "GUIDELINES": (guidelines or "").strip() or NOT_PROVIDED,
        "BRIEF": (brief or "").strip() or NOT_PROVIDED,
        "CONTENT": content,
        "CONTENT_TYPE": context.content_type.value,
        "DIFFICULTY": context.difficulty.value if context.difficulty else NOT_PROVIDED,
        "CRITERIA": build_criteria_section(rubric),
        "OUTPUT_FORMAT": build_output_format(rubric),
    }


def build_validation_prompt(
    template: str,
    variables: Mapping[str, str],
    rubric: RubricSpec,
) -> str:
    """
    Render a Round-1 prompt.

    Caller templates may omit the content or the output contract; the
    missing section is appended so every prompt carries both.

    Args:
        template: Stored or default template
        variables: From build_template_variables()
        rubric: Active rubric

    Returns:
        Complete prompt text
    """
    prompt = render(template, variables)

    if "{CONTENT}" not in template:
        prompt += f"\n\n## Content to Evaluate\n\n```\n{variables['CONTENT']}\n```"

    if "{OUTPUT_FORMAT}" not in template:
        prompt += "\n\n" + build_output_format(rubric)

    return prompt


def format_peer_assessment(peer: ValidationOutput) -> str:
    """Render a peer verdict as delimited JSON; a stub verdict is preceded by a note."""
    body = json.dumps(peer.to_wire(), indent=2, ensure_ascii=False)
    if peer.is_stub:
        body = f"{NO_PEER_ASSESSMENT}\n{body}"
    return f"{PEER_SECTION_START}\n{body}\n{PEER_SECTION_END}"


def build_cross_validation_prompt(
    base_prompt: str,
    peer_label: str,
    peer: ValidationOutput,
) -> str:
    """
    Build a Round-2 prompt.

    Args:
        base_prompt: The Round-1 prompt for this content
        peer_label: Display name of the other provider
        peer: The other provider's Round-1 verdict

    Returns:
        Base prompt followed by the cross-validation section
    """
    instructions = CROSS_VALIDATION_INSTRUCTIONS.format(peer=peer_label)
    return (
        f"{base_prompt}\n\n"
        "## Cross-Validation\n\n"
        f"{instructions}\n\n"
        f"{format_peer_assessment(peer)}"
    )
