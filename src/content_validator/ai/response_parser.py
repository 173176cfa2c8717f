"""
Shared response parser for AI providers.

Turns a provider's raw text into a ValidationOutput checked against the
active rubric. Failures are returned as a ParseOutcome value, not raised:
a malformed response is an expected outcome of calling a model.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from content_validator.core.exceptions import ParseError
from content_validator.core.models import (
    CriterionScore,
    DetailedFeedback,
    ProviderId,
    RubricSpec,
    ValidationOutput,
)
from content_validator.utils.confidence import round_half_up
from content_validator.utils.json_extractor import extract_json_object

REQUIRED_KEYS = ("overallScore", "scoreBreakdown", "detailedFeedback")
FEEDBACK_KEYS = ("strengths", "weaknesses", "suggestion")


@dataclass(frozen=True)
class ParseOutcome:
    """Either a parsed verdict or the reason parsing failed."""
    output: Optional[ValidationOutput] = None
    error: Optional[str] = None
    warnings: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.output is not None

    @property
    def error_kind(self) -> Optional[str]:
        return None if self.ok else ParseError.__name__

    @classmethod
    def failure(cls, error: str) -> "ParseOutcome":
        return cls(output=None, error=error)


def _as_number(value: Any) -> Optional[float]:
    """Accept finite ints, floats and numeric strings; reject bools and the rest."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _as_str_list(value: Any) -> Optional[List[str]]:
    """A list of strings, blank entries dropped; anything else is rejected."""
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        return None
    return [v for v in value if v.strip()]


def parse_validation_response(
    raw_response: str,
    rubric: RubricSpec,
    provider: ProviderId,
) -> ParseOutcome:
    """
    Parse and validate a provider response.

    Rejected (not coerced): no JSON object, a missing required key, a
    missing rubric criterion, a non-numeric score, a missing or non-string
    explanation, a detailedFeedback block without list-of-string
    strengths/weaknesses and a string suggestion. Normalized with a
    warning: scores outside 0..maxPoints are clamped, fractional scores
    are rounded half-up to whole points, an overallScore that differs from
    the sum of criterion scores is replaced by the sum.

    Args:
        raw_response: Raw text returned by the provider
        rubric: Active rubric
        provider: Provider that produced the response

    Returns:
        ParseOutcome
    """
    data = extract_json_object(raw_response)
    if data is None:
        return ParseOutcome.failure("Response does not contain a JSON object")

    missing = [k for k in REQUIRED_KEYS if k not in data]
    if missing:
        return ParseOutcome.failure(f"Missing required keys: {', '.join(missing)}")

    breakdown_raw = data["scoreBreakdown"]
    if not isinstance(breakdown_raw, dict):
        return ParseOutcome.failure("scoreBreakdown is not an object")

    missing_criteria = [k for k in rubric.keys if k not in breakdown_raw]
    if missing_criteria:
        return ParseOutcome.failure(f"Missing criteria: {', '.join(missing_criteria)}")

    warnings: List[str] = []
    breakdown: Dict[str, CriterionScore] = {}
    raw_total = 0.0

    for criterion in rubric.criteria:
        entry = breakdown_raw[criterion.key]
        if not isinstance(entry, dict) or "score" not in entry:
            return ParseOutcome.failure(f"Criterion {criterion.key} has no score")

        score = _as_number(entry["score"])
        if score is None:
            return ParseOutcome.failure(
                f"Criterion {criterion.key} score is not numeric: {entry['score']!r}"
            )
        raw_total += score

        explanation = entry.get("explanation")
        if not isinstance(explanation, str):
            return ParseOutcome.failure(f"Criterion {criterion.key} has no explanation string")

        clamped = min(max(score, 0.0), float(criterion.max_points))
        if clamped != score:
            warnings.append(
                f"{criterion.key} score {score:g} clamped to {clamped:g} "
                f"(range 0-{criterion.max_points})"
            )

        # Whole points, so a single genuine verdict is reproduced exactly
        points = round_half_up(clamped)
        if points != clamped:
            warnings.append(f"{criterion.key} score {clamped:g} rounded to {points}")

        breakdown[criterion.key] = CriterionScore(score=points, explanation=explanation)

    extra = [k for k in breakdown_raw if k not in breakdown]
    if extra:
        warnings.append(f"Ignored unknown criteria: {', '.join(extra)}")

    reported = _as_number(data["overallScore"])
    if reported is None:
        return ParseOutcome.failure(f"overallScore is not numeric: {data['overallScore']!r}")

    if abs(reported - raw_total) > 0.01:
        warnings.append(
            f"overallScore {reported:g} does not equal criterion sum {raw_total:g}; using the sum"
        )
    total = sum(c.score for c in breakdown.values())

    feedback_raw = data["detailedFeedback"]
    if not isinstance(feedback_raw, dict):
        return ParseOutcome.failure("detailedFeedback is not an object")

    missing_feedback = [k for k in FEEDBACK_KEYS if k not in feedback_raw]
    if missing_feedback:
        return ParseOutcome.failure(
            f"detailedFeedback is missing: {', '.join(missing_feedback)}"
        )

    strengths = _as_str_list(feedback_raw["strengths"])
    weaknesses = _as_str_list(feedback_raw["weaknesses"])
    if strengths is None or weaknesses is None:
        return ParseOutcome.failure("detailedFeedback strengths/weaknesses must be lists of strings")
    suggestion = feedback_raw["suggestion"]
    if not isinstance(suggestion, str):
        return ParseOutcome.failure("detailedFeedback suggestion must be a string")

    output = ValidationOutput(
        provider=provider,
        overall_score=total,
        score_breakdown=breakdown,
        detailed_feedback=DetailedFeedback(
            strengths=strengths,
            weaknesses=weaknesses,
            suggestion=suggestion,
        ),
        warnings=warnings,
    )
    return ParseOutcome(output=output, warnings=warnings)


def verdict_text(output: ValidationOutput) -> str:
    """All free text of a verdict, for screening."""
    parts = [c.explanation for c in output.score_breakdown.values()]
    parts.extend(output.strengths)
    parts.extend(output.weaknesses)
    parts.append(output.suggestion)
    return "\n".join(parts)
