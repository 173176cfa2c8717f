"""
Local stub provider.

Produces a deterministic placeholder verdict from simple structural
signals of the content (length, headers, lists, code blocks, paragraphs).
No network access. Every verdict is marked is_stub and its explanations
are prefixed with STUB_LABEL so it can never pass for a model's opinion.
"""

import re
from typing import Dict, List

from content_validator.analysis.preprocessing import count_paragraphs
from content_validator.core.models import (
    CriterionScore,
    DetailedFeedback,
    ProviderId,
    RubricSpec,
    ValidationOutput,
)
from content_validator.utils.confidence import clamp, round_half_up

STUB_LABEL = "[STUB]"

BASE_FRACTION = 0.2
LENGTH_FRACTION = 0.3
LENGTH_SATURATION_CHARS = 1500
STRUCTURE_BONUS = 0.1

_HEADER = re.compile(r"^#+\s", re.MULTILINE)
_LIST_ITEM = re.compile(r"^[ \t]*([-*+]|\d+\.)\s", re.MULTILINE)


class StubProvider:
    """Deterministic placeholder scorer used whenever a real provider cannot answer."""

    provider_id = ProviderId.LOCAL
    name = "local-stub"

    def _signals(self, content: str) -> Dict[str, bool]:
        return {
            "headers": bool(_HEADER.search(content)),
            "lists": bool(_LIST_ITEM.search(content)),
            "code blocks": "```" in content,
            "multiple paragraphs": count_paragraphs(content) >= 3,
        }

    def base_fraction(self, content: str) -> float:
        """Share of each criterion's maximum awarded before per-criterion jitter."""
        length_part = LENGTH_FRACTION * min(len(content) / LENGTH_SATURATION_CHARS, 1.0)
        bonus = STRUCTURE_BONUS * sum(self._signals(content).values())
        return BASE_FRACTION + length_part + bonus

    def validate(self, content: str, rubric: RubricSpec, reason: str = "") -> ValidationOutput:
        """
        Score content without a model.

        Args:
            content: Preprocessed content
            rubric: Active rubric
            reason: Why a stub is being used (included in the suggestion)

        Returns:
            ValidationOutput with is_stub=True
        """
        content = content or ""
        fraction = self.base_fraction(content)
        signals = self._signals(content)

        breakdown: Dict[str, CriterionScore] = {}
        for index, criterion in enumerate(rubric.criteria):
            # Small fixed offset so criteria do not all land on the same ratio
            jitter = ((len(content) + index) % 5 - 2) / 100
            share = clamp(fraction + jitter, 0.0, 1.0)
            score = min(round_half_up(share * criterion.max_points), criterion.max_points)
            breakdown[criterion.key] = CriterionScore(
                score=float(score),
                explanation=(
                    f"{STUB_LABEL} Placeholder score from content structure "
                    f"({len(content)} chars); no model assessment available."
                ),
            )

        present = [name for name, found in signals.items() if found]
        missing = [name for name, found in signals.items() if not found]
        strengths: List[str] = [f"{STUB_LABEL} Contains {name}" for name in present]
        weaknesses: List[str] = [f"{STUB_LABEL} No {name} detected" for name in missing]
        suggestion = f"{STUB_LABEL} Re-run validation with a configured provider for a real assessment."
        if reason:
            suggestion = f"{suggestion} Reason: {reason}"

        return ValidationOutput(
            provider=self.provider_id,
            overall_score=sum(c.score for c in breakdown.values()),
            score_breakdown=breakdown,
            detailed_feedback=DetailedFeedback(
                strengths=strengths,
                weaknesses=weaknesses,
                suggestion=suggestion,
            ),
            is_stub=True,
        )
