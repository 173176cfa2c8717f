"""
Score Combiner.

Merges the two Round-2 verdicts into one score per criterion:
- both genuine: mean of the two scores (half-up), confidence from the gap
- one genuine: that provider's score, confidence capped at the
  single-source value (no averaging against a stub)
- none genuine: mean of the stub scores at stub confidence
"""

from dataclasses import dataclass
from typing import Dict, List

from content_validator.ai.fallback import ProviderVerdict
from content_validator.config.constants import (
    AGREEMENT_TOLERANCE,
    SINGLE_SOURCE_CONFIDENCE,
    STUB_CONFIDENCE,
)
from content_validator.config.logging_config import get_logger
from content_validator.core.models import CombinedCriterion, ProviderId, RubricSpec
from content_validator.utils.confidence import (
    agreement_confidence,
    mean_confidence,
    round_half_up,
    scores_agree,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class CombinedScores:
    """Combiner output, ready to be placed in a DualValidationResult."""
    final_score: Dict[str, CombinedCriterion]
    final_feedback: Dict[str, str]
    overall_score: int
    overall_confidence: float
    providers: List[ProviderId]


def _label(verdict: ProviderVerdict) -> str:
    return verdict.output.provider.value


class ScoreCombiner:
    """
    Reconciles two verdicts criterion by criterion.

    Usage:
        combiner = ScoreCombiner(tolerance=0.1)
        combined = combiner.combine(verdict_a, verdict_b, rubric)
    """

    def __init__(
        self,
        tolerance: float = AGREEMENT_TOLERANCE,
        single_source_confidence: float = SINGLE_SOURCE_CONFIDENCE,
        stub_confidence: float = STUB_CONFIDENCE,
    ):
        self.tolerance = tolerance
        self.single_source_confidence = single_source_confidence
        self.stub_confidence = stub_confidence

    @classmethod
    def from_settings(cls, settings) -> "ScoreCombiner":
        return cls(
            tolerance=settings.agreement_tolerance,
            single_source_confidence=settings.single_source_confidence,
            stub_confidence=settings.stub_confidence,
        )

    def combine(
        self,
        verdict_a: ProviderVerdict,
        verdict_b: ProviderVerdict,
        rubric: RubricSpec,
    ) -> CombinedScores:
        """
        Combine two Round-2 verdicts.

        Args:
            verdict_a: Slot A verdict
            verdict_b: Slot B verdict
            rubric: Active rubric

        Returns:
            CombinedScores; overall_score is the sum of the combined
            criterion scores
        """
        genuine = [v for v in (verdict_a, verdict_b) if v.genuine]

        final_score: Dict[str, CombinedCriterion] = {}
        for criterion in rubric.criteria:
            if len(genuine) == 2:
                combined = self._combine_pair(verdict_a, verdict_b, criterion.key, criterion.max_points)
            elif len(genuine) == 1:
                combined = self._single_source(genuine[0], criterion.key, criterion.max_points)
            else:
                combined = self._stub_only(verdict_a, verdict_b, criterion.key, criterion.max_points)
            final_score[criterion.key] = combined

        overall = sum(c.score for c in final_score.values())
        overall_confidence = mean_confidence(c.confidence for c in final_score.values())
        providers = sorted({v.output.provider for v in genuine}, key=lambda p: p.value)

        logger.debug(
            f"Combined {len(genuine)} genuine verdict(s): overall {overall}, "
            f"confidence {overall_confidence:.2f}"
        )

        return CombinedScores(
            final_score=final_score,
            final_feedback={key: c.feedback for key, c in final_score.items()},
            overall_score=overall,
            overall_confidence=round(overall_confidence, 4),
            providers=providers,
        )

    # ==================== PER-CRITERION RULES ====================

    def _combine_pair(
        self,
        verdict_a: ProviderVerdict,
        verdict_b: ProviderVerdict,
        key: str,
        max_points: int,
    ) -> CombinedCriterion:
        a = verdict_a.output.score_breakdown[key]
        b = verdict_b.output.score_breakdown[key]

        score = min(round_half_up((a.score + b.score) / 2), max_points)
        confidence = agreement_confidence(a.score, b.score, max_points)
        issues: List[str] = []

        if scores_agree(a.score, b.score, max_points, self.tolerance):
            # Keep the explanation of the provider closer to the combined score
            closer = a if abs(a.score - score) <= abs(b.score - score) else b
            feedback = closer.explanation
        else:
            feedback = (
                f"[{_label(verdict_a)}] {a.explanation}\n"
                f"[{_label(verdict_b)}] {b.explanation}"
            )
            issues.append(
                f"Providers disagree: {_label(verdict_a)} {a.score:g} vs "
                f"{_label(verdict_b)} {b.score:g} (max {max_points})"
            )

        return CombinedCriterion(
            score=score,
            max_points=max_points,
            confidence=round(confidence, 4),
            feedback=feedback,
            issues=issues,
        )

    def _single_source(self, verdict: ProviderVerdict, key: str, max_points: int) -> CombinedCriterion:
        entry = verdict.output.score_breakdown[key]
        return CombinedCriterion(
            score=min(round_half_up(entry.score), max_points),
            max_points=max_points,
            confidence=self.single_source_confidence,
            feedback=entry.explanation,
            issues=[f"Single-source score: only {_label(verdict)} returned a genuine verdict"],
        )

    def _stub_only(
        self,
        verdict_a: ProviderVerdict,
        verdict_b: ProviderVerdict,
        key: str,
        max_points: int,
    ) -> CombinedCriterion:
        a = verdict_a.output.score_breakdown[key]
        b = verdict_b.output.score_breakdown[key]
        return CombinedCriterion(
            score=min(round_half_up((a.score + b.score) / 2), max_points),
            max_points=max_points,
            confidence=self.stub_confidence,
            feedback=a.explanation,
            issues=["No genuine provider verdict; placeholder score"],
        )
