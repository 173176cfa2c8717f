"""
Dual validation engine.

Public entry point. One call to DualValidationEngine.validate() runs:
contract check -> preprocessing -> guardrail screening -> prompt
rendering -> two rounds -> score combination, and returns a
DualValidationResult. The only exception it raises for bad input is
ContractViolationError; provider failures are absorbed into stub
verdicts and reported through result.providers and result.audit.
"""

import time
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError

from content_validator.ai.comparison_provider import ComparisonProvider, advance_phase
from content_validator.analysis.guardrails import screen_content
from content_validator.analysis.preprocessing import preprocess_content
from content_validator.config.constants import SLOT_A, SLOT_B
from content_validator.config.logging_config import get_logger
from content_validator.core.exceptions import ContractViolationError
from content_validator.core.models import AssignmentContext, DualValidationResult
from content_validator.core.rubrics import get_rubric
from content_validator.core.workflow_state import ValidationPhase
from content_validator.grading.combiner import ScoreCombiner
from content_validator.prompts.builder import build_template_variables, build_validation_prompt
from content_validator.prompts.templates import get_default_template

logger = get_logger(__name__)


class DualValidationEngine:
    """
    Validates educational content with two providers over two rounds.

    Providers are injected through the ComparisonProvider, so tests can
    substitute fakes and nothing is shared between calls.

    Usage:
        engine = DualValidationEngine.from_settings()
        result = await engine.validate(content, context)
    """

    def __init__(
        self,
        comparison: ComparisonProvider,
        combiner: Optional[ScoreCombiner] = None,
        guardrails_enabled: bool = True,
    ):
        self.comparison = comparison
        self.combiner = combiner or ScoreCombiner()
        self.guardrails_enabled = guardrails_enabled

    @classmethod
    def from_settings(cls, settings=None, progress_callback=None) -> "DualValidationEngine":
        """Build an engine with the providers configured in settings."""
        from content_validator.ai.provider_factory import create_comparison_provider
        from content_validator.config.settings import get_settings

        settings = settings or get_settings()
        return cls(
            comparison=create_comparison_provider(settings, progress_callback=progress_callback),
            combiner=ScoreCombiner.from_settings(settings),
            guardrails_enabled=settings.guardrails_enabled,
        )

    @staticmethod
    def _coerce_context(context: Union[AssignmentContext, Dict[str, Any]]) -> AssignmentContext:
        if isinstance(context, AssignmentContext):
            return context
        if not isinstance(context, dict):
            raise ContractViolationError(
                "AssignmentContext must be an AssignmentContext or a mapping",
                details={"type": type(context).__name__},
            )
        try:
            return AssignmentContext.model_validate(context)
        except ValidationError as e:
            raise ContractViolationError(
                "Invalid AssignmentContext",
                details={"errors": [err["msg"] for err in e.errors()]},
            ) from e

    async def validate(
        self,
        content: str,
        context: Union[AssignmentContext, Dict[str, Any]],
        template: Optional[str] = None,
        guidelines: Optional[str] = None,
        brief: Optional[str] = None,
    ) -> DualValidationResult:
        """
        Validate one piece of content.

        Args:
            content: Raw markdown/text
            context: AssignmentContext (or a mapping with its fields)
            template: Stored rubric template; default template when None
            guidelines: Active guidelines text
            brief: Task brief

        Returns:
            DualValidationResult

        Raises:
            ContractViolationError: If the context is structurally invalid
                or content is not a string. Raised before any provider call.
        """
        start = time.perf_counter()

        if not isinstance(content, str):
            raise ContractViolationError(
                "content must be a string", details={"type": type(content).__name__}
            )
        context = self._coerce_context(context)
        context.check_contract()

        rubric = get_rubric(context.content_type)
        logger.info(
            f"Validating {context.content_type.value} on {context.topic!r} "
            f"({len(content)} chars)"
        )

        preprocessing = preprocess_content(content)
        for warning in preprocessing.warnings:
            logger.warning(f"Preprocessing: {warning}")

        prompt_content = preprocessing.cleaned_content
        extra_warnings: List[str] = []
        if self.guardrails_enabled:
            screening = screen_content(prompt_content)
            prompt_content = screening.content
            extra_warnings = screening.warnings
            for warning in extra_warnings:
                logger.warning(f"Guardrails: {warning}")
        if extra_warnings:
            preprocessing = preprocessing.model_copy(
                update={"warnings": preprocessing.warnings + extra_warnings}
            )

        variables = build_template_variables(context, prompt_content, rubric, guidelines, brief)
        base_prompt = build_validation_prompt(
            template or get_default_template(context.content_type), variables, rubric
        )

        outcome = await self.comparison.run(base_prompt, prompt_content, rubric)

        combined = self.combiner.combine(outcome.round2[SLOT_A], outcome.round2[SLOT_B], rubric)
        state = advance_phase(outcome.state, ValidationPhase.COMBINED)

        processing_time_ms = int((time.perf_counter() - start) * 1000)
        result = DualValidationResult(
            content_type=context.content_type,
            round1_results=outcome.round_results(1),
            round2_results=outcome.round_results(2),
            final_score=combined.final_score,
            final_feedback=combined.final_feedback,
            overall_score=combined.overall_score,
            overall_confidence=combined.overall_confidence,
            providers=combined.providers,
            processing_time_ms=processing_time_ms,
            preprocessing=preprocessing,
            audit=outcome.audit(),
        )

        logger.info(
            f"Validation complete in {processing_time_ms}ms: overall {result.overall_score}/100, "
            f"confidence {result.overall_confidence:.2f}, "
            f"providers {[p.value for p in result.providers] or 'none (stub only)'}, "
            f"{len(state.errors)} substituted call(s)"
        )
        for slot, usage in outcome.token_usage().items():
            logger.debug(
                f"{slot} tokens in/out: {usage['prompt_tokens']}/{usage['completion_tokens']}"
            )
        return result
