"""
Content Validator.

Dual-provider, two-round validation of educational content (assignments,
lecture notes, pre-reads) against a weighted rubric.

Usage:
    from content_validator import DualValidationEngine, AssignmentContext, ContentType

    engine = DualValidationEngine.from_settings()
    result = await engine.validate(content, AssignmentContext(
        topic="Recursion",
        topics_taught_so_far=["Functions"],
        content_type=ContentType.LECTURE_NOTE,
    ))
"""

__version__ = "1.0.0"

from content_validator.core.engine import DualValidationEngine
from content_validator.core.exceptions import ContentValidatorError, ContractViolationError
from content_validator.core.models import (
    AssignmentContext,
    ContentType,
    Difficulty,
    DualValidationResult,
    ProviderId,
)
from content_validator.core.rubrics import get_rubric

__all__ = [
    "__version__",
    "DualValidationEngine",
    "AssignmentContext",
    "ContentType",
    "Difficulty",
    "DualValidationResult",
    "ProviderId",
    "ContentValidatorError",
    "ContractViolationError",
    "get_rubric",
]
