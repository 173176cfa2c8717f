"""
Core module for the content validator.

Exports key models, exceptions, and workflow state for easy access.
The engine lives in core.engine and is imported from there.
"""

from content_validator.core.models import (
    AssignmentContext,
    ContentType,
    Difficulty,
    ProviderId,
    RubricCriterion,
    RubricSpec,
    CriterionScore,
    ValidationOutput,
    RoundResults,
    CombinedCriterion,
    DualValidationResult,
    PreprocessResult,
)

from content_validator.core.workflow_state import (
    ValidationPhase,
    ValidationState,
)

from content_validator.core.exceptions import (
    ContentValidatorError,
    ConfigurationError,
    MissingAPIKeyError,
    ContractViolationError,
    ProviderError,
    ProviderTimeoutError,
    TransportError,
    ParseError,
    StateTransitionError,
)

__all__ = [
    # Models
    'AssignmentContext',
    'ContentType',
    'Difficulty',
    'ProviderId',
    'RubricCriterion',
    'RubricSpec',
    'CriterionScore',
    'ValidationOutput',
    'RoundResults',
    'CombinedCriterion',
    'DualValidationResult',
    'PreprocessResult',
    # Workflow
    'ValidationPhase',
    'ValidationState',
    # Exceptions
    'ContentValidatorError',
    'ConfigurationError',
    'MissingAPIKeyError',
    'ContractViolationError',
    'ProviderError',
    'ProviderTimeoutError',
    'TransportError',
    'ParseError',
    'StateTransitionError',
]
