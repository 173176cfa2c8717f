"""
Custom exception hierarchy for the content validator.

Provider failures never leave the engine: they are converted into stub
verdicts by the fallback controller. The only error a caller sees is a
ContractViolationError for misuse of the engine itself.
"""


class ContentValidatorError(Exception):
    """
    Base exception for all content validator errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(self, message: str, details: dict | None = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional error context
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# ==================== Configuration Errors ====================

class ConfigurationError(ContentValidatorError):
    """
    No usable credential or endpoint for a provider.

    Permanent: never retried.
    """
    pass


class MissingAPIKeyError(ConfigurationError):
    """Raised when a required API key is not configured."""
    pass


# ==================== Caller Errors ====================

class ContractViolationError(ContentValidatorError):
    """
    Raised when the engine is called with structurally invalid input.

    Reported immediately, before any provider is contacted.
    """
    pass


# ==================== Provider Errors ====================

class ProviderError(ContentValidatorError):
    """
    Base error for provider call failures.

    Attributes:
        retryable: Whether the fallback controller may retry the call
    """
    retryable: bool = False


class ProviderTimeoutError(ProviderError):
    """Raised when a provider call exceeds its time budget."""
    retryable = True


class TransportError(ProviderError):
    """Raised on network failures, rate limiting and 5xx responses."""
    retryable = True


class ParseError(ProviderError):
    """Raised when a response does not satisfy the mandated JSON schema."""
    pass


# ==================== Workflow Errors ====================

class StateTransitionError(ContentValidatorError):
    """Raised when the orchestrator attempts an illegal phase transition."""
    pass
