"""
AI provider implementations for the content validator.

Supports multiple AI backends:
- OpenAI (and OpenAI-compatible APIs such as OpenRouter)
- Google Gemini
- a local deterministic stub used as fallback

Usage:
    from content_validator.ai import create_comparison_provider

    comparison = create_comparison_provider()
    outcome = await comparison.run(prompt, content, rubric)
"""

# Lazy imports to avoid loading vendor SDKs until needed
__all__ = [
    "OpenAIProvider",
    "GeminiProvider",
    "StubProvider",
    "ComparisonProvider",
    "create_ai_provider",
    "create_comparison_provider",
    "get_available_providers",
]


def OpenAIProvider(*args, **kwargs):
    """Create an OpenAI provider instance (lazy import)."""
    from .openai_provider import OpenAIProvider as _OpenAIProvider
    return _OpenAIProvider(*args, **kwargs)


def GeminiProvider(*args, **kwargs):
    """Create a Gemini provider instance (lazy import)."""
    from .gemini_provider import GeminiProvider as _GeminiProvider
    return _GeminiProvider(*args, **kwargs)


def StubProvider(*args, **kwargs):
    """Create the local stub provider (lazy import)."""
    from .stub_provider import StubProvider as _StubProvider
    return _StubProvider(*args, **kwargs)


def ComparisonProvider(*args, **kwargs):
    """Create a comparison provider for dual-LLM validation (lazy import)."""
    from .comparison_provider import ComparisonProvider as _ComparisonProvider
    return _ComparisonProvider(*args, **kwargs)


def create_ai_provider(*args, **kwargs):
    """Create an AI provider based on configuration (lazy import)."""
    from .provider_factory import create_ai_provider as _create_ai_provider
    return _create_ai_provider(*args, **kwargs)


def create_comparison_provider(*args, **kwargs):
    """Create a comparison provider for dual-LLM mode (lazy import)."""
    from .provider_factory import create_comparison_provider as _create_comparison_provider
    return _create_comparison_provider(*args, **kwargs)


def get_available_providers(*args, **kwargs):
    """Get list of available providers based on configured API keys (lazy import)."""
    from .provider_factory import get_available_providers as _get_available_providers
    return _get_available_providers(*args, **kwargs)
