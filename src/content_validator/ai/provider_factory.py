"""
Factory for creating AI provider instances.

Uses registry-based configuration for easy extensibility. Missing keys
are not an error here: the provider is built unconfigured and the
fallback controller substitutes the stub when it is called.
"""

from typing import Any, Dict, List, Tuple

from content_validator.ai.base_provider import BaseProvider
from content_validator.ai.comparison_provider import ComparisonProvider
from content_validator.ai.fallback import FallbackPolicy
from content_validator.ai.gemini_provider import GeminiProvider
from content_validator.ai.openai_provider import OpenAIProvider
from content_validator.ai.stub_provider import StubProvider
from content_validator.config.providers import PROVIDER_REGISTRY, get_provider_config
from content_validator.config.settings import Settings, get_settings


def create_ai_provider(provider_type: str, settings: Settings = None) -> BaseProvider:
    """
    Create an AI provider instance.

    Args:
        provider_type: Registry name ("openai", "gemini", "openrouter")
        settings: Settings instance (default: cached settings)

    Returns:
        Provider instance, possibly unconfigured
    """
    settings = settings or get_settings()
    provider_type = provider_type.lower()

    if provider_type not in PROVIDER_REGISTRY:
        raise ValueError(f"Unknown provider: {provider_type}. Available: {list(PROVIDER_REGISTRY.keys())}")

    config = get_provider_config(provider_type, settings)

    # Gemini uses native client
    if PROVIDER_REGISTRY[provider_type].get("requires_native"):
        return GeminiProvider(
            api_key=config.api_key,
            model=config.model,
            timeout_seconds=settings.provider_timeout_seconds,
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
        )

    # All other providers use OpenAI-compatible API
    return OpenAIProvider(
        api_key=config.api_key,
        model=config.model,
        base_url=config.base_url,
        provider_id=config.provider_id,
        name=f"{provider_type}/{config.model}" if config.model else provider_type,
        extra_headers=config.extra_headers,
        timeout_seconds=settings.provider_timeout_seconds,
        temperature=settings.temperature,
        max_tokens=settings.max_tokens,
    )


def get_provider_status(settings: Settings = None) -> Dict[str, Dict[str, Any]]:
    """Configuration status of every registered provider (keys are never included)."""
    settings = settings or get_settings()
    status = {}
    for name in PROVIDER_REGISTRY:
        config = get_provider_config(name, settings)
        status[name] = {
            "provider_id": config.provider_id.value,
            "model": config.model,
            "configured": config.is_configured,
            "slot_a": settings.llm1_provider == name,
            "slot_b": settings.llm2_provider == name,
        }
    return status


def get_available_providers(settings: Settings = None) -> List[str]:
    """Get providers with configured API keys."""
    return [name for name, info in get_provider_status(settings).items() if info["configured"]]


def create_comparison_provider(
    settings: Settings = None,
    progress_callback: callable = None,
) -> ComparisonProvider:
    """
    Create a comparison provider with two LLMs.

    Slots come from CONTENT_VALIDATOR_LLM1_PROVIDER and
    CONTENT_VALIDATOR_LLM2_PROVIDER.
    """
    settings = settings or get_settings()
    providers: List[Tuple[str, BaseProvider]] = []

    for llm_num in [1, 2]:
        provider_name = getattr(settings, f"llm{llm_num}_provider")
        provider = create_ai_provider(provider_name, settings)
        # Use LLM1/LLM2 prefix to distinguish providers even if same model
        display_name = f"LLM{llm_num}: {provider.name}"
        providers.append((display_name, provider))

    return ComparisonProvider(
        providers,
        stub=StubProvider(),
        policy=FallbackPolicy.from_settings(settings),
        progress_callback=progress_callback,
    )
