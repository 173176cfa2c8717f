"""
Provider registry and configuration.

All provider-specific settings in one place.
No hardcoded values in provider classes.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from content_validator.core.models import ProviderId


@dataclass
class ProviderConfig:
    """Configuration for a single AI provider."""
    provider_id: ProviderId
    api_key: str = ""
    base_url: Optional[str] = None
    model: Optional[str] = None
    extra_headers: Dict[str, str] = field(default_factory=dict)

    @property
    def is_configured(self) -> bool:
        """A provider is usable only with both a key and a model."""
        return bool(self.api_key and self.model)


# Provider metadata - defines how to create each provider
PROVIDER_REGISTRY: Dict[str, Dict[str, Any]] = {
    "openai": {
        "provider_id": ProviderId.OPENAI,
        "api_key_attr": "openai_api_key",
        "model_attr": "openai_model",
        "base_url": None,  # Default OpenAI API
    },
    "gemini": {
        "provider_id": ProviderId.GEMINI,
        "api_key_attr": "gemini_api_key",
        "model_attr": "gemini_model",
        "requires_native": True,  # Uses google-genai, not OpenAI-compatible
    },
    "openrouter": {
        "provider_id": ProviderId.OPENROUTER,
        "api_key_attr": "openrouter_api_key",
        "model_attr": "openrouter_model",
        "base_url": "https://openrouter.ai/api/v1",
        "extra_headers": {"X-Title": "Content-Validator"},
    },
}


def get_provider_config(provider_name: str, settings) -> ProviderConfig:
    """
    Build ProviderConfig from settings for a given provider.

    Args:
        provider_name: Name of provider (e.g., "openai", "gemini")
        settings: Settings instance

    Returns:
        ProviderConfig with all settings populated
    """
    registry = PROVIDER_REGISTRY.get(provider_name.lower())
    if not registry:
        raise ValueError(f"Unknown provider: {provider_name}. Available: {list(PROVIDER_REGISTRY.keys())}")

    return ProviderConfig(
        provider_id=registry["provider_id"],
        api_key=getattr(settings, registry["api_key_attr"], "") or "",
        base_url=registry.get("base_url"),
        model=getattr(settings, registry["model_attr"], None),
        extra_headers=dict(registry.get("extra_headers", {})),
    )
