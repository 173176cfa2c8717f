"""
OpenAI-compatible API provider.

Works with any OpenAI-compatible API (OpenAI, OpenRouter, etc.)
"""

import time
from typing import Dict, Optional

import httpx
from openai import AsyncOpenAI

from content_validator.ai.base_provider import APIErrorContext, BaseProvider, Completion
from content_validator.config.constants import MAX_TOKENS, PROVIDER_TIMEOUT_SECONDS, TEMPERATURE
from content_validator.core.exceptions import MissingAPIKeyError
from content_validator.core.models import ProviderId


class OpenAIProvider(BaseProvider):
    """
    Provider for OpenAI-compatible APIs.

    Configuration is handled by the factory using config/providers.py registry.
    The client is created lazily on first call, so an unconfigured provider
    can be constructed (and substituted by the stub) without an API key.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str = None,
        provider_id: ProviderId = ProviderId.OPENAI,
        name: str = None,
        extra_headers: Dict[str, str] = None,
        timeout_seconds: float = PROVIDER_TIMEOUT_SECONDS,
        temperature: float = TEMPERATURE,
        max_tokens: int = MAX_TOKENS,
        client: Optional[AsyncOpenAI] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url
        self._provider_id = provider_id
        self._name = name or model or provider_id.value
        self.extra_headers = extra_headers or {}
        self.timeout_seconds = timeout_seconds
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._client = client

    @property
    def name(self) -> str:
        return self._name

    @property
    def provider_id(self) -> ProviderId:
        return self._provider_id

    @property
    def is_configured(self) -> bool:
        return self._client is not None or bool(self.api_key and self.model)

    def _create_client(self) -> AsyncOpenAI:
        """Create OpenAI client."""
        if not self.api_key:
            raise MissingAPIKeyError(
                f"No API key configured for {self._provider_id.value}",
                details={"provider": self._provider_id.value},
            )

        # Retries belong to the fallback controller, not the SDK
        client_kwargs = {
            "api_key": self.api_key,
            "timeout": httpx.Timeout(self.timeout_seconds, connect=min(5.0, self.timeout_seconds)),
            "max_retries": 0,
        }

        if self.base_url:
            client_kwargs["base_url"] = self.base_url

        if self.extra_headers:
            client_kwargs["default_headers"] = self.extra_headers

        return AsyncOpenAI(**client_kwargs)

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = self._create_client()
        return self._client

    # ==================== API CALLS ====================

    async def complete(self, prompt: str, system_prompt: Optional[str] = None) -> Completion:
        """Call chat completions in JSON mode and return the message text with usage."""
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        start_time = self._log_send(prompt)

        with APIErrorContext("validation call", self.name):
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                response_format={"type": "json_object"},
            )

        result = ""
        if response.choices:
            result = response.choices[0].message.content or ""

        usage = getattr(response, "usage", None)
        return self._log_call(
            prompt=prompt,
            response=result,
            duration_ms=(time.perf_counter() - start_time) * 1000,
            prompt_tokens=usage.prompt_tokens if usage else None,
            completion_tokens=usage.completion_tokens if usage else None,
        )
