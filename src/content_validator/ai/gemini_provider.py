"""
Google Gemini API provider.

Handles communication with Google's Gemini models through the async
client of the google-genai SDK.
"""

import time
from typing import Optional

from google import genai
from google.genai import types

from content_validator.ai.base_provider import APIErrorContext, BaseProvider, Completion
from content_validator.config.constants import (
    GEMINI_DEFAULT_MODEL,
    MAX_TOKENS,
    PROVIDER_TIMEOUT_SECONDS,
    TEMPERATURE,
)
from content_validator.core.exceptions import MissingAPIKeyError
from content_validator.core.models import ProviderId


class GeminiProvider(BaseProvider):
    """
    Provider for Google Gemini API interactions.

    The system prompt is passed as system_instruction and JSON output is
    requested through response_mime_type.
    """

    def __init__(
        self,
        api_key: str = "",
        model: str = GEMINI_DEFAULT_MODEL,
        timeout_seconds: float = PROVIDER_TIMEOUT_SECONDS,
        temperature: float = TEMPERATURE,
        max_tokens: int = MAX_TOKENS,
        client: Optional[genai.Client] = None,
    ):
        """
        Initialize Gemini provider.

        Args:
            api_key: Google API key; empty means unconfigured
            model: Model for text operations
            timeout_seconds: HTTP timeout handed to the SDK
            temperature: Sampling temperature
            max_tokens: Maximum output tokens
            client: Pre-built client (tests)
        """
        self.api_key = api_key
        self.model = model
        self.timeout_seconds = timeout_seconds
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._client = client

    @property
    def name(self) -> str:
        return self.model or "Gemini"

    @property
    def provider_id(self) -> ProviderId:
        return ProviderId.GEMINI

    @property
    def is_configured(self) -> bool:
        return self._client is not None or bool(self.api_key and self.model)

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            if not self.api_key:
                raise MissingAPIKeyError(
                    "No API key configured for GEMINI",
                    details={"provider": ProviderId.GEMINI.value},
                )
            self._client = genai.Client(
                api_key=self.api_key,
                # HttpOptions.timeout is in milliseconds
                http_options=types.HttpOptions(timeout=int(self.timeout_seconds * 1000)),
            )
        return self._client

    async def complete(self, prompt: str, system_prompt: Optional[str] = None) -> Completion:
        """
        Call the text API.

        Args:
            prompt: User prompt
            system_prompt: System instruction (optional)

        Returns:
            Completion with the response text and token counts
        """
        config = types.GenerateContentConfig(
            system_instruction=system_prompt or None,
            temperature=self.temperature,
            max_output_tokens=self.max_tokens,
            response_mime_type="application/json",
        )

        start_time = self._log_send(prompt)

        with APIErrorContext("validation call", self.name):
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
                config=config,
            )

        result = response.text or ""

        # Extract token usage
        prompt_tokens = None
        completion_tokens = None
        usage = getattr(response, "usage_metadata", None)
        if usage:
            prompt_tokens = getattr(usage, "prompt_token_count", None)
            completion_tokens = getattr(usage, "candidates_token_count", None)

        return self._log_call(
            prompt=prompt,
            response=result,
            duration_ms=(time.perf_counter() - start_time) * 1000,
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
        )
