"""
Configuration management for the content validator.

All configuration comes from environment variables or .env file.
Nothing is required: a provider without a key is simply treated as
unconfigured and replaced by the local stub at call time.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from content_validator.config import constants


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CONTENT_VALIDATOR_",
        case_sensitive=False,
        extra="ignore",
    )

    # API Keys
    openai_api_key: str = ""
    gemini_api_key: str = ""
    openrouter_api_key: str = ""

    # Models
    openai_model: str = constants.OPENAI_DEFAULT_MODEL
    gemini_model: str = constants.GEMINI_DEFAULT_MODEL
    openrouter_model: Optional[str] = None

    # Dual validation slots
    llm1_provider: str = "openai"
    llm2_provider: str = "gemini"

    # Provider calls
    provider_timeout_seconds: float = Field(constants.PROVIDER_TIMEOUT_SECONDS, ge=1.0, le=60.0)
    provider_max_retries: int = Field(constants.PROVIDER_MAX_RETRIES, ge=0, le=1)
    retry_wait_seconds: float = Field(constants.RETRY_WAIT_SECONDS, ge=0.0)
    temperature: float = Field(constants.TEMPERATURE, ge=0.0, le=2.0)
    max_tokens: int = Field(constants.MAX_TOKENS, gt=0)

    # Thresholds
    agreement_tolerance: float = Field(constants.AGREEMENT_TOLERANCE, ge=0.0, le=1.0)
    single_source_confidence: float = Field(constants.SINGLE_SOURCE_CONFIDENCE, ge=0.0, le=1.0)
    stub_confidence: float = Field(constants.STUB_CONFIDENCE, ge=0.0, le=1.0)

    # Guardrails
    guardrails_enabled: bool = True

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None
    log_json: bool = False

    # Validators
    @field_validator("llm1_provider", "llm2_provider")
    @classmethod
    def validate_slot_provider(cls, v: str) -> str:
        """Validate slot provider is a supported value."""
        from content_validator.config.providers import PROVIDER_REGISTRY

        if v.lower() not in PROVIDER_REGISTRY:
            raise ValueError(f"provider must be one of: {', '.join(PROVIDER_REGISTRY)}")
        return v.lower()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        levels = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in levels:
            raise ValueError(f"log_level must be one of: {', '.join(sorted(levels))}")
        return v.upper()


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def reload_settings() -> Settings:
    """Reload settings from environment."""
    get_settings.cache_clear()
    return get_settings()
