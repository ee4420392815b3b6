"""
LLM Provider Factory
"""

import os
from typing import Optional
from enum import Enum
from ..config import LLMConfig
from .base import LLMProvider
from .litellm_provider import LiteLLMProvider
from .openrouter_provider import OpenRouterProvider


class LLMProviderType(Enum):
    """Available LLM provider types"""
    LITELLM = "litellm"
    OPENROUTER = "openrouter"


class LLMProviderFactory:
    """Factory for creating LLM providers"""

    PROVIDERS = {
        LLMProviderType.LITELLM: LiteLLMProvider,
        LLMProviderType.OPENROUTER: OpenRouterProvider,
    }

    @classmethod
    def create_provider(
        cls,
        provider_type: LLMProviderType,
        api_key: str,
        model: str,
        **kwargs
    ) -> LLMProvider:
        """Create an LLM provider instance"""
        if provider_type not in cls.PROVIDERS:
            raise ValueError(f"Unknown provider type: {provider_type}")

        provider_class = cls.PROVIDERS[provider_type]
        return provider_class(api_key=api_key, model=model, **kwargs)

    @classmethod
    def from_config(cls, config: LLMConfig) -> Optional[LLMProvider]:
        """Create provider from the llm config section.

        The API key is read from the environment variable named by
        ``config.api_key_env``. Returns None when that variable is unset so
        callers can run without a model.
        """
        try:
            provider_type = LLMProviderType(config.provider.lower())
        except ValueError:
            raise ValueError(f"Invalid provider type in config: {config.provider}")

        api_key = os.getenv(config.api_key_env)
        if not api_key:
            return None

        extra_config = {"timeout": config.timeout}
        if provider_type == LLMProviderType.OPENROUTER:
            if referer := os.getenv("OPENROUTER_REFERER"):
                extra_config["referer"] = referer
            if title := os.getenv("OPENROUTER_TITLE"):
                extra_config["title"] = title

        return cls.create_provider(provider_type, api_key, config.model, **extra_config)

    @classmethod
    def from_env(
        cls,
        provider_env_var: str = "LLM_PROVIDER",
        api_key_env_var: str = "GROQ_API_KEY",
        model_env_var: str = "LLM_MODEL",
        default_provider: LLMProviderType = LLMProviderType.LITELLM
    ) -> LLMProvider:
        """Create provider from environment variables"""
        provider_str = os.getenv(provider_env_var, default_provider.value).lower()

        try:
            provider_type = LLMProviderType(provider_str)
        except ValueError:
            raise ValueError(f"Invalid provider type in {provider_env_var}: {provider_str}")

        api_key = os.getenv(api_key_env_var)
        if not api_key:
            raise ValueError(f"Environment variable {api_key_env_var} is required")

        model = os.getenv(model_env_var, LLMConfig.model)

        return cls.create_provider(provider_type, api_key, model)
