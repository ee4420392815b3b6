"""
Tests for LLM providers
"""

import os
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from lincat.config import LLMConfig
from lincat.llm.base import LLMProvider, LLMResponse
from lincat.llm.factory import LLMProviderFactory, LLMProviderType
from lincat.llm.litellm_provider import LiteLLMProvider
from lincat.llm.openrouter_provider import OpenRouterProvider


class TestLLMResponse:
    """Test LLMResponse dataclass"""

    def test_llm_response_defaults(self):
        """Test LLMResponse with default values"""
        response = LLMResponse(content="Test", model="test")

        assert response.usage is None
        assert response.finish_reason is None


class TestLLMProvider:
    """Test base LLMProvider class"""

    def test_abstract_methods(self):
        """Test that base class requires implementation of abstract methods"""
        with pytest.raises(TypeError):
            LLMProvider("test_key", "test_model")

    def test_build_messages_with_system(self):
        messages = LLMProvider.build_messages("hello", system="be brief")

        assert messages == [
            {"role": "system", "content": "be brief"},
            {"role": "user", "content": "hello"},
        ]

    def test_build_messages_without_system(self):
        assert LLMProvider.build_messages("hello") == [{"role": "user", "content": "hello"}]


class TestLiteLLMProvider:
    """Test LiteLLM provider"""

    def test_initialization(self):
        provider = LiteLLMProvider("test_key", "test_model", timeout=12)

        assert provider.api_key == "test_key"
        assert provider.model == "test_model"
        assert provider.timeout == 12

    def test_validate_config_missing_key(self):
        provider = LiteLLMProvider("", "test_model")

        with pytest.raises(ValueError, match="API key is required"):
            provider.validate_config()

    def test_validate_config_missing_model(self):
        provider = LiteLLMProvider("test_key", "")

        with pytest.raises(ValueError, match="Model is required"):
            provider.validate_config()

    @patch('litellm.acompletion')
    async def test_generate_success(self, mock_acompletion):
        """Test successful generation passes system + user messages"""
        mock_response = MagicMock()
        mock_choice = MagicMock()
        mock_choice.message.content = "Generated response"
        mock_choice.finish_reason = "stop"
        mock_response.choices = [mock_choice]
        mock_response.usage.prompt_tokens = 10
        mock_response.usage.completion_tokens = 5
        mock_response.usage.total_tokens = 15
        mock_acompletion.return_value = mock_response

        provider = LiteLLMProvider("test_key", "test_model")
        response = await provider.generate("Test prompt", system="System text", max_tokens=100)

        assert response.content == "Generated response"
        assert response.usage == {"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15}
        assert response.finish_reason == "stop"

        mock_acompletion.assert_called_once_with(
            model="test_model",
            messages=[
                {"role": "system", "content": "System text"},
                {"role": "user", "content": "Test prompt"},
            ],
            api_key="test_key",
            timeout=30,
            temperature=0.3,
            max_tokens=100,
        )

    @patch('litellm.acompletion')
    async def test_generate_none_content(self, mock_acompletion):
        mock_response = MagicMock()
        mock_response.choices = [MagicMock()]
        mock_response.choices[0].message.content = None
        mock_response.usage = None
        mock_acompletion.return_value = mock_response

        response = await LiteLLMProvider("test_key", "test_model").generate("x")

        assert response.content == ""
        assert response.usage is None

    @patch('litellm.acompletion')
    async def test_generate_failure_wrapped(self, mock_acompletion):
        mock_acompletion.side_effect = Exception("rate limited")

        with pytest.raises(RuntimeError, match="LiteLLM generation failed"):
            await LiteLLMProvider("test_key", "test_model").generate("x")


class TestOpenRouterProvider:
    """Test OpenRouter provider"""

    def test_initialization(self):
        provider = OpenRouterProvider("test_key", "openai/gpt-4o-mini")

        assert provider.api_key == "test_key"
        assert provider.config == {}

    def test_validate_config_missing_key(self):
        with pytest.raises(ValueError, match="API key is required"):
            OpenRouterProvider("", "gpt-4").validate_config()

    @patch('aiohttp.ClientSession.post')
    async def test_generate_success(self, mock_post):
        """Test successful generation with OpenRouter"""
        mock_response = MagicMock()
        mock_response.raise_for_status.return_value = None
        mock_response.json = AsyncMock(return_value={
            "choices": [{"message": {"content": "Generated response"}, "finish_reason": "stop"}],
            "model": "openai/gpt-4o-mini",
            "usage": {"prompt_tokens": 10, "completion_tokens": 5}
        })
        mock_post.return_value.__aenter__.return_value = mock_response

        provider = OpenRouterProvider("test_key", "openrouter/openai/gpt-4o-mini")

        response = await provider.generate("Test prompt", system="System text")

        assert response.content == "Generated response"
        assert response.model == "openai/gpt-4o-mini"
        assert response.finish_reason == "stop"

        assert mock_post.call_args.args[0] == "https://openrouter.ai/api/v1/chat/completions"
        payload = mock_post.call_args.kwargs["json"]
        assert payload["model"] == "openai/gpt-4o-mini"
        assert payload["messages"][0] == {"role": "system", "content": "System text"}
        assert payload["temperature"] == 0.3


class TestLLMProviderFactory:
    """Test LLM provider factory"""

    def test_create_litellm_provider(self):
        provider = LLMProviderFactory.create_provider(LLMProviderType.LITELLM, "test_key", "gpt-4")

        assert isinstance(provider, LiteLLMProvider)

    def test_create_openrouter_provider(self):
        provider = LLMProviderFactory.create_provider(LLMProviderType.OPENROUTER, "test_key", "gpt-4")

        assert isinstance(provider, OpenRouterProvider)

    def test_create_unknown_provider(self):
        with pytest.raises(ValueError, match="Unknown provider type"):
            LLMProviderFactory.create_provider("unknown", "test_key", "gpt-4")

    @patch.dict(os.environ, {"GROQ_API_KEY": "groq_key"})
    def test_from_config(self):
        config = LLMConfig(model="groq/llama-3.1-8b-instant", timeout=7)
        provider = LLMProviderFactory.from_config(config)

        assert isinstance(provider, LiteLLMProvider)
        assert provider.api_key == "groq_key"
        assert provider.model == "groq/llama-3.1-8b-instant"
        assert provider.timeout == 7

    @patch.dict(os.environ, {"OPENROUTER_API_KEY": "or_key"})
    def test_from_config_openrouter(self):
        config = LLMConfig(provider="openrouter", api_key_env="OPENROUTER_API_KEY")

        assert isinstance(LLMProviderFactory.from_config(config), OpenRouterProvider)

    @patch.dict(os.environ, {}, clear=True)
    def test_from_config_without_key_returns_none(self):
        assert LLMProviderFactory.from_config(LLMConfig()) is None

    def test_from_config_invalid_provider(self):
        with pytest.raises(ValueError, match="Invalid provider type"):
            LLMProviderFactory.from_config(LLMConfig(provider="invalid"))

    @patch.dict(os.environ, {"GROQ_API_KEY": "test_key", "LLM_MODEL": "gpt-4", "LLM_PROVIDER": "openrouter"})
    def test_from_env(self):
        provider = LLMProviderFactory.from_env()

        assert isinstance(provider, OpenRouterProvider)
        assert provider.model == "gpt-4"

    @patch.dict(os.environ, {"LLM_PROVIDER": "litellm"}, clear=True)
    def test_from_env_missing_api_key(self):
        with pytest.raises(ValueError, match="GROQ_API_KEY is required"):
            LLMProviderFactory.from_env()
