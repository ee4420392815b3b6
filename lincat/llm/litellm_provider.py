"""
LiteLLM provider implementation
"""

from typing import Optional
import litellm
from .base import LLMProvider, LLMResponse


class LiteLLMProvider(LLMProvider):
    """LiteLLM-based LLM provider (Groq, OpenAI, OpenRouter, ...)"""

    def validate_config(self) -> bool:
        """Validate LiteLLM configuration including API key and model."""
        if not self.api_key:
            raise ValueError("API key is required for LiteLLM provider")

        if not self.model:
            raise ValueError("Model is required for LiteLLM provider")

        return True

    async def generate(self, prompt: str, system: Optional[str] = None, **kwargs) -> LLMResponse:
        """Generate response using LiteLLM with specified prompt and parameters."""
        self.validate_config()

        call_kwargs = {
            "temperature": 0.3,
            "max_tokens": 150,
            **kwargs
        }
        if "base_url" in self.config:
            call_kwargs["api_base"] = self.config["base_url"]

        try:
            response = await litellm.acompletion(
                model=self.model,
                messages=self.build_messages(prompt, system),
                api_key=self.api_key,
                timeout=self.timeout,
                **call_kwargs
            )

            choice = response.choices[0]
            usage = None
            if hasattr(response, 'usage') and response.usage:
                usage = {
                    "prompt_tokens": getattr(response.usage, 'prompt_tokens', 0),
                    "completion_tokens": getattr(response.usage, 'completion_tokens', 0),
                    "total_tokens": getattr(response.usage, 'total_tokens', 0)
                }

            return LLMResponse(
                content=choice.message.content or "",
                model=self.model,
                usage=usage,
                finish_reason=getattr(choice, 'finish_reason', None)
            )

        except Exception as e:
            raise RuntimeError(f"LiteLLM generation failed: {e}") from e
