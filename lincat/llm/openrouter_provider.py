"""
OpenRouter direct provider implementation
"""

from typing import Optional

import aiohttp
from .base import LLMProvider, LLMResponse


class OpenRouterProvider(LLMProvider):
    """OpenRouter direct API provider.

    Each ``generate`` call opens and closes its own HTTP session, so one
    provider instance can serve overlapping requests.
    """

    BASE_URL = "https://openrouter.ai/api/v1"

    def validate_config(self) -> bool:
        """Validate OpenRouter configuration including API key and model."""
        if not self.api_key:
            raise ValueError("API key is required for OpenRouter provider")

        if not self.model:
            raise ValueError("Model is required for OpenRouter provider")

        return True

    async def generate(self, prompt: str, system: Optional[str] = None, **kwargs) -> LLMResponse:
        """Generate response using OpenRouter direct API with specified prompt."""
        self.validate_config()

        call_kwargs = {
            "temperature": 0.3,
            "max_tokens": 150,
            **kwargs
        }

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": self.config.get("referer", "https://github.com/lincat"),
            "X-Title": self.config.get("title", "Lincat")
        }

        # OpenRouter model ids carry no routing prefix
        model = self.model.removeprefix("openrouter/")
        payload = {
            "model": model,
            "messages": self.build_messages(prompt, system),
            **call_kwargs
        }
        base_url = self.config.get("base_url", self.BASE_URL).rstrip("/")

        try:
            async with aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            ) as session:
                async with session.post(
                    f"{base_url}/chat/completions",
                    headers=headers,
                    json=payload
                ) as response:
                    response.raise_for_status()
                    data = await response.json()

            choice = data["choices"][0]
            return LLMResponse(
                content=choice["message"].get("content") or "",
                model=data.get("model", model),
                usage=data.get("usage"),
                finish_reason=choice.get("finish_reason")
            )

        except aiohttp.ClientError as e:
            raise RuntimeError(f"OpenRouter API request failed: {e}") from e
        except Exception as e:
            raise RuntimeError(f"OpenRouter generation failed: {e}") from e
