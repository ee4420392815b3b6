"""
Base LLM provider interface
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional
from dataclasses import dataclass


@dataclass
class LLMResponse:
    """Standardized LLM response structure"""
    content: str
    model: str
    usage: Optional[Dict[str, int]] = None
    finish_reason: Optional[str] = None


class LLMProvider(ABC):
    """Abstract base class for LLM providers.

    One instance is built at startup and shared by every request, so
    ``generate`` must not keep per-call state on the provider.
    """

    def __init__(self, api_key: str, model: str, **kwargs):
        """Initialize LLM provider with API key and model configuration."""
        self.api_key = api_key
        self.model = model
        self.config = kwargs
        self.timeout = kwargs.get('timeout', 30)  # Default 30 second timeout

    @staticmethod
    def build_messages(prompt: str, system: Optional[str] = None) -> List[Dict[str, str]]:
        """Chat message list for a user prompt with an optional system instruction."""
        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})
        return messages

    @abstractmethod
    async def generate(self, prompt: str, system: Optional[str] = None, **kwargs) -> LLMResponse:
        """Generate response from LLM given input prompt."""
        pass

    @abstractmethod
    def validate_config(self) -> bool:
        """Validate provider configuration and credentials."""
        pass
