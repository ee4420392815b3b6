"""
Text-generation providers used by the classifier.

``LLMProviderFactory.from_config`` builds the provider named in the ``llm``
config section, or returns None when no API key is available.
"""

from .base import LLMProvider, LLMResponse
from .factory import LLMProviderFactory, LLMProviderType

__all__ = [
    "LLMProvider",
    "LLMResponse",
    "LLMProviderFactory",
    "LLMProviderType",
]
