"""
Shared test fixtures for the categorization pipeline tests
"""

from typing import Dict, List, Optional
from unittest.mock import AsyncMock

from lincat.categorizer import Categorizer, CategorizerDependencies
from lincat.category_resolver import CategoryResolver
from lincat.classification_service import ClassificationService
from lincat.heuristics import HeuristicClassifier
from lincat.llm.base import LLMProvider, LLMResponse
from lincat.metadata_extractor import MetadataExtractor
from lincat.models import PageMetadata
from lincat.storage import SQLiteStorage


SAMPLE_HTML = """
<html>
  <head>
    <title>  Widgets &amp; Gadgets
      Handbook </title>
    <meta name="description" content="Everything about widgets.">
    <meta property="og:title" content="OG Widgets">
    <meta property="og:description" content="OG description">
  </head>
  <body>
    <h1>Widgets Heading</h1>
    <p>First paragraph text.</p>
  </body>
</html>
"""


class FakeLLMProvider(LLMProvider):
    """Returns canned replies (or raises) and records prompts"""

    def __init__(self, replies: Optional[List[str]] = None, error: Optional[Exception] = None):
        super().__init__(api_key="test_key", model="test_model")
        self.replies = list(replies or [])
        self.error = error
        self.calls: List[Dict] = []

    def validate_config(self) -> bool:
        return True

    async def generate(self, prompt: str, system: Optional[str] = None, **kwargs) -> LLMResponse:
        self.calls.append({"prompt": prompt, "system": system, **kwargs})
        if self.error is not None:
            raise self.error
        content = self.replies.pop(0) if self.replies else ""
        return LLMResponse(content=content, model=self.model)


def create_mock_extractor(metadata: Optional[PageMetadata] = None) -> MetadataExtractor:
    """MetadataExtractor whose extract() returns fixed metadata without I/O"""
    extractor = MetadataExtractor()
    extractor.extract = AsyncMock(return_value=metadata or PageMetadata())
    return extractor


def verdict_json(category: str, description: str = "Test summary", is_new: bool = True) -> str:
    return (
        '{"category": "%s", "description": "%s", "isNew": %s}'
        % (category, description, "true" if is_new else "false")
    )


def create_categorizer(
    storage=None,
    provider: Optional[LLMProvider] = None,
    metadata: Optional[PageMetadata] = None,
    use_heuristics: bool = True,
) -> Categorizer:
    """Categorizer over in-memory SQLite with mocked network and model"""
    storage = storage or SQLiteStorage(":memory:")
    deps = CategorizerDependencies(
        storage=storage,
        extractor=create_mock_extractor(metadata),
        heuristics=HeuristicClassifier() if use_heuristics else None,
        llm_classifier=ClassificationService(provider),
        resolver=CategoryResolver(storage),
    )
    return Categorizer(deps)
