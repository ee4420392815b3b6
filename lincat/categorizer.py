"""
Categorization pipeline: raw input -> metadata -> verdict -> category -> stored link
"""
import asyncio
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from .category_resolver import CategoryResolver
from .classification_service import ClassificationService
from .config import Config
from .content_processor import ContentProcessor, URL_TITLE_MAX_LENGTH
from .exceptions import InvalidInputError, StorageError
from .heuristics import HeuristicClassifier
from .link_extractor import LinkExtractor
from .llm import LLMProviderFactory
from .logging_config import get_logger
from .metadata_extractor import MetadataExtractor
from .models import ClassificationVerdict, Link, LinkView
from .storage import Storage, create_storage

logger = get_logger("categorizer")

INVALID_INPUT_MESSAGE = "Input is required and must be a non-empty string"


@dataclass
class CategorizerDependencies:
    """Collaborators the pipeline needs, built once at startup"""
    storage: Storage
    extractor: MetadataExtractor
    heuristics: Optional[HeuristicClassifier]
    llm_classifier: ClassificationService
    resolver: CategoryResolver


class Categorizer:
    """Runs one submission through the categorization pipeline.

    Each call is independent and strictly sequential. Metadata and model
    failures degrade the result; storage failures propagate as StorageError
    and never leave a link without its category. Blocking storage calls run
    in worker threads.
    """

    def __init__(self, deps: CategorizerDependencies):
        self.deps = deps

    async def categorize(self, raw_input: Any, owner: str) -> LinkView:
        """Classify and store one submission, returning its public view."""
        if not isinstance(raw_input, str) or not raw_input.strip():
            raise InvalidInputError(INVALID_INPUT_MESSAGE)

        url = LinkExtractor.find_url(raw_input)
        if url:
            logger.info("Processing URL: %s", url)
            title, description = await self._describe_url(url)
        else:
            title = ContentProcessor.title_from_text(raw_input)
            description = raw_input

        existing = await asyncio.to_thread(self.deps.storage.list_category_names, owner)
        verdict = await self._classify(raw_input, title, description, existing)

        category_id = await asyncio.to_thread(self.deps.resolver.resolve, verdict, owner)
        link = await asyncio.to_thread(self.deps.storage.insert_link, Link(
            original_input=raw_input,
            title=title,
            description=description,
            url=url or "",
            category_id=category_id,
            ai_description=verdict.description,
            owner=owner,
        ))
        logger.info("Stored link %s under %r", link.id, verdict.category)

        return LinkView(
            id=link.id,
            original_input=link.original_input,
            title=link.title,
            description=link.description,
            url=link.url,
            category=verdict.category,
            ai_description=link.ai_description,
        )

    async def _describe_url(self, url: str) -> Tuple[str, str]:
        metadata = await self.deps.extractor.extract(url)
        title = metadata.title
        if not title:
            title = ContentProcessor.generate_title_from_url(url)
        title = ContentProcessor.truncate(
            ContentProcessor.normalize_whitespace(title), URL_TITLE_MAX_LENGTH
        )
        return title, metadata.description or url

    async def _classify(self, raw_input: str, title: str, description: str,
                        existing: list) -> ClassificationVerdict:
        if self.deps.heuristics is not None:
            verdict = self.deps.heuristics.classify(raw_input, title, description, existing)
            if verdict is not None:
                return verdict
        return await self.deps.llm_classifier.classify(raw_input, title, description, existing)

    async def handle_request(self, payload: Any, owner: str) -> Tuple[int, Dict[str, Any]]:
        """Transport-neutral categorize endpoint returning (status, body)."""
        raw_input = payload.get("input") if isinstance(payload, dict) else None
        try:
            link = await self.categorize(raw_input, owner)
        except InvalidInputError as e:
            return 400, {"error": str(e)}
        except StorageError as e:
            logger.error("Categorization failed: %s", e)
            return 500, {"error": "Failed to categorize content", "details": str(e)}
        return 200, {"success": True, "link": link.to_public_dict()}


def build_dependencies(config: Config, storage: Optional[Storage] = None) -> CategorizerDependencies:
    """Wire the pipeline's collaborators from configuration."""
    storage = storage or create_storage(config.storage)
    provider = LLMProviderFactory.from_config(config.llm)
    return CategorizerDependencies(
        storage=storage,
        extractor=MetadataExtractor(config.extractor),
        heuristics=HeuristicClassifier() if config.classification.use_heuristics else None,
        llm_classifier=ClassificationService(
            provider,
            config=config.llm,
            category_word_count=config.classification.category_word_count,
        ),
        resolver=CategoryResolver(storage),
    )


def build_categorizer(config: Config, storage: Optional[Storage] = None) -> Categorizer:
    return Categorizer(build_dependencies(config, storage))
