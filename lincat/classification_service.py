"""
Language-model categorization with a strict parse-or-fallback contract
"""
import asyncio
import json
from typing import List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, StrictBool, StrictStr, ValidationError

from .config import LLMConfig
from .heuristics import HeuristicClassifier
from .llm import LLMProvider
from .logging_config import get_logger
from .models import ClassificationVerdict, ParseFailure, ParseResult

logger = get_logger("classification")

CATEGORY_NAME_MAX_LENGTH = 50

_NUMBER_WORDS = {1: "one", 2: "two", 3: "three", 4: "four"}


class _VerdictPayload(BaseModel):
    """Exact shape the model is asked to reply with"""

    model_config = ConfigDict(extra="forbid")

    category: StrictStr
    description: StrictStr
    isNew: StrictBool


def parse_verdict(response_text: Optional[str], existing_categories: Sequence[str]) -> ParseResult:
    """Read a model reply as a verdict. Never raises.

    The outermost JSON object in the reply must carry exactly ``category``,
    ``description`` and ``isNew``. A name matching an existing category
    case-insensitively is mapped to that category's canonical spelling, and
    ``is_new`` is recomputed against ``existing_categories``.
    """
    if not response_text or not response_text.strip():
        return ParseFailure(reason="empty response", raw=response_text or "")

    json_start = response_text.find('{')
    json_end = response_text.rfind('}') + 1
    if json_start == -1 or json_end <= json_start:
        return ParseFailure(reason="no JSON object in response", raw=response_text)

    try:
        payload = _VerdictPayload.model_validate_json(response_text[json_start:json_end])
    except ValidationError as e:
        return ParseFailure(reason=f"invalid verdict: {e.error_count()} error(s)", raw=response_text)

    name = " ".join(payload.category.split()).strip("\"'")
    if not name:
        return ParseFailure(reason="empty category name", raw=response_text)
    name = name[:CATEGORY_NAME_MAX_LENGTH].rstrip()

    canonical = {existing.lower(): existing for existing in existing_categories}
    name = canonical.get(name.lower(), name)
    is_new = name not in canonical.values()

    if payload.isNew != is_new:
        logger.debug("Model isNew=%s disagrees for %r; using %s", payload.isNew, name, is_new)

    return ClassificationVerdict(
        category=name,
        description=" ".join(payload.description.split()),
        is_new=is_new,
    )


class ClassificationService:
    """Categorizes content with a language model, falling back to a default bucket"""

    def __init__(
        self,
        llm_provider: Optional[LLMProvider] = None,
        config: Optional[LLMConfig] = None,
        category_word_count: int = 2,
    ):
        """Initialize with an LLM provider; without one every call falls back."""
        self.llm_provider = llm_provider
        self.config = config or LLMConfig()
        self.category_word_count = category_word_count

        if self.llm_provider is None:
            logger.warning("No LLM provider configured; using default categories only")

    def get_system_prompt(self, existing_categories: Sequence[str]) -> str:
        """System instruction: existing categories and the reply format."""
        if existing_categories:
            existing = "\n".join(f"- {name}" for name in existing_categories)
        else:
            existing = "(none yet)"
        words = _NUMBER_WORDS.get(self.category_word_count, str(self.category_word_count))
        return f"""You sort a user's saved links and notes into categories.

Existing categories:
{existing}

Rules:
1. If the content fits an existing category, use that exact name and set "isNew" to false.
2. Otherwise invent a new category name of exactly {words} words in Title Case and set "isNew" to true.
3. "description" is one short sentence summarizing the content.
4. Reply with only a JSON object, no other text:
{{"category": "<name>", "description": "<summary>", "isNew": <true|false>}}"""

    def get_user_prompt(self, raw_input: str, title: str, description: str) -> str:
        """User message carrying the submission and its metadata."""
        return f"""Input: {raw_input[:2000]}
Title: {title}
Description: {description[:1000]}"""

    async def classify(
        self,
        raw_input: str,
        title: str,
        description: str,
        existing_categories: List[str],
    ) -> ClassificationVerdict:
        """Classify content with the model. Never raises."""
        if self.llm_provider is None:
            return HeuristicClassifier.default_verdict(raw_input, title, existing_categories)

        try:
            response = await asyncio.wait_for(
                self._generate(raw_input, title, description, existing_categories),
                timeout=self.config.timeout,
            )
        except asyncio.TimeoutError:
            logger.warning("Classification timed out after %.1fs", self.config.timeout)
            return HeuristicClassifier.default_verdict(raw_input, title, existing_categories)
        except Exception as e:
            logger.warning("Classification failed: %s", e)
            return HeuristicClassifier.default_verdict(raw_input, title, existing_categories)

        result = parse_verdict(response, existing_categories)
        if isinstance(result, ParseFailure):
            logger.warning("Unusable model reply (%s): %.200r", result.reason, result.raw)
            return HeuristicClassifier.default_verdict(raw_input, title, existing_categories)

        logger.info("Model chose %r (new=%s)", result.category, result.is_new)
        return result

    async def _generate(
        self,
        raw_input: str,
        title: str,
        description: str,
        existing_categories: List[str],
    ) -> str:
        # The provider is shared by concurrent requests
        response = await self.llm_provider.generate(
            self.get_user_prompt(raw_input, title, description),
            system=self.get_system_prompt(existing_categories),
            temperature=self.config.temperature,
            max_tokens=self.config.max_tokens,
        )
        return response.content
