"""
Data models for categories, links and classification verdicts
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Union
import uuid

from pydantic import BaseModel, ConfigDict, Field


def utc_now() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


def new_id() -> str:
    return str(uuid.uuid4())


class Category(BaseModel):
    """A named bucket of links owned by one user"""

    id: str = Field(default_factory=new_id)
    name: str
    owner: str
    created_at: str = Field(default_factory=utc_now)


class CategorySummary(Category):
    """Category with the number of links filed under it"""

    link_count: int = Field(ge=0, default=0)


class Link(BaseModel):
    """A categorized submission. Immutable once stored."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    original_input: str
    title: str = ""
    description: str = ""
    url: str = ""
    category_id: str
    ai_description: str = ""
    owner: str
    created_at: str = Field(default_factory=utc_now)


class LinkView(BaseModel):
    """Public projection of a link, carrying its category name"""

    id: str
    original_input: str
    title: str
    description: str
    url: str
    category: str
    ai_description: str

    def to_public_dict(self) -> Dict[str, Any]:
        """Serialize with the camelCase keys clients expect."""
        return {
            "id": self.id,
            "originalInput": self.original_input,
            "title": self.title,
            "description": self.description,
            "url": self.url,
            "category": self.category,
            "aiDescription": self.ai_description,
        }


class ClassificationVerdict(BaseModel):
    """Category decision for one input"""

    model_config = ConfigDict(populate_by_name=True)

    category: str
    description: str
    is_new: bool = Field(alias="isNew")


@dataclass
class ParseFailure:
    """Model output that could not be read as a verdict"""
    reason: str
    raw: str = ""


ParseResult = Union[ClassificationVerdict, ParseFailure]


@dataclass
class PageMetadata:
    """Title and description scraped from a page; empty when unavailable"""
    title: str = ""
    description: str = ""
