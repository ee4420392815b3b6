"""
JSON file storage backend
"""
import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Dict, List, Optional

from ..exceptions import CategoryConflictError, StorageError
from ..logging_config import get_logger
from ..models import Category, CategorySummary, Link, utc_now
from .base import Storage

logger = get_logger("storage.json")


class JsonFileStorage(Storage):
    """Keeps all categories and links in one JSON document.

    The whole document is loaded at start and rewritten after each change.
    Suited to a single local user; concurrent processes are not supported.
    """

    def __init__(self, data_file: Path = Path("lincat.json")):
        self.data_file = Path(data_file)
        self._lock = threading.Lock()
        self._categories: Dict[str, Category] = {}
        self._links: Dict[str, Link] = {}
        self._load()

    def _load(self):
        """Load existing data from file."""
        if not self.data_file.exists():
            return
        try:
            data = json.loads(self.data_file.read_text(encoding='utf-8'))
            for item in data.get("categories", []):
                category = Category.model_validate(item)
                self._categories[category.id] = category
            for item in data.get("links", []):
                link = Link.model_validate(item)
                self._links[link.id] = link
        except (OSError, ValueError) as e:
            raise StorageError(f"Failed to load {self.data_file}: {e}") from e
        logger.debug("Loaded %d categories and %d links from %s",
                     len(self._categories), len(self._links), self.data_file)

    def _save(self):
        """Write data to file atomically. Caller holds the lock."""
        data = {
            "categories": [c.model_dump() for c in self._categories.values()],
            "links": [link.model_dump() for link in self._links.values()],
        }
        try:
            self.data_file.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.data_file.parent, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_name, self.data_file)
        except OSError as e:
            raise StorageError(f"Failed to write {self.data_file}: {e}") from e

    def _owned_categories(self, owner: str) -> List[Category]:
        return [c for c in self._categories.values() if c.owner == owner]

    def _owned_links(self, owner: str) -> List[Link]:
        # Insertion order is creation order; newest first
        return [link for link in reversed(list(self._links.values())) if link.owner == owner]

    def list_category_names(self, owner: str) -> List[str]:
        with self._lock:
            return [c.name for c in self._owned_categories(owner)]

    def insert_category(self, category_id: str, name: str, owner: str) -> Category:
        with self._lock:
            if any(c.name == name for c in self._owned_categories(owner)):
                raise CategoryConflictError(name, owner)
            if category_id in self._categories:
                raise StorageError(f"Category id {category_id} already exists")
            category = Category(id=category_id, name=name, owner=owner, created_at=utc_now())
            self._categories[category.id] = category
            try:
                self._save()
            except StorageError:
                del self._categories[category.id]
                raise
        return category

    def find_category_id(self, name: str, owner: str) -> Optional[str]:
        with self._lock:
            for category in self._owned_categories(owner):
                if category.name == name:
                    return category.id
        return None

    def get_category(self, category_id: str, owner: str) -> Optional[Category]:
        with self._lock:
            category = self._categories.get(category_id)
        if category is None or category.owner != owner:
            return None
        return category

    def insert_link(self, link: Link) -> Link:
        with self._lock:
            category = self._categories.get(link.category_id)
            if category is None or category.owner != link.owner:
                raise StorageError(
                    f"Category {link.category_id} does not exist for owner {link.owner}"
                )
            if link.id in self._links:
                raise StorageError(f"Link id {link.id} already exists")
            self._links[link.id] = link
            try:
                self._save()
            except StorageError:
                del self._links[link.id]
                raise
        return link

    def list_categories(self, owner: str) -> List[CategorySummary]:
        with self._lock:
            counts: Dict[str, int] = {}
            for link in self._links.values():
                counts[link.category_id] = counts.get(link.category_id, 0) + 1
            categories = list(reversed(self._owned_categories(owner)))
            return [
                CategorySummary(**c.model_dump(), link_count=counts.get(c.id, 0))
                for c in categories
            ]

    def list_links(self, owner: str, category_id: Optional[str] = None) -> List[Link]:
        with self._lock:
            links = self._owned_links(owner)
        if category_id is not None:
            links = [link for link in links if link.category_id == category_id]
        return links

    def get_link(self, link_id: str, owner: str) -> Optional[Link]:
        with self._lock:
            link = self._links.get(link_id)
        if link is None or link.owner != owner:
            return None
        return link

    def search_links(self, owner: str, query: str) -> List[Link]:
        query_lower = query.lower()
        with self._lock:
            links = self._owned_links(owner)
        return [
            link for link in links
            if query_lower in link.title.lower()
            or query_lower in link.description.lower()
            or query_lower in link.ai_description.lower()
            or query_lower in link.original_input.lower()
        ]

    def _restore_on_failure(self, categories: Dict[str, Category], links: Dict[str, Link]):
        """Save, or put the given snapshot back if the write fails. Caller holds the lock."""
        try:
            self._save()
        except StorageError:
            self._categories, self._links = categories, links
            raise

    def delete_category(self, category_id: str, owner: str) -> bool:
        with self._lock:
            category = self._categories.get(category_id)
            if category is None or category.owner != owner:
                return False
            snapshot = (dict(self._categories), dict(self._links))
            del self._categories[category_id]
            removed = [lid for lid, link in self._links.items() if link.category_id == category_id]
            for link_id in removed:
                del self._links[link_id]
            self._restore_on_failure(*snapshot)
        logger.debug("Deleted category %s and %d links", category_id, len(removed))
        return True

    def delete_link(self, link_id: str, owner: str) -> bool:
        with self._lock:
            link = self._links.get(link_id)
            if link is None or link.owner != owner:
                return False
            snapshot = (dict(self._categories), dict(self._links))
            del self._links[link_id]
            self._restore_on_failure(*snapshot)
        return True
