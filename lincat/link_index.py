"""
Read-facing view over stored links: browse, search, stats, export and delete
"""
import json
from typing import Dict, List, Optional

from .logging_config import get_logger
from .models import CategorySummary, Link, LinkView
from .storage import Storage

logger = get_logger("link_index")


class LinkIndex:
    """Browsing and housekeeping for one owner's links"""

    def __init__(self, storage: Storage, owner: str):
        self.storage = storage
        self.owner = owner

    def _category_names(self) -> Dict[str, str]:
        return {c.id: c.name for c in self.storage.list_categories(self.owner)}

    def _view(self, link: Link, names: Dict[str, str]) -> LinkView:
        return LinkView(
            id=link.id,
            original_input=link.original_input,
            title=link.title,
            description=link.description,
            url=link.url,
            category=names.get(link.category_id, "Uncategorized"),
            ai_description=link.ai_description,
        )

    def list_categories(self) -> List[CategorySummary]:
        """All categories with link counts, newest first."""
        return self.storage.list_categories(self.owner)

    def find_category(self, name_or_id: str) -> Optional[CategorySummary]:
        """Look up a category by id, or by name ignoring case."""
        wanted = name_or_id.lower()
        for category in self.list_categories():
            if category.id == name_or_id or category.name.lower() == wanted:
                return category
        return None

    def get_all(self) -> List[LinkView]:
        names = self._category_names()
        return [self._view(link, names) for link in self.storage.list_links(self.owner)]

    def get_by_category(self, category_id: str) -> List[LinkView]:
        names = self._category_names()
        links = self.storage.list_links(self.owner, category_id=category_id)
        return [self._view(link, names) for link in links]

    def get(self, link_id: str) -> Optional[LinkView]:
        link = self.storage.get_link(link_id, self.owner)
        if link is None:
            return None
        return self._view(link, self._category_names())

    def search(self, query: str) -> List[LinkView]:
        """Search entries by title, descriptions or original input."""
        names = self._category_names()
        return [self._view(link, names) for link in self.storage.search_links(self.owner, query)]

    def remove_category(self, category_id: str) -> bool:
        """Delete a category together with all its links."""
        removed = self.storage.delete_category(category_id, self.owner)
        if removed:
            logger.info("Deleted category %s", category_id)
        return removed

    def remove(self, link_id: str) -> bool:
        removed = self.storage.delete_link(link_id, self.owner)
        if removed:
            logger.info("Deleted link %s", link_id)
        return removed

    def get_stats(self) -> Dict:
        """Totals for the owner's collection."""
        categories = self.list_categories()
        links = self.storage.list_links(self.owner)
        return {
            "total": len(links),
            "urls": sum(1 for link in links if link.url),
            "notes": sum(1 for link in links if not link.url),
            "categories": {c.name: c.link_count for c in categories},
        }

    def export_json(self) -> str:
        data = [view.to_public_dict() for view in self.get_all()]
        return json.dumps(data, indent=2, ensure_ascii=False)

    def export_markdown(self) -> str:
        """Markdown document with one section per category."""
        lines = ["# Saved Links\n"]
        for category in sorted(self.list_categories(), key=lambda c: c.name.lower()):
            lines.append(f"\n## {category.name}\n")
            for view in self.get_by_category(category.id):
                entry = f"- [{view.title}]({view.url})" if view.url else f"- {view.title}"
                if view.ai_description:
                    entry += f" - {view.ai_description}"
                lines.append(entry)
        return "\n".join(lines)
