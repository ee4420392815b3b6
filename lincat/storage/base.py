"""
Storage interface shared by every backend
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models import Category, CategorySummary, Link


class Storage(ABC):
    """Per-owner persistence for categories and links.

    Every query is scoped by ``owner``. Implementations enforce that no two
    categories share ``(name, owner)`` and that deleting a category deletes
    its links. Backend failures surface as ``StorageError``.
    """

    @abstractmethod
    def list_category_names(self, owner: str) -> List[str]:
        """Names of all categories the owner has."""

    @abstractmethod
    def insert_category(self, category_id: str, name: str, owner: str) -> Category:
        """Create a category. Raises CategoryConflictError if (name, owner) exists."""

    @abstractmethod
    def find_category_id(self, name: str, owner: str) -> Optional[str]:
        """Id of the owner's category with exactly this name, if any."""

    @abstractmethod
    def insert_link(self, link: Link) -> Link:
        """Store a link. Raises StorageError if its category is not the owner's."""

    @abstractmethod
    def get_category(self, category_id: str, owner: str) -> Optional[Category]:
        pass

    @abstractmethod
    def list_categories(self, owner: str) -> List[CategorySummary]:
        """All categories with link counts, newest first."""

    @abstractmethod
    def list_links(self, owner: str, category_id: Optional[str] = None) -> List[Link]:
        """Links newest first, optionally limited to one category."""

    @abstractmethod
    def get_link(self, link_id: str, owner: str) -> Optional[Link]:
        pass

    @abstractmethod
    def search_links(self, owner: str, query: str) -> List[Link]:
        """Case-insensitive substring match over title, description,
        ai_description and original_input; newest first."""

    @abstractmethod
    def delete_category(self, category_id: str, owner: str) -> bool:
        """Delete a category and its links. False if it did not exist."""

    @abstractmethod
    def delete_link(self, link_id: str, owner: str) -> bool:
        """Delete one link. False if it did not exist."""

    def close(self) -> None:
        """Release backend resources."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
