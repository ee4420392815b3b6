"""
Maps a classification verdict to a stored category id for one owner
"""
from .exceptions import CategoryConflictError, StorageError
from .logging_config import get_logger
from .models import ClassificationVerdict, new_id
from .storage import Storage

logger = get_logger("category_resolver")


class CategoryResolver:
    """Reuses the owner's category with the verdict's name, or creates it.

    Creation leans on the storage uniqueness constraint on (name, owner):
    when a concurrent request wins the insert, the winner's row is re-read
    and reused, so identical requests converge on a single category.
    """

    def __init__(self, storage: Storage):
        self.storage = storage

    def resolve(self, verdict: ClassificationVerdict, owner: str) -> str:
        """Return the id of the category the verdict names, creating it if needed."""
        if not verdict.is_new:
            category_id = self.storage.find_category_id(verdict.category, owner)
            if category_id is not None:
                return category_id
            logger.info("Category %r not found for %s; creating it", verdict.category, owner)

        return self._create(verdict.category, owner)

    def _create(self, name: str, owner: str) -> str:
        try:
            category = self.storage.insert_category(new_id(), name, owner)
        except CategoryConflictError:
            category_id = self.storage.find_category_id(name, owner)
            if category_id is None:
                raise StorageError(f"Category {name!r} conflicted but cannot be read back")
            logger.info("Category %r already existed for %s; reusing %s", name, owner, category_id)
            return category_id

        logger.info("Created category %r (%s) for %s", name, category.id, owner)
        return category.id
