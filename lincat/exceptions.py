"""
Exception types raised across the categorization pipeline
"""


class LincatError(Exception):
    """Base class for lincat errors"""


class InvalidInputError(LincatError):
    """Submitted input is missing, not a string, or blank"""


class StorageError(LincatError):
    """A storage backend failed to read or write"""


class CategoryConflictError(StorageError):
    """A category with the same (name, owner) already exists"""

    def __init__(self, name: str, owner: str):
        super().__init__(f"Category {name!r} already exists for owner {owner!r}")
        self.name = name
        self.owner = owner
