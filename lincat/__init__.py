"""
Lincat: automatic categorization of saved links and notes
"""
from .models import Category, CategorySummary, ClassificationVerdict, Link, LinkView, PageMetadata, ParseFailure
from .exceptions import LincatError, InvalidInputError, StorageError, CategoryConflictError
from .content_processor import ContentProcessor
from .metadata_extractor import MetadataExtractor
from .heuristics import HeuristicClassifier
from .classification_service import ClassificationService, parse_verdict
from .category_resolver import CategoryResolver
from .categorizer import Categorizer, CategorizerDependencies, build_categorizer
from .link_index import LinkIndex

__all__ = [
    'Category',
    'CategorySummary',
    'ClassificationVerdict',
    'Link',
    'LinkView',
    'PageMetadata',
    'ParseFailure',
    'LincatError',
    'InvalidInputError',
    'StorageError',
    'CategoryConflictError',
    'ContentProcessor',
    'MetadataExtractor',
    'HeuristicClassifier',
    'ClassificationService',
    'parse_verdict',
    'CategoryResolver',
    'Categorizer',
    'CategorizerDependencies',
    'build_categorizer',
    'LinkIndex',
]
