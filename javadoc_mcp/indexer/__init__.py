"""Index construction, search and coordination."""

from .document_store import (
    DocumentNotFoundError,
    DocumentStore,
    DirectoryDocumentStore,
    ZipDocumentStore,
    open_document_store,
)
from .documentation_indexer import DocumentationIndexer, IndexerNotInitializedError, load_snapshot
from .fuzzy import FuzzyIndex, FuzzyMatch
from .index_builder import IndexBuilder, load_task_categories
from .search_engine import SearchEngine

__all__ = [
    "DocumentNotFoundError",
    "DocumentStore",
    "DirectoryDocumentStore",
    "ZipDocumentStore",
    "open_document_store",
    "DocumentationIndexer",
    "IndexerNotInitializedError",
    "load_snapshot",
    "FuzzyIndex",
    "FuzzyMatch",
    "IndexBuilder",
    "load_task_categories",
    "SearchEngine",
]
