"""
Javadoc MCP - searchable Java API documentation for LLM clients.

Indexes a Javadoc tree (search-index files plus class pages) and serves
class, method and package search over the Model Context Protocol.
"""

__version__ = "0.1.0"

from javadoc_mcp.schemas import (
    ClassDocumentation,
    ClassSearchResult,
    EntityKind,
    IndexSnapshot,
    MethodSearchResult,
    PackageSearchResult,
    SearchSettings,
)
from javadoc_mcp.indexer import DocumentationIndexer, IndexBuilder, SearchEngine

__all__ = [
    "__version__",
    "ClassDocumentation",
    "ClassSearchResult",
    "EntityKind",
    "IndexSnapshot",
    "MethodSearchResult",
    "PackageSearchResult",
    "SearchSettings",
    "DocumentationIndexer",
    "IndexBuilder",
    "SearchEngine",
]
