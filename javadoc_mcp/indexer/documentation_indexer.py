"""
DocumentationIndexer - single entry point for loading and querying the index.

Lifecycle:
1. initialize(): read the JSON snapshot once and build the search engine
2. search_* / find_packages_by_task: read-only queries against the engine
3. get_class_doc(): resolve a name, then parse the class page through the
   detail cache
"""

import logging
import time
from pathlib import Path
from typing import List, Optional

from javadoc_mcp.cache import DetailCache
from javadoc_mcp.indexer.document_store import DocumentNotFoundError, DocumentStore
from javadoc_mcp.indexer.search_engine import SearchEngine
from javadoc_mcp.parsers.class_doc_parser import ClassDocParser
from javadoc_mcp.schemas import (
    ClassDocumentation,
    ClassSearchResult,
    EntityKind,
    IndexSnapshot,
    IndexStats,
    MethodSearchResult,
    PackageSearchResult,
    SearchSettings,
)

logger = logging.getLogger(__name__)


class IndexerNotInitializedError(RuntimeError):
    """Raised when the indexer is queried before initialize() completes."""


def load_snapshot(index_path: Path) -> IndexSnapshot:
    """Load a serialized index; a missing or invalid file is fatal."""
    index_path = Path(index_path)
    if not index_path.exists():
        raise FileNotFoundError(f"Index not found: {index_path}")

    return IndexSnapshot.model_validate_json(index_path.read_text(encoding="utf-8"))


class DocumentationIndexer:
    """
    Coordinates the search engine, the class page parser and the detail cache.

    Example:
        >>> indexer = DocumentationIndexer(Path("data/index.json"), DirectoryDocumentStore(Path("javadoc")))
        >>> indexer.initialize()
        >>> indexer.search_classes("Adaptation", limit=5)
        >>> doc = indexer.get_class_doc("com.onwbp.adaptation.Adaptation")
    """

    def __init__(
        self,
        index_path: Path,
        document_store: DocumentStore,
        cache: Optional[DetailCache] = None,
        settings: Optional[SearchSettings] = None,
    ):
        """
        Initialize indexer.

        Args:
            index_path: Path to the JSON snapshot
            document_store: Source of class pages
            cache: Detail cache owned by this indexer (a new 50-entry cache when omitted)
            settings: Search knobs
        """
        self.index_path = Path(index_path)
        self.document_store = document_store
        self.cache = cache if cache is not None else DetailCache()
        self.settings = settings or SearchSettings()
        self.class_doc_parser = ClassDocParser()

        self._search_engine: Optional[SearchEngine] = None
        self._version: Optional[str] = None

    @property
    def initialized(self) -> bool:
        return self._search_engine is not None

    def initialize(self) -> None:
        """Load the snapshot and build the search engine; later calls do nothing."""
        if self._search_engine is not None:
            return

        start_time = time.perf_counter()
        snapshot = load_snapshot(self.index_path)
        self.initialize_from_snapshot(snapshot)

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.info(f"Documentation index loaded in {elapsed_ms:.0f}ms")

    def initialize_from_snapshot(self, snapshot: IndexSnapshot) -> None:
        """Build the search engine from an in-memory snapshot."""
        if self._search_engine is not None:
            return

        self._version = snapshot.version
        self._search_engine = SearchEngine(snapshot, self.settings)

        if self._version:
            logger.info(f"Documentation version: {self._version}")
        logger.info(f"Index stats: {self._search_engine.get_stats().model_dump()}")

    @property
    def search_engine(self) -> SearchEngine:
        if self._search_engine is None:
            raise IndexerNotInitializedError("DocumentationIndexer not initialized. Call initialize() first.")
        return self._search_engine

    # ========================================================================
    # QUERIES
    # ========================================================================

    def search_classes(
        self,
        query: str,
        kind: Optional[EntityKind] = None,
        package: Optional[str] = None,
        limit: int = 10,
    ) -> List[ClassSearchResult]:
        return self.search_engine.search_classes(query, kind=kind, package=package, limit=limit)

    def search_methods(
        self,
        method_name: str,
        class_name: Optional[str] = None,
        return_type: Optional[str] = None,
        limit: int = 10,
    ) -> List[MethodSearchResult]:
        return self.search_engine.search_methods(
            method_name, class_name=class_name, return_type=return_type, limit=limit
        )

    def find_packages_by_task(self, task: str) -> List[PackageSearchResult]:
        return self.search_engine.find_packages_by_task(task)

    def search_packages(self, query: str, limit: int = 10) -> List[PackageSearchResult]:
        return self.search_engine.search_packages(query, limit=limit)

    def get_class_doc(self, class_name: str, include_inherited: bool = False) -> Optional[ClassDocumentation]:
        """
        Get full documentation for a class.

        Args:
            class_name: Fully-qualified or simple class name
            include_inherited: Accepted for compatibility; inherited members are not merged

        Returns:
            Parsed documentation, or None if the class is unknown or its page
            cannot be read
        """
        engine = self.search_engine

        class_info = engine.get_class(class_name)
        if class_info is None:
            return None

        cached = self.cache.get(class_info.fully_qualified_name)
        if cached is not None:
            return cached

        logger.debug(f"Cache miss for {class_info.fully_qualified_name}, parsing {class_info.html_path}")
        try:
            html = self.document_store.read(class_info.html_path)
        except DocumentNotFoundError as e:
            logger.warning(f"Class page unavailable for {class_info.fully_qualified_name}: {e}")
            return None

        doc = self.class_doc_parser.parse(
            class_info.fully_qualified_name, class_info.html_path, html, package_name=class_info.package,
        )
        self.cache.set(class_info.fully_qualified_name, doc)
        return doc

    def get_stats(self) -> IndexStats:
        return self.search_engine.get_stats()

    def get_version(self) -> Optional[str]:
        """Documented library version, when the snapshot carries one."""
        return self._version
