"""
Fuzzy search over a loaded Javadoc index.

Builds three immutable fuzzy collections (classes, methods, packages) from an
IndexSnapshot and answers ranked, filtered queries against them. Filters are
applied after fuzzy ranking, so every filtered query over-fetches candidates
first.
"""

import logging
from typing import Dict, List, Optional

from javadoc_mcp.indexer.fuzzy import FuzzyIndex
from javadoc_mcp.schemas import (
    ClassDocumentation,
    ClassSearchResult,
    EntityKind,
    IndexSnapshot,
    IndexStats,
    MethodSearchEntry,
    MethodSearchResult,
    PackageDocumentation,
    PackageSearchResult,
    SearchSettings,
)

logger = logging.getLogger(__name__)


def _relevance(score: float) -> float:
    return min(max(1.0 - score, 0.0), 1.0)


def _truncate(text: Optional[str], length: int) -> Optional[str]:
    return text[:length] if text else text


class SearchEngine:
    """
    Search engine for classes, methods and packages.

    Example:
        >>> engine = SearchEngine(snapshot)
        >>> engine.search_classes("Adaptation", limit=5)
        >>> engine.search_methods("getTable", class_name="Adaptation")
        >>> engine.find_packages_by_task("validation")
    """

    def __init__(self, snapshot: IndexSnapshot, settings: Optional[SearchSettings] = None):
        """
        Build search collections.

        Args:
            snapshot: Loaded index
            settings: Search knobs (defaults when omitted)
        """
        self.settings = settings or SearchSettings()
        self.version = snapshot.version

        self.class_map: Dict[str, ClassDocumentation] = dict(snapshot.classes)
        self.method_map: Dict[str, List[MethodSearchEntry]] = {
            name: list(entries) for name, entries in snapshot.methods.items()
        }
        self.package_map: Dict[str, PackageDocumentation] = dict(snapshot.packages)
        self.categories_by_task: Dict[str, List[str]] = {
            label: list(names) for label, names in snapshot.categories_by_task.items()
        }

        # Simple-name aliases point at the same classes; only FQN keys are searchable
        classes = self.get_all_classes()
        methods = [entry for entries in self.method_map.values() for entry in entries]
        packages = list(self.package_map.values())

        fuzzy_options = {
            "threshold": self.settings.threshold,
            "min_match_char_length": self.settings.min_match_char_length,
            "distance": self.settings.distance,
        }
        self.class_index = FuzzyIndex(classes, self.settings.class_weights, **fuzzy_options)
        self.method_index = FuzzyIndex(methods, self.settings.method_weights, **fuzzy_options)
        self.package_index = FuzzyIndex(packages, self.settings.package_weights, **fuzzy_options)

        logger.info(
            f"Built search indices: {len(self.class_index)} classes, "
            f"{len(self.method_index)} methods, {len(self.package_index)} packages"
        )

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
        """
        Search classes by name or description.

        Args:
            query: Class name or description text
            kind: Only return this kind of type
            package: Only return classes of this exact package
            limit: Maximum number of results

        Returns:
            Results sorted by relevance
        """
        matches = self.class_index.search(query, limit=limit * self.settings.over_fetch_factor)

        if kind is not None:
            kind = EntityKind(kind)
            matches = [m for m in matches if m.item.kind == kind]
        if package:
            matches = [m for m in matches if m.item.package == package]

        results = []
        for match in matches[:limit]:
            doc = match.item
            key_methods: List[str] = []
            for method in doc.methods:
                if method.name not in key_methods:
                    key_methods.append(method.name)
                if len(key_methods) == self.settings.preview_size:
                    break

            results.append(ClassSearchResult(
                name=doc.simple_name,
                fully_qualified_name=doc.fully_qualified_name,
                kind=doc.kind,
                package=doc.package,
                description=_truncate(doc.description, self.settings.description_preview_length),
                key_methods=key_methods,
                relevance_score=_relevance(match.score),
            ))
        return results

    def search_methods(
        self,
        method_name: str,
        class_name: Optional[str] = None,
        return_type: Optional[str] = None,
        limit: int = 10,
    ) -> List[MethodSearchResult]:
        """
        Search methods across all classes; overloads are separate results.

        Args:
            method_name: Method name to search for
            class_name: Case-insensitive substring of the owning class FQN
            return_type: Case-insensitive substring of the return type
            limit: Maximum number of results
        """
        matches = self.method_index.search(method_name, limit=limit * self.settings.over_fetch_factor)

        if class_name:
            class_name_lower = class_name.lower()
            matches = [m for m in matches if class_name_lower in m.item.class_name.lower()]
        if return_type:
            return_type_lower = return_type.lower()
            matches = [
                m for m in matches
                if m.item.return_type is not None and return_type_lower in m.item.return_type.lower()
            ]

        return [
            MethodSearchResult(
                method=match.item.method,
                signature=match.item.signature,
                class_name=match.item.class_name,
                package_name=match.item.package_name,
                return_type=match.item.return_type,
                description=_truncate(match.item.description, self.settings.description_preview_length),
                relevance_score=_relevance(match.score),
            )
            for match in matches[:limit]
        ]

    def find_packages_by_task(self, task: str) -> List[PackageSearchResult]:
        """
        Find packages through the task-category table.

        A category matches when its label contains the task or the task contains
        the label (case-insensitive). The score of a package is the share of the
        matched task classes that live in it; it orders results, nothing more.
        """
        task_lower = task.lower().strip()
        if not task_lower:
            return []

        relevant_classes: List[str] = []
        for category, class_names in self.categories_by_task.items():
            category_lower = category.lower()
            if task_lower in category_lower or category_lower in task_lower:
                for class_name in class_names:
                    if class_name not in relevant_classes:
                        relevant_classes.append(class_name)

        package_names: List[str] = []
        for class_name in relevant_classes:
            doc = self.class_map.get(class_name)
            if doc is not None and doc.package not in package_names:
                package_names.append(doc.package)

        relevant_set = set(relevant_classes)
        results = []
        for package_name in package_names:
            pkg = self.package_map.get(package_name)
            if pkg is None:
                continue

            key_classes = [c for c in pkg.classes if c in relevant_set][:self.settings.preview_size]
            results.append(PackageSearchResult(
                name=pkg.name,
                description=pkg.description,
                key_classes=key_classes,
                relevance_score=len(key_classes) / max(len(relevant_classes), 1),
            ))

        results.sort(key=lambda r: r.relevance_score, reverse=True)
        return results

    def search_packages(self, query: str, limit: int = 10) -> List[PackageSearchResult]:
        """Search packages by name or description."""
        return [
            PackageSearchResult(
                name=match.item.name,
                description=match.item.description,
                key_classes=match.item.classes[:self.settings.preview_size],
                relevance_score=_relevance(match.score),
            )
            for match in self.package_index.search(query, limit=limit)
        ]

    # ========================================================================
    # LOOKUP
    # ========================================================================

    def get_class(self, class_name: str) -> Optional[ClassDocumentation]:
        """Get a class by FQN or simple name; FQN keys take precedence."""
        return self.class_map.get(class_name)

    def get_all_classes(self) -> List[ClassDocumentation]:
        """Every class once, in index order."""
        return [doc for key, doc in self.class_map.items() if key == doc.fully_qualified_name]

    def get_stats(self) -> IndexStats:
        return IndexStats(
            entity_count=len(self.get_all_classes()),
            entity_count_with_aliases=len(self.class_map),
            method_name_count=len(self.method_map),
            method_count=sum(len(entries) for entries in self.method_map.values()),
            package_count=len(self.package_map),
            category_count=len(self.categories_by_task),
        )

    def to_snapshot(self) -> IndexSnapshot:
        """Snapshot equivalent to the one this engine was built from."""
        return IndexSnapshot(
            version=self.version,
            classes=self.class_map,
            methods=self.method_map,
            packages=self.package_map,
            categories_by_task=self.categories_by_task,
        )
