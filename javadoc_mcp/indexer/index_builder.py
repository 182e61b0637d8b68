"""
Index builder for extracted Javadoc trees.

Turns the three search-index files of a Javadoc directory into the JSON
snapshot loaded by the MCP server:

    javadoc/
    ├── index.html                 # version from the page title
    ├── type-search-index.js
    ├── member-search-index.js
    ├── package-search-index.js
    └── com/example/.../*.html     # class pages, read only when enriching

With enrichment every class page is parsed once at build time, so the snapshot
already carries descriptions, kinds and method return types and class search
can rank on descriptions.
"""

import json
import logging
import time
from pathlib import Path
from typing import Dict, List, Optional

from javadoc_mcp.indexer.document_store import DirectoryDocumentStore, DocumentNotFoundError
from javadoc_mcp.parsers.class_doc_parser import ClassDocParser, extract_package_description, split_top_level
from javadoc_mcp.parsers.inventory_parser import SearchIndexParser
from javadoc_mcp.parsers.version_extractor import extract_version_from_file
from javadoc_mcp.schemas import (
    ClassDocumentation,
    IndexSnapshot,
    MethodDoc,
    MethodSearchEntry,
    PackageDocumentation,
)

logger = logging.getLogger(__name__)

PACKAGE_SUMMARY_FILE = "package-summary.html"


def load_task_categories(path: Path) -> Dict[str, List[str]]:
    """
    Load the task-category table.

    The file is a JSON object mapping a task label to entity FQNs:

        {"validation": ["com.example.Checker", "com.example.Rule"]}

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the content is not a label -> list of names mapping
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Categories file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Categories file must contain a JSON object: {path}")

    categories: Dict[str, List[str]] = {}
    for label, class_names in data.items():
        if not isinstance(class_names, list) or not all(isinstance(name, str) for name in class_names):
            raise ValueError(f"Category '{label}' must map to a list of class names")
        categories[label] = list(class_names)

    return categories


def count_parameters(signature: str) -> int:
    """Number of parameters in a 'name(A, B)' style signature."""
    start = signature.find("(")
    end = signature.rfind(")")
    if start == -1 or end <= start:
        return 0
    inside = signature[start + 1:end].strip()
    return len(split_top_level(inside)) if inside else 0


class IndexBuilder:
    """
    Build an IndexSnapshot from a Javadoc directory.

    Example:
        >>> builder = IndexBuilder(Path("javadoc"))
        >>> snapshot = builder.build(categories=load_task_categories(Path("categories.json")), enrich=True)
        >>> builder.save(snapshot, Path("data/index.json"))
    """

    def __init__(self, javadoc_root: Path):
        """
        Initialize builder.

        Args:
            javadoc_root: Root directory of the extracted Javadoc
        """
        self.javadoc_root = Path(javadoc_root)
        if not self.javadoc_root.is_dir():
            raise FileNotFoundError(f"Javadoc directory not found: {self.javadoc_root}")

        self.inventory_parser = SearchIndexParser(self.javadoc_root)
        self.class_doc_parser = ClassDocParser()
        self.document_store = DirectoryDocumentStore(self.javadoc_root)

    def build(
        self,
        categories: Optional[Dict[str, List[str]]] = None,
        enrich: bool = False,
    ) -> IndexSnapshot:
        """
        Build the snapshot.

        Args:
            categories: Task label -> entity FQNs (empty when omitted)
            enrich: Parse every class and package page for details

        Returns:
            IndexSnapshot ready to be saved
        """
        start_time = time.perf_counter()
        logger.info(f"Building index from: {self.javadoc_root}")

        types, members, packages = self.inventory_parser.parse_all()

        class_map = self.inventory_parser.build_class_index(types)
        method_map = self.inventory_parser.build_method_index(members, class_map)
        package_map = self.inventory_parser.build_package_index(packages, class_map)

        if enrich:
            self._enrich_classes(class_map, method_map)
            self._enrich_packages(package_map)

        snapshot = IndexSnapshot(
            version=extract_version_from_file(self.javadoc_root / "index.html"),
            classes=class_map,
            methods=method_map,
            packages=package_map,
            categories_by_task=dict(categories or {}),
        )

        self._warn_unknown_category_entries(snapshot)

        elapsed = time.perf_counter() - start_time
        logger.info(
            f"Index built in {elapsed:.1f}s: "
            f"{sum(1 for key, doc in class_map.items() if key == doc.fully_qualified_name)} classes, "
            f"{sum(len(entries) for entries in method_map.values())} methods, "
            f"{len(package_map)} packages, {len(snapshot.categories_by_task)} categories"
        )
        return snapshot

    def save(self, snapshot: IndexSnapshot, path: Path) -> Path:
        """Write the snapshot as JSON, creating parent directories."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(snapshot.model_dump_json(indent=2), encoding="utf-8")
        logger.info(f"Saved index: {path}")
        return path

    # ------------------------------------------------------------------------
    # Enrichment
    # ------------------------------------------------------------------------

    def _enrich_classes(
        self,
        class_map: Dict[str, ClassDocumentation],
        method_map: Dict[str, List[MethodSearchEntry]],
    ) -> None:
        entries_by_class: Dict[str, List[MethodSearchEntry]] = {}
        for entries in method_map.values():
            for entry in entries:
                entries_by_class.setdefault(entry.class_name, []).append(entry)

        skeletons = [(key, doc) for key, doc in class_map.items() if key == doc.fully_qualified_name]
        enriched_count = 0

        for fully_qualified_name, skeleton in skeletons:
            try:
                html = self.document_store.read(skeleton.html_path)
            except DocumentNotFoundError as e:
                logger.warning(f"Skipping enrichment of {fully_qualified_name}: {e}")
                continue

            detail = self.class_doc_parser.parse(
                fully_qualified_name, skeleton.html_path, html, package_name=skeleton.package,
            )
            methods = [self._merge_method(method, detail.methods) for method in skeleton.methods]

            enriched = skeleton.model_copy(update={
                "kind": detail.kind,
                "description": detail.description or None,
                "extends": detail.extends,
                "implements": detail.implements,
                "deprecated": detail.deprecated,
                "see_also": detail.see_also,
                "methods": methods,
            })

            class_map[fully_qualified_name] = enriched
            # The alias may belong to another class with the same simple name
            if class_map.get(skeleton.simple_name) is skeleton:
                class_map[skeleton.simple_name] = enriched

            for entry in entries_by_class.get(fully_qualified_name, []):
                match = self._match_detail(entry.method, entry.signature, detail.methods)
                if match is not None:
                    entry.return_type = match.return_type
                    entry.description = match.description or None

            enriched_count += 1

        logger.info(f"Enriched {enriched_count}/{len(skeletons)} classes from class pages")

    def _merge_method(self, method: MethodDoc, details: List[MethodDoc]) -> MethodDoc:
        match = self._match_detail(method.name, method.signature, details)
        if match is None:
            return method
        return method.model_copy(update={
            "return_type": match.return_type,
            "parameters": match.parameters,
            "description": match.description or None,
            "modifiers": match.modifiers,
            "deprecated": match.deprecated,
        })

    @staticmethod
    def _match_detail(name: str, signature: str, details: List[MethodDoc]) -> Optional[MethodDoc]:
        """Detail method with the same name and parameter count, else the first with the same name."""
        candidates = [detail for detail in details if detail.name == name]
        if not candidates:
            return None

        parameter_count = count_parameters(signature)
        for candidate in candidates:
            if len(candidate.parameters) == parameter_count:
                return candidate
        return candidates[0]

    def _enrich_packages(self, package_map: Dict[str, PackageDocumentation]) -> None:
        for package in package_map.values():
            locator = f"{package.name.replace('.', '/')}/{PACKAGE_SUMMARY_FILE}"
            try:
                html = self.document_store.read(locator)
            except DocumentNotFoundError as e:
                logger.debug(f"No package summary for {package.name}: {e}")
                continue
            package.description = extract_package_description(html) or None

    def _warn_unknown_category_entries(self, snapshot: IndexSnapshot) -> None:
        for label, class_names in snapshot.categories_by_task.items():
            unknown = [name for name in class_names if name not in snapshot.classes]
            if unknown:
                logger.warning(f"Category '{label}' lists {len(unknown)} unknown classes: {', '.join(unknown[:5])}")
