"""
Inventory parser for Javadoc search-index files.

Javadoc ships three JavaScript files next to its HTML pages:

- type-search-index.js:    typeSearchIndex = [{"p": ..., "l": ...}, ...];
- member-search-index.js:  memberSearchIndex = [{"p": ..., "c": ..., "l": ..., "u": ...}, ...];
- package-search-index.js: packageSearchIndex = [{"l": ...}, ...];

Only the array literal of each assignment is decoded. The files are never
executed.
"""

import json
import logging
import re
from pathlib import Path
from typing import Dict, List, Tuple, Type, TypeVar
from urllib.parse import unquote

from pydantic import BaseModel, ValidationError

from javadoc_mcp.schemas import (
    ClassDocumentation,
    EntityKind,
    MemberSearchEntry,
    MethodDoc,
    MethodSearchEntry,
    PackageDocumentation,
    PackageSearchEntry,
    TypeSearchEntry,
)

logger = logging.getLogger(__name__)

ALL_PACKAGES_LABEL = "All Packages"
EXCEPTION_SUFFIXES = ("Exception", "Error")

E = TypeVar("E", bound=BaseModel)


class InventoryParseError(ValueError):
    """Raised when an inventory file is missing or cannot be decoded."""


def extract_array_literal(content: str, variable: str) -> list:
    """
    Decode the array literal assigned to `variable` in a JavaScript source.

    Args:
        content: Source text
        variable: Assigned variable name (e.g. 'typeSearchIndex')

    Returns:
        Decoded list

    Raises:
        InventoryParseError: If the assignment is absent or the literal is not JSON
    """
    match = re.search(rf"\b{re.escape(variable)}\s*=\s*\[", content)
    if not match:
        raise InventoryParseError(f"Could not find '{variable} = [...]' assignment")

    try:
        value, _ = json.JSONDecoder().raw_decode(content, match.end() - 1)
    except json.JSONDecodeError as e:
        raise InventoryParseError(f"Failed to decode {variable} array: {e}") from e

    if not isinstance(value, list):
        raise InventoryParseError(f"{variable} is not an array")
    return value


def decode_member_signature(encoded: str) -> str:
    """Turn the `u` anchor of a member entry into a readable signature."""
    return unquote(encoded.replace("%3C", "<").replace("%3E", ">"))


def infer_kind(simple_name: str) -> EntityKind:
    """Naming heuristic used before the class page has been read."""
    if simple_name.endswith(EXCEPTION_SUFFIXES):
        return EntityKind.EXCEPTION
    return EntityKind.CLASS


def default_html_path(package: str, simple_name: str) -> str:
    """Javadoc location of a type page relative to the documentation root."""
    return f"{package.replace('.', '/')}/{simple_name}.html"


class SearchIndexParser:
    """
    Parser for the Javadoc search-index files.

    Example:
        >>> parser = SearchIndexParser(Path("javadoc"))
        >>> types, members, packages = parser.parse_all()
        >>> class_map = parser.build_class_index(types)
        >>> method_map = parser.build_method_index(members, class_map)
        >>> package_map = parser.build_package_index(packages, class_map)
    """

    TYPE_INDEX_FILE = "type-search-index.js"
    MEMBER_INDEX_FILE = "member-search-index.js"
    PACKAGE_INDEX_FILE = "package-search-index.js"

    def __init__(self, javadoc_path: Path):
        """
        Initialize parser.

        Args:
            javadoc_path: Root directory of the extracted Javadoc
        """
        self.javadoc_path = Path(javadoc_path)

    def parse_all(self) -> Tuple[List[TypeSearchEntry], List[MemberSearchEntry], List[PackageSearchEntry]]:
        """Parse all three search indices."""
        logger.info("Parsing search indices...")

        types = self.parse_type_search_index()
        members = self.parse_member_search_index()
        packages = self.parse_package_search_index()

        logger.info(f"Found {len(types)} types, {len(members)} members, {len(packages)} packages")
        return types, members, packages

    def parse_type_search_index(self) -> List[TypeSearchEntry]:
        return self._parse_file(self.TYPE_INDEX_FILE, "typeSearchIndex", TypeSearchEntry)

    def parse_member_search_index(self) -> List[MemberSearchEntry]:
        return self._parse_file(self.MEMBER_INDEX_FILE, "memberSearchIndex", MemberSearchEntry)

    def parse_package_search_index(self) -> List[PackageSearchEntry]:
        return self._parse_file(self.PACKAGE_INDEX_FILE, "packageSearchIndex", PackageSearchEntry)

    def _parse_file(self, filename: str, variable: str, model: Type[E]) -> List[E]:
        file_path = self.javadoc_path / filename
        if not file_path.exists():
            raise InventoryParseError(f"Inventory file not found: {file_path}")

        raw_entries = extract_array_literal(file_path.read_text(encoding="utf-8"), variable)

        try:
            return [model.model_validate(entry) for entry in raw_entries]
        except ValidationError as e:
            raise InventoryParseError(f"Malformed entry in {filename}: {e}") from e

    # ------------------------------------------------------------------------
    # Index construction
    # ------------------------------------------------------------------------

    def build_class_index(self, types: List[TypeSearchEntry]) -> Dict[str, ClassDocumentation]:
        """
        Convert type entries to class skeletons.

        Each class is stored under its fully-qualified name and under its simple
        name; a later class with the same simple name replaces the alias.
        """
        class_map: Dict[str, ClassDocumentation] = {}

        for entry in types:
            # "All Classes and Interfaces" has no package
            if entry.package is None:
                continue

            fully_qualified_name = f"{entry.package}.{entry.label}"
            if entry.url and entry.url.endswith(".html"):
                html_path = entry.url
            else:
                html_path = default_html_path(entry.package, entry.label)

            class_doc = ClassDocumentation(
                fully_qualified_name=fully_qualified_name,
                simple_name=entry.label,
                package=entry.package,
                kind=infer_kind(entry.label),
                html_path=html_path,
            )

            class_map[fully_qualified_name] = class_doc
            class_map[entry.label] = class_doc

        return class_map

    def build_method_index(
        self,
        members: List[MemberSearchEntry],
        class_map: Dict[str, ClassDocumentation],
    ) -> Dict[str, List[MethodSearchEntry]]:
        """
        Convert member entries to method search entries.

        Fields carry no parentheses in their label and are skipped; their
        details only exist on the class page.
        """
        method_map: Dict[str, List[MethodSearchEntry]] = {}

        for entry in members:
            if "(" not in entry.label:
                continue

            method_name = entry.label.split("(", 1)[0]
            fully_qualified_class_name = f"{entry.package}.{entry.class_name}"
            signature = decode_member_signature(entry.url) if entry.url else entry.label

            method_map.setdefault(method_name, []).append(MethodSearchEntry(
                method=method_name,
                signature=signature,
                class_name=fully_qualified_class_name,
                package_name=entry.package,
            ))

            class_doc = class_map.get(fully_qualified_class_name)
            if class_doc is not None:
                class_doc.methods.append(MethodDoc(
                    name=method_name,
                    signature=signature,
                    class_name=fully_qualified_class_name,
                    package_name=entry.package,
                ))

        return method_map

    def build_package_index(
        self,
        packages: List[PackageSearchEntry],
        class_map: Dict[str, ClassDocumentation],
    ) -> Dict[str, PackageDocumentation]:
        """Group classes by package; simple-name aliases are not counted."""
        members_by_package: Dict[str, List[str]] = {}
        for key, class_doc in class_map.items():
            if key != class_doc.fully_qualified_name:
                continue
            members_by_package.setdefault(class_doc.package, []).append(key)

        package_map: Dict[str, PackageDocumentation] = {}
        for entry in packages:
            if entry.label == ALL_PACKAGES_LABEL:
                continue

            package_map[entry.label] = PackageDocumentation(
                name=entry.label,
                classes=list(members_by_package.get(entry.label, [])),
            )

        return package_map
