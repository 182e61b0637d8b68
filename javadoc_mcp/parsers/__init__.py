"""Parsers for Javadoc inventory files and class pages."""

from .inventory_parser import SearchIndexParser, InventoryParseError, extract_array_literal
from .class_doc_parser import ClassDocParser, extract_package_description
from .html_to_markdown import html_to_markdown
from .version_extractor import extract_version, extract_version_from_file

__all__ = [
    "SearchIndexParser",
    "InventoryParseError",
    "extract_array_literal",
    "ClassDocParser",
    "extract_package_description",
    "html_to_markdown",
    "extract_version",
    "extract_version_from_file",
]
