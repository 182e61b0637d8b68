"""Output formatters."""

from .class_doc_formatter import format_class_markdown

__all__ = ["format_class_markdown"]
