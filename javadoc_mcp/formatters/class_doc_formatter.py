"""
Markdown rendering of class documentation.

Layout:

    # Adaptation

    **Package:** com.onwbp.adaptation
    **Type:** interface
    **Extends:** ReadContext

    ## Description
    ## Fields
    ## Methods
    ## See Also
"""

import logging
from typing import List

from javadoc_mcp.schemas import ClassDocumentation, FieldDoc, MethodDoc

logger = logging.getLogger(__name__)

DEPRECATED_BANNER = "**⚠️ DEPRECATED**"
VOID = "void"


def format_class_markdown(doc: ClassDocumentation) -> str:
    """
    Render a class as Markdown for an LLM client.

    Args:
        doc: Fully extracted class documentation

    Returns:
        Markdown document; sections without content are omitted
    """
    lines: List[str] = [f"# {doc.simple_name}", ""]

    lines.append(f"**Package:** {doc.package}")
    lines.append(f"**Type:** {doc.kind.value}")
    if doc.extends:
        lines.append(f"**Extends:** {', '.join(doc.extends)}")
    if doc.implements:
        lines.append(f"**Implements:** {', '.join(doc.implements)}")

    if doc.deprecated:
        lines.extend(["", DEPRECATED_BANNER])

    if doc.description:
        lines.extend(["", "## Description", "", doc.description])

    if doc.fields:
        lines.extend(["", "## Fields", ""])
        for field in doc.fields:
            lines.extend(_format_field(field))

    if doc.methods:
        lines.extend(["", "## Methods", ""])
        for method in doc.methods:
            lines.extend(_format_method(method))

    if doc.see_also:
        lines.extend(["", "## See Also", ""])
        lines.extend(f"- {ref}" for ref in doc.see_also)

    logger.debug(f"Formatted {doc.fully_qualified_name}: {len(doc.methods)} methods, {len(doc.fields)} fields")
    return "\n".join(lines).rstrip() + "\n"


def _format_field(field: FieldDoc) -> List[str]:
    lines = [f"### {field.name}: {field.type}"]
    if field.description:
        lines.append(field.description)
    if field.modifiers:
        lines.append(f"*Modifiers:* {', '.join(field.modifiers)}")
    if field.deprecated:
        lines.append(DEPRECATED_BANNER)
    lines.append("")
    return lines


def _format_method(method: MethodDoc) -> List[str]:
    lines = [f"### {method.signature or method.name}"]
    if method.description:
        lines.extend([method.description, ""])
    lines.extend([f"**Returns:** {method.return_type or VOID}", ""])
    if method.deprecated:
        lines.extend([DEPRECATED_BANNER, ""])
    return lines
