"""
Render Javadoc rich text to Markdown.

Javadoc description blocks are small HTML fragments: paragraphs, lists, code
spans, <pre> examples, links and the occasional heading or table. The renderer
walks the BeautifulSoup tree and keeps that structure; <br> becomes a literal
newline.
"""

import re
from typing import Union

from bs4 import BeautifulSoup
from bs4.element import Comment, NavigableString, Tag

HTML_PARSER = "lxml"

_BLOCK_TAGS = {"p", "div", "section", "article", "center"}
_HEADING_TAGS = {"h1": 1, "h2": 2, "h3": 3, "h4": 4, "h5": 5, "h6": 6}
_EMPHASIS_TAGS = {"em", "i", "cite", "var", "dfn"}
_STRONG_TAGS = {"strong", "b"}
_CODE_TAGS = {"code", "tt", "kbd", "samp"}
_SKIPPED_TAGS = {"script", "style", "noscript"}

FENCE = "```"


def html_to_markdown(source: Union[str, Tag]) -> str:
    """
    Convert an HTML fragment or element to Markdown.

    Args:
        source: HTML string or an already parsed element

    Returns:
        Markdown text, stripped
    """
    if isinstance(source, str):
        source = BeautifulSoup(source, HTML_PARSER)

    return _tidy(_render_children(source))


def _render_children(element: Tag) -> str:
    return "".join(_render(child) for child in element.children)


def _render(node) -> str:
    if isinstance(node, Comment):
        return ""
    if isinstance(node, NavigableString):
        return re.sub(r"\s+", " ", str(node))
    if not isinstance(node, Tag):
        return ""

    name = node.name
    if name in _SKIPPED_TAGS:
        return ""
    if name == "br":
        return "\n"
    if name == "hr":
        return "\n\n---\n\n"
    if name in _HEADING_TAGS:
        text = _render_children(node).strip()
        return f"\n\n{'#' * _HEADING_TAGS[name]} {text}\n\n" if text else ""
    if name in _BLOCK_TAGS:
        return f"\n\n{_render_children(node).strip()}\n\n"
    if name == "pre":
        code = node.get_text().strip("\n")
        return f"\n\n{FENCE}\n{code}\n{FENCE}\n\n"
    if name in _CODE_TAGS:
        code = re.sub(r"\s+", " ", node.get_text())
        return f"`{code}`" if code.strip() else code
    if name in _EMPHASIS_TAGS:
        return _wrap_inline(_render_children(node), "_")
    if name in _STRONG_TAGS:
        return _wrap_inline(_render_children(node), "**")
    if name == "a":
        text = _render_children(node)
        href = node.get("href")
        if href and text.strip():
            return f"[{text.strip()}]({href})"
        return text
    if name in ("ul", "ol"):
        return _render_list(node, ordered=name == "ol")
    if name == "blockquote":
        body = _tidy(_render_children(node))
        return "\n\n" + "\n".join(f"> {line}" if line else ">" for line in body.split("\n")) + "\n\n"
    if name == "dt":
        text = _render_children(node).strip()
        return f"\n\n**{text}**\n" if text else ""
    if name == "dd":
        return f"\n{_render_children(node).strip()}\n"
    if name == "tr":
        cells = [_render_children(cell).strip() for cell in node.find_all(["td", "th"], recursive=False)]
        return "\n| " + " | ".join(cells) + " |"
    if name == "table":
        return f"\n\n{_render_children(node).strip()}\n\n"

    return _render_children(node)


def _wrap_inline(text: str, marker: str) -> str:
    stripped = text.strip()
    if not stripped:
        return text
    # keep surrounding spaces outside the markers
    leading = text[: len(text) - len(text.lstrip())]
    trailing = text[len(text.rstrip()):]
    return f"{leading}{marker}{stripped}{marker}{trailing}"


def _render_list(node: Tag, ordered: bool) -> str:
    lines = []
    for index, item in enumerate(node.find_all("li", recursive=False), 1):
        prefix = f"{index}. " if ordered else "- "
        body = _tidy(_render_children(item))
        indent = " " * len(prefix)
        item_lines = body.split("\n")
        lines.append(prefix + item_lines[0])
        lines.extend(indent + line if line else "" for line in item_lines[1:])
    return "\n\n" + "\n".join(lines) + "\n\n"


def _tidy(markdown: str) -> str:
    """Trim line edges and collapse blank runs, leaving fenced code untouched."""
    lines = []
    in_fence = False
    for line in markdown.split("\n"):
        if line.strip() == FENCE:
            in_fence = not in_fence
            lines.append(FENCE)
            continue
        if in_fence:
            lines.append(line)
        else:
            stripped = line.rstrip()
            # list continuation indent is significant
            lines.append(stripped if stripped.startswith("  ") else stripped.lstrip())

    text = "\n".join(lines)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()
