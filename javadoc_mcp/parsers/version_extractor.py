"""Extract the documented library version from a Javadoc index page."""

import logging
import re
from pathlib import Path
from typing import Optional

from bs4 import BeautifulSoup

from javadoc_mcp.parsers.html_to_markdown import HTML_PARSER

logger = logging.getLogger(__name__)

_VERSION = re.compile(r"Version\s+([\d.]+)", re.IGNORECASE)


def extract_version(html: str) -> Optional[str]:
    """
    Read the version number from the page title.

    Example title: "Overview (TIBCO EBX® Version 6.2.2 Java API)" -> "6.2.2"
    """
    soup = BeautifulSoup(html, HTML_PARSER)
    title = soup.title.get_text() if soup.title else ""
    match = _VERSION.search(title)
    return match.group(1).rstrip(".") if match else None


def extract_version_from_file(index_html_path: Path) -> Optional[str]:
    """Version from an index.html on disk; None if the file is missing."""
    index_html_path = Path(index_html_path)
    if not index_html_path.exists():
        logger.warning(f"Index page not found: {index_html_path}")
        return None
    return extract_version(index_html_path.read_text(encoding="utf-8", errors="replace"))
