"""
Environment-driven defaults.

Values come from the process environment, optionally populated from a `.env`
file found by python-dotenv. CLI options take precedence over everything here.
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv, find_dotenv

from javadoc_mcp.schemas import SearchSettings

load_dotenv(find_dotenv())

DEFAULT_INDEX_PATH = Path("data/index.json")
DEFAULT_CACHE_SIZE = 50


def _env_path(name: str) -> Optional[Path]:
    value = os.getenv(name)
    return Path(value) if value else None


def index_path() -> Path:
    """Location of the serialized index snapshot."""
    return _env_path("JAVADOC_MCP_INDEX_PATH") or DEFAULT_INDEX_PATH


def docs_path() -> Optional[Path]:
    """Javadoc directory or zip archive holding the detail documents."""
    return _env_path("JAVADOC_MCP_DOCS_PATH")


def log_file() -> Optional[Path]:
    """Server log file; stderr when unset."""
    return _env_path("JAVADOC_MCP_LOG_FILE")


def cache_size() -> int:
    """Capacity of the detail cache."""
    value = os.getenv("JAVADOC_MCP_CACHE_SIZE")
    if not value:
        return DEFAULT_CACHE_SIZE
    size = int(value)
    if size < 1:
        raise ValueError(f"JAVADOC_MCP_CACHE_SIZE must be positive, got {size}")
    return size


def search_settings() -> SearchSettings:
    """Search knobs with the threshold optionally overridden from the environment."""
    threshold = os.getenv("JAVADOC_MCP_SEARCH_THRESHOLD")
    if threshold:
        return SearchSettings(threshold=float(threshold))
    return SearchSettings()
