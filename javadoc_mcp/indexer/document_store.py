"""
Access to Javadoc detail documents.

Class pages are read either from an extracted Javadoc directory or straight
from the Javadoc zip archive. Locators are '/'-separated paths relative to the
documentation root, as stored in ClassDocumentation.html_path.
"""

import logging
import posixpath
import threading
import zipfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)


class DocumentNotFoundError(FileNotFoundError):
    """Raised when a detail document is missing or unreadable."""


def _normalize_locator(locator: str) -> str:
    locator = locator.split("#", 1)[0].replace("\\", "/").lstrip("/")
    normalized = posixpath.normpath(locator)
    if normalized.startswith("..") or normalized in ("", "."):
        raise DocumentNotFoundError(f"Invalid document locator: {locator}")
    return normalized


class DocumentStore(ABC):
    """Read-only source of detail documents."""

    @abstractmethod
    def read(self, locator: str) -> str:
        """
        Read a document.

        Args:
            locator: Path relative to the documentation root

        Returns:
            Document text

        Raises:
            DocumentNotFoundError: If the document is absent or unreadable
        """
        pass

    def exists(self, locator: str) -> bool:
        try:
            self.read(locator)
        except DocumentNotFoundError:
            return False
        return True


class DirectoryDocumentStore(DocumentStore):
    """Documents in an extracted Javadoc directory."""

    def __init__(self, root: Path):
        self.root = Path(root)

    def read(self, locator: str) -> str:
        path = self.root / _normalize_locator(locator)
        try:
            return path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            raise DocumentNotFoundError(f"Cannot read {path}: {e}") from e

    def __repr__(self) -> str:
        return f"DirectoryDocumentStore({str(self.root)!r})"


class ZipDocumentStore(DocumentStore):
    """
    Documents inside a Javadoc zip archive.

    Archives often wrap the documentation in a top-level folder; when `prefix`
    is not given it is detected from the location of index.html.
    """

    def __init__(self, zip_path: Path, prefix: Optional[str] = None):
        self.zip_path = Path(zip_path)
        if not self.zip_path.exists():
            raise FileNotFoundError(f"Javadoc archive not found: {self.zip_path}")

        self._lock = threading.Lock()
        self._archive = zipfile.ZipFile(self.zip_path)
        self.prefix = prefix if prefix is not None else self._detect_prefix()
        logger.info(f"Opened Javadoc archive {self.zip_path} (prefix: {self.prefix or '<root>'})")

    def _detect_prefix(self) -> str:
        candidates = [
            name for name in self._archive.namelist()
            if name == "index.html" or name.endswith("/index.html")
        ]
        if not candidates:
            return ""
        shortest = min(candidates, key=lambda name: name.count("/"))
        return shortest[: -len("index.html")]

    def read(self, locator: str) -> str:
        name = self.prefix + _normalize_locator(locator)
        # ZipFile reads share one file handle
        with self._lock:
            try:
                data = self._archive.read(name)
            except KeyError as e:
                raise DocumentNotFoundError(f"{name} not found in {self.zip_path}") from e
            except (OSError, zipfile.BadZipFile) as e:
                raise DocumentNotFoundError(f"Cannot read {name} from {self.zip_path}: {e}") from e
        return data.decode("utf-8", errors="replace")

    def close(self) -> None:
        self._archive.close()

    def __repr__(self) -> str:
        return f"ZipDocumentStore({str(self.zip_path)!r})"


def open_document_store(path: Union[str, Path]) -> DocumentStore:
    """Directory store for directories, zip store for archives."""
    path = Path(path)
    if path.is_dir():
        return DirectoryDocumentStore(path)
    if path.is_file() and zipfile.is_zipfile(path):
        return ZipDocumentStore(path)
    raise FileNotFoundError(f"Javadoc directory or zip archive not found: {path}")
