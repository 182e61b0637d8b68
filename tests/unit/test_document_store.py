import zipfile
from pathlib import Path

import pytest

from javadoc_mcp.indexer import (
    DirectoryDocumentStore,
    DocumentNotFoundError,
    DocumentStore,
    ZipDocumentStore,
    open_document_store,
)


def _make_zip(path: Path, files: dict) -> Path:
    with zipfile.ZipFile(path, "w") as archive:
        for name, content in files.items():
            archive.writestr(name, content)
    return path


def test_directory_store_reads_pages(javadoc_dir: Path) -> None:
    store = DirectoryDocumentStore(javadoc_dir)

    assert "Class Widget" in store.read("com/acme/ui/Widget.html")
    assert store.read("com/acme/ui/Widget.html#render()") == store.read("com/acme/ui/Widget.html")
    assert store.exists("index.html")
    assert not store.exists("com/acme/ui/Panel.html")


def test_directory_store_missing_page(javadoc_dir: Path) -> None:
    with pytest.raises(DocumentNotFoundError):
        DirectoryDocumentStore(javadoc_dir).read("com/acme/ui/Panel.html")


def test_locators_cannot_escape_root(javadoc_dir: Path) -> None:
    store = DirectoryDocumentStore(javadoc_dir / "com")

    with pytest.raises(DocumentNotFoundError):
        store.read("../index.html")
    with pytest.raises(DocumentNotFoundError):
        store.read("")


def test_zip_store_detects_prefix(tmp_path: Path) -> None:
    archive = _make_zip(tmp_path / "javadoc.zip", {
        "acme-2.1.0-javadoc/index.html": "<title>Overview</title>",
        "acme-2.1.0-javadoc/com/acme/ui/Widget.html": "<h1>Widget</h1>",
        "acme-2.1.0-javadoc/com/acme/ui/index.html": "<h1>nested</h1>",
    })
    store = ZipDocumentStore(archive)
    try:
        assert store.prefix == "acme-2.1.0-javadoc/"
        assert store.read("com/acme/ui/Widget.html") == "<h1>Widget</h1>"
        with pytest.raises(DocumentNotFoundError):
            store.read("com/acme/ui/Panel.html")
    finally:
        store.close()


def test_zip_store_without_wrapper_folder(tmp_path: Path) -> None:
    archive = _make_zip(tmp_path / "flat.zip", {
        "index.html": "<title>Overview</title>",
        "com/acme/ui/Widget.html": "<h1>Widget</h1>",
    })
    store = ZipDocumentStore(archive)
    try:
        assert store.prefix == ""
        assert store.read("/com/acme/ui/Widget.html") == "<h1>Widget</h1>"
    finally:
        store.close()


def test_open_document_store_picks_implementation(tmp_path: Path, javadoc_dir: Path) -> None:
    archive = _make_zip(tmp_path / "javadoc.zip", {"index.html": ""})

    assert isinstance(open_document_store(javadoc_dir), DirectoryDocumentStore)
    zip_store = open_document_store(archive)
    assert isinstance(zip_store, ZipDocumentStore)
    zip_store.close()

    with pytest.raises(FileNotFoundError):
        open_document_store(tmp_path / "missing")


def test_document_store_requires_read() -> None:
    class Incomplete(DocumentStore):
        pass

    with pytest.raises(TypeError):
        Incomplete()

    class Single(DocumentStore):
        def read(self, locator: str) -> str:
            if locator != "a.html":
                raise DocumentNotFoundError(locator)
            return "<html></html>"

    assert Single().exists("a.html") is True
    assert Single().exists("b.html") is False
