"""MCP servers exposing the Javadoc index."""

from .docs_server import JavadocMCPServer

__all__ = ["JavadocMCPServer"]
