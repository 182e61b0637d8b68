#!/usr/bin/env python3
"""
Javadoc MCP Server

Gives LLM clients searchable access to a Java library's API documentation.

Tools:
1. search_class - Fuzzy search for classes, interfaces, enums, exceptions and annotations
2. get_class_doc - Full Markdown documentation of one class
3. search_method - Fuzzy search for methods across all classes
4. find_package - Find packages by development task (e.g. 'validation')
5. search_package - Fuzzy search for packages by name or description
6. get_index_overview - Version, index statistics and known task categories

Usage:
    # Start server (stdio mode)
    python -m javadoc_mcp.mcp_servers.docs_server \\
        --index-path data/index.json \\
        --docs-path javadoc.zip

    # Or via CLI
    javadoc-mcp serve --index-path data/index.json --docs-path javadoc/
"""

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import Tool, TextContent
from pydantic import BaseModel, Field

from javadoc_mcp import config
from javadoc_mcp.cache import DetailCache
from javadoc_mcp.formatters import format_class_markdown
from javadoc_mcp.indexer import DocumentationIndexer, open_document_store
from javadoc_mcp.schemas import EntityKind, SearchSettings

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging(log_file: Optional[Path] = None, level: int = logging.INFO) -> None:
    """Log to a file or stderr; stdout carries the MCP protocol."""
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_file)
    else:
        handler = logging.StreamHandler(sys.stderr)

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=[handler], force=True)


# ============================================================================
# PYDANTIC MODELS FOR TOOL ARGUMENTS
# ============================================================================

class SearchClassArgs(BaseModel):
    """Arguments for search_class tool."""
    query: str = Field(..., min_length=1, description="Class name or description text (e.g., 'Adaptation', 'table access')")
    kind: Optional[EntityKind] = Field(None, description="Filter by kind: class, interface, enum, exception, annotation")
    package: Optional[str] = Field(None, description="Only return classes of this exact package")
    limit: int = Field(10, ge=1, description="Maximum number of results (default: 10)")


class GetClassDocArgs(BaseModel):
    """Arguments for get_class_doc tool."""
    class_name: str = Field(..., min_length=1, description="Fully-qualified or simple class name (e.g., 'com.onwbp.adaptation.Adaptation')")
    include_inherited: bool = Field(False, description="Include inherited members (currently has no effect)")


class SearchMethodArgs(BaseModel):
    """Arguments for search_method tool."""
    method_name: str = Field(..., min_length=1, description="Method name to search for (e.g., 'getTable')")
    class_name: Optional[str] = Field(None, description="Only methods whose class name contains this text")
    return_type: Optional[str] = Field(None, description="Only methods whose return type contains this text")
    limit: int = Field(10, ge=1, description="Maximum number of results (default: 10)")


class FindPackageArgs(BaseModel):
    """Arguments for find_package tool."""
    task: str = Field(..., min_length=1, description="Development task or domain (e.g., 'data access', 'validation')")


class SearchPackageArgs(BaseModel):
    """Arguments for search_package tool."""
    query: str = Field(..., min_length=1, description="Package name or description text")
    limit: int = Field(10, ge=1, description="Maximum number of results (default: 10)")


class GetIndexOverviewArgs(BaseModel):
    """Arguments for get_index_overview tool."""
    pass  # No arguments needed


# ============================================================================
# JAVADOC SERVER
# ============================================================================

class JavadocMCPServer:
    """
    MCP Server for Javadoc index access.

    Provides tools for:
    - Class, method and package search
    - Task-oriented package discovery
    - Full class documentation as Markdown
    """

    def __init__(
        self,
        index_path: Path,
        docs_path: Path,
        cache_size: int = config.DEFAULT_CACHE_SIZE,
        settings: Optional[SearchSettings] = None,
    ):
        """
        Initialize Javadoc server.

        Args:
            index_path: Path to the JSON index produced by build-index
            docs_path: Javadoc directory or zip archive with the class pages
            cache_size: Number of parsed class pages kept in memory
            settings: Search knobs (defaults when omitted)
        """
        self.index_path = Path(index_path)
        self.docs_path = Path(docs_path)
        self.server = Server("javadoc")

        logger.info(f"Initializing DocumentationIndexer with index: {self.index_path}")
        self.indexer = DocumentationIndexer(
            self.index_path,
            open_document_store(self.docs_path),
            cache=DetailCache(max_size=cache_size),
            settings=settings,
        )
        self.indexer.initialize()

        self._register_tools()

        logger.info("Javadoc server initialized successfully")

    def _register_tools(self):
        """Register all MCP tools."""

        @self.server.list_tools()
        async def list_tools() -> List[Tool]:
            return [
                Tool(
                    name="search_class",
                    description=(
                        "Search for classes, interfaces, enums, exceptions or annotations by name "
                        "or description. Returns matching classes with brief descriptions and key "
                        "methods. Tolerates typos."
                    ),
                    inputSchema=SearchClassArgs.model_json_schema()
                ),
                Tool(
                    name="get_class_doc",
                    description=(
                        "Get complete documentation for a specific class. Returns Markdown with "
                        "methods, fields, inheritance, deprecation and related classes."
                    ),
                    inputSchema=GetClassDocArgs.model_json_schema()
                ),
                Tool(
                    name="search_method",
                    description=(
                        "Search for methods across all classes. Returns matching methods with their "
                        "signatures and declaring classes; overloads are listed separately."
                    ),
                    inputSchema=SearchMethodArgs.model_json_schema()
                ),
                Tool(
                    name="find_package",
                    description=(
                        "Find packages by development task or domain (e.g., 'data access', "
                        "'validation'). Returns relevant packages with their key classes."
                    ),
                    inputSchema=FindPackageArgs.model_json_schema()
                ),
                Tool(
                    name="search_package",
                    description=(
                        "Search for packages by name or description. Returns matching packages "
                        "with a preview of their classes."
                    ),
                    inputSchema=SearchPackageArgs.model_json_schema()
                ),
                Tool(
                    name="get_index_overview",
                    description=(
                        "Get the documented library version, index statistics and the task "
                        "categories accepted by find_package. Use this first to orient yourself."
                    ),
                    inputSchema=GetIndexOverviewArgs.model_json_schema()
                ),
            ]

        @self.server.call_tool()
        async def call_tool(name: str, arguments: Any) -> List[TextContent]:
            """Route tool calls to appropriate handlers."""
            logger.info(f"Tool called: {name} with args: {arguments}")

            try:
                result = await self.dispatch(name, arguments or {})
                text = result if isinstance(result, str) else json.dumps(result, indent=2)
                return [TextContent(type="text", text=text)]

            except Exception as e:
                logger.error(f"Error in tool {name}: {e}", exc_info=True)
                error_result = {
                    "success": False,
                    "error": str(e),
                    "tool": name
                }
                return [TextContent(type="text", text=json.dumps(error_result, indent=2))]

    async def dispatch(self, name: str, args: Dict) -> Union[Dict, str]:
        """Run the handler of a tool; raises ValueError for unknown tools."""
        if name == "search_class":
            return await self._handle_search_class(args)
        elif name == "get_class_doc":
            return await self._handle_get_class_doc(args)
        elif name == "search_method":
            return await self._handle_search_method(args)
        elif name == "find_package":
            return await self._handle_find_package(args)
        elif name == "search_package":
            return await self._handle_search_package(args)
        elif name == "get_index_overview":
            return await self._handle_get_index_overview(args)
        raise ValueError(f"Unknown tool: {name}")

    # ========================================================================
    # TOOL HANDLERS
    # ========================================================================

    async def _handle_search_class(self, args: Dict) -> Dict:
        """
        Handle search_class tool call.

        Fuzzy matching runs in a worker thread, as class page parsing does.

        Args:
            args: Tool arguments (query, kind, package, limit)

        Returns:
            Search results with class summaries
        """
        validated_args = SearchClassArgs(**args)

        results = await asyncio.to_thread(
            self.indexer.search_classes,
            validated_args.query,
            kind=validated_args.kind,
            package=validated_args.package,
            limit=validated_args.limit,
        )

        return {
            "success": True,
            "query": validated_args.query,
            "filters": {
                "kind": validated_args.kind.value if validated_args.kind else None,
                "package": validated_args.package,
            },
            "total_results": len(results),
            "results": [result.model_dump(mode="json") for result in results],
        }

    async def _handle_get_class_doc(self, args: Dict) -> Union[Dict, str]:
        """
        Handle get_class_doc tool call.

        Class pages are parsed in a worker thread; the event loop keeps serving
        other calls meanwhile.

        Returns:
            Markdown documentation, or an error result if the class is unknown
        """
        validated_args = GetClassDocArgs(**args)

        doc = await asyncio.to_thread(
            self.indexer.get_class_doc,
            validated_args.class_name,
            validated_args.include_inherited,
        )

        if doc is None:
            return {
                "success": False,
                "error": f"Class not found: {validated_args.class_name}",
            }

        return format_class_markdown(doc)

    async def _handle_search_method(self, args: Dict) -> Dict:
        """Handle search_method tool call."""
        validated_args = SearchMethodArgs(**args)

        results = await asyncio.to_thread(
            self.indexer.search_methods,
            validated_args.method_name,
            class_name=validated_args.class_name,
            return_type=validated_args.return_type,
            limit=validated_args.limit,
        )

        return {
            "success": True,
            "method_name": validated_args.method_name,
            "filters": {
                "class_name": validated_args.class_name,
                "return_type": validated_args.return_type,
            },
            "total_results": len(results),
            "results": [result.model_dump(mode="json") for result in results],
        }

    async def _handle_find_package(self, args: Dict) -> Dict:
        """Handle find_package tool call."""
        validated_args = FindPackageArgs(**args)

        results = self.indexer.find_packages_by_task(validated_args.task)

        return {
            "success": True,
            "task": validated_args.task,
            "total_results": len(results),
            "relevant_packages": [result.model_dump(mode="json") for result in results],
        }

    async def _handle_search_package(self, args: Dict) -> Dict:
        """Handle search_package tool call."""
        validated_args = SearchPackageArgs(**args)

        results = await asyncio.to_thread(
            self.indexer.search_packages,
            validated_args.query,
            limit=validated_args.limit,
        )

        return {
            "success": True,
            "query": validated_args.query,
            "total_results": len(results),
            "results": [result.model_dump(mode="json") for result in results],
        }

    async def _handle_get_index_overview(self, args: Dict) -> Dict:
        """Handle get_index_overview tool call."""
        GetIndexOverviewArgs(**args)

        return {
            "success": True,
            "version": self.indexer.get_version(),
            "statistics": self.indexer.get_stats().model_dump(),
            "task_categories": sorted(self.indexer.search_engine.categories_by_task),
            "cache": self.indexer.cache.get_stats(),
        }

    # ========================================================================
    # SERVER LIFECYCLE
    # ========================================================================

    async def run(self):
        """Run the MCP server (stdio mode)."""
        logger.info("Starting Javadoc MCP server (stdio mode)")
        async with stdio_server() as (read_stream, write_stream):
            await self.server.run(
                read_stream,
                write_stream,
                self.server.create_initialization_options()
            )


# ============================================================================
# MAIN ENTRY POINT
# ============================================================================

def main():
    """Main entry point for Javadoc MCP server."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Javadoc MCP Server - Provides LLM access to Java API documentation"
    )
    parser.add_argument(
        "--index-path",
        type=Path,
        default=config.index_path(),
        help="Path to the JSON index (default: $JAVADOC_MCP_INDEX_PATH or data/index.json)"
    )
    parser.add_argument(
        "--docs-path",
        type=Path,
        default=config.docs_path(),
        help="Javadoc directory or zip archive (default: $JAVADOC_MCP_DOCS_PATH)"
    )
    parser.add_argument(
        "--cache-size",
        type=int,
        default=None,
        help="Number of parsed class pages kept in memory (default: 50)"
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=config.log_file(),
        help="Log file (default: stderr)"
    )

    args = parser.parse_args()

    configure_logging(args.log_file)

    if args.docs_path is None:
        print("Error: --docs-path or JAVADOC_MCP_DOCS_PATH is required", file=sys.stderr)
        sys.exit(1)

    if not args.index_path.exists():
        print(f"Error: Index not found: {args.index_path}", file=sys.stderr)
        sys.exit(1)

    try:
        server = JavadocMCPServer(
            args.index_path,
            args.docs_path,
            cache_size=args.cache_size or config.cache_size(),
            settings=config.search_settings(),
        )
        asyncio.run(server.run())
    except Exception as e:
        logger.error(f"Server failed: {e}", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
