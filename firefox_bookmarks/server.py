"""MCP server for Firefox bookmarks search."""
import json
from typing import Any, List, Optional, Sequence

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import Tool, TextContent

from firefox_bookmarks.change_watcher import FileChangeWatcher
from firefox_bookmarks.config import get_config
from firefox_bookmarks.engine import BookmarkIndexEngine
from firefox_bookmarks.notifications import StderrNotifier
from firefox_bookmarks.search import SearchResult


NOT_INITIALIZED = (
    "Bookmark index is not initialized. Set BOOKMARK_FILE or BOOKMARK_BACKUPS_DIR, "
    "or make sure a Firefox profile with bookmark backups exists."
)


def _text(text: str) -> List[TextContent]:
    return [TextContent(type="text", text=text)]


def _query_terms(arguments: Any) -> List[str]:
    """Collect terms from a 'terms' list or a whitespace-separated 'query'."""
    terms = arguments.get("terms")
    if isinstance(terms, list):
        return [str(t) for t in terms if str(t).strip()]
    return str(arguments.get("query", "")).split()


def _format_results(engine: BookmarkIndexEngine, results: Sequence[SearchResult]) -> str:
    rows = []
    for result in results:
        meta = engine.result_metadata(result)
        rows.append({
            "name": meta.display_name,
            "title": result.title,
            "url": result.url,
            "score": result.score,
            "icon": meta.icon_name,
        })
    return json.dumps(rows, indent=2)


async def health_check_tool(engine: BookmarkIndexEngine) -> List[TextContent]:
    """Tool handler for health_check."""
    status = {
        "state": engine.state.value,
        "bookmark_file": str(engine.bookmark_file) if engine.bookmark_file else None,
        "bookmark_count": len(engine.bookmarks),
    }
    return _text(json.dumps(status, indent=2))


async def search_bookmarks_tool(
    engine: BookmarkIndexEngine,
    terms: List[str],
    limit: Optional[int] = None,
) -> List[TextContent]:
    """Tool handler for search_bookmarks.

    Args:
        engine: Index to search
        terms: Query terms
        limit: Maximum number of results

    Returns:
        List of TextContent with bookmark results
    """
    results = engine.initial_results(terms, limit=limit)

    if results is None:
        return _text(NOT_INITIALIZED)

    if not results:
        return _text(f"No bookmarks found matching query: {' '.join(terms)}")

    return _text(_format_results(engine, results))


async def refine_bookmark_search_tool(
    engine: BookmarkIndexEngine,
    previous: Sequence[Any],
    terms: List[str],
    limit: Optional[int] = None,
) -> List[TextContent]:
    """Tool handler for refine_bookmark_search."""
    results = engine.subsearch_results(previous, terms, limit=limit)

    if results is None:
        return _text(NOT_INITIALIZED)

    if not results:
        return _text(f"No bookmarks found matching query: {' '.join(terms)}")

    return _text(_format_results(engine, results))


async def open_bookmark_tool(engine: BookmarkIndexEngine, url: str) -> List[TextContent]:
    """Tool handler for open_bookmark. Only URLs present in the index are opened."""
    if not engine.is_active:
        return _text(NOT_INITIALIZED)

    bookmark = next((b for b in engine.bookmarks if b.url == url), None)
    if bookmark is None:
        return _text(f"Error: no bookmark with URL {url}")

    if engine.activate(SearchResult(title=bookmark.title, url=bookmark.url, score=0)):
        return _text(f"Opened {url}")
    return _text(f"Error: could not open {url}")


_TERMS_SCHEMA = {
    "type": "array",
    "items": {"type": "string"},
    "description": "Search terms; a bookmark matches if any term matches",
}

_QUERY_SCHEMA = {
    "type": "string",
    "description": "Whitespace-separated search terms (used when 'terms' is absent)",
}


def create_server(engine: BookmarkIndexEngine) -> Server:
    """Create and configure the MCP server.

    Args:
        engine: Bookmark index owned by the caller

    Returns:
        Configured Server instance
    """
    server = Server("firefox-bookmarks-mcp")
    max_results = engine.config.max_results

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        """List available tools."""
        return [
            Tool(
                name="health_check",
                description="Report whether the bookmark index is active, which file it reads, and how many bookmarks it holds.",
                inputSchema={"type": "object", "properties": {}},
            ),
            Tool(
                name="search_bookmarks",
                description="Search Firefox bookmarks by title and URL. Returns ranked bookmarks with name, url and score.",
                inputSchema={
                    "type": "object",
                    "properties": {"query": _QUERY_SCHEMA, "terms": _TERMS_SCHEMA},
                },
            ),
            Tool(
                name="refine_bookmark_search",
                description="Refine a previous bookmark search with a new set of terms.",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "previous": {
                            "type": "array",
                            "items": {"type": "object"},
                            "description": "Results returned by the previous search",
                        },
                        "query": _QUERY_SCHEMA,
                        "terms": _TERMS_SCHEMA,
                    },
                },
            ),
            Tool(
                name="open_bookmark",
                description="Open a bookmarked URL in a new Firefox tab.",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "url": {"type": "string", "description": "URL of a bookmark in the index"}
                    },
                    "required": ["url"],
                },
            ),
        ]

    @server.call_tool()
    async def call_tool(name: str, arguments: Any) -> list[TextContent]:
        """Handle tool calls."""
        arguments = arguments or {}

        if name == "health_check":
            return await health_check_tool(engine)
        elif name == "search_bookmarks":
            terms = _query_terms(arguments)
            if not terms:
                return _text("Error: 'query' or 'terms' parameter is required")
            return await search_bookmarks_tool(engine, terms, limit=max_results)
        elif name == "refine_bookmark_search":
            terms = _query_terms(arguments)
            if not terms:
                return _text("Error: 'query' or 'terms' parameter is required")
            previous = arguments.get("previous") or []
            return await refine_bookmark_search_tool(engine, previous, terms, limit=max_results)
        elif name == "open_bookmark":
            url = arguments.get("url", "")
            if not url:
                return _text("Error: 'url' parameter is required")
            return await open_bookmark_tool(engine, url)
        else:
            raise ValueError(f"Unknown tool: {name}")

    return server


async def main():
    """Main entry point for the MCP server."""
    engine = BookmarkIndexEngine(
        get_config(),
        notifier=StderrNotifier(),
        watcher=FileChangeWatcher(),
    )
    engine.enable()

    server = create_server(engine)

    try:
        async with stdio_server() as (read_stream, write_stream):
            initialization_options = server.create_initialization_options()
            await server.run(read_stream, write_stream, initialization_options)
    finally:
        engine.dispose()
