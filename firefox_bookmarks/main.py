"""Main entry point for the Firefox bookmarks MCP server."""
import asyncio

from firefox_bookmarks.server import main as server_main


def main():
    asyncio.run(server_main())


if __name__ == "__main__":
    main()
