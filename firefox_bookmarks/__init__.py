"""Firefox bookmarks search index with an MCP front end."""
