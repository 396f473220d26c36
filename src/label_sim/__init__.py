"""Music label economic simulation engine and MCP server."""
