"""figma-mcp: Figma REST API exposed as an MCP server."""

__version__ = "1.0.0"
