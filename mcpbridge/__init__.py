"""Bridge between a stdio MCP client and a streamable HTTP MCP gateway."""

__version__ = "1.0.0b1"