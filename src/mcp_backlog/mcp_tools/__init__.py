"""MCP tool definitions and handlers, one module per Backlog domain."""
