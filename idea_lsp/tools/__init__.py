"""MCP tools for the IntelliJ LSP extension."""
