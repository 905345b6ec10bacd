"""MCP server entry point for the IntelliJ LSP extension."""

from mcp.server.fastmcp import FastMCP

from idea_lsp.tools.lsp_tools import register_lsp_tools

mcp = FastMCP("idea-lsp")


def main():
    """Main entry point for the MCP server."""
    register_lsp_tools(mcp)
    mcp.run()


if __name__ == "__main__":
    main()
