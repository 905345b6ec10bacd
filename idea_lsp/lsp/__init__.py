"""LSP transport and connection management for the IntelliJ language server."""

from idea_lsp.lsp.client import LSPClient
from idea_lsp.lsp.protocol import JSONRPCProtocol
from idea_lsp.lsp.manager import LSPManager, get_lsp_manager

__all__ = ["LSPClient", "JSONRPCProtocol", "LSPManager", "get_lsp_manager"]
