"""Exceptions raised by the idea-lsp extension."""


class IdeaLspError(Exception):
    """Base class for errors raised by this package."""


class ConfigurationError(IdeaLspError):
    """Invalid local configuration, detected before anything is sent to the server."""
