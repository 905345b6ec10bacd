"""Client extension for the IntelliJ LSP dialect (idea/* methods)."""

__version__ = "0.1.0"
