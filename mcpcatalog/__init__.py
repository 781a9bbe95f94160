"""mcpcatalog: capability registry and filtering engine for MCP servers."""

__version__ = "0.1.0"
