"""Command-line interface for mcpcatalog."""
