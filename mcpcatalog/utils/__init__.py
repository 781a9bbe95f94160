"""Utility modules for mcpcatalog."""
