"""MCP protocol adapter for mcpcatalog.

Import ``mcpcatalog.mcp.server`` directly; it requires the optional ``mcp``
dependency.
"""
