"""Synchronous business logic behind the MCP tools."""
