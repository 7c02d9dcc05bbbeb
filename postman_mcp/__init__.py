"""MCP server exposing the Postman REST API."""

__version__ = "0.1.0"
