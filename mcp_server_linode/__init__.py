"""MCP server exposing the Linode API across several named accounts."""

__version__ = "0.1.0"
