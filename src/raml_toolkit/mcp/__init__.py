"""
MCP server exposing raml_toolkit operations.
"""
