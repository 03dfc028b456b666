"""MCP server exposing the fhir-toolbox codecs as tools (requires ``mcp``)."""
