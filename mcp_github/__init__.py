"""
MCP GitHub - MCP server for GitHub issues, pull requests and commit-range analytics.

Authenticates through an already logged-in GitHub CLI and exposes the
operations as MCP tools (stdio or SSE) and as a REST bridge.
"""
__version__ = "1.0.0"
