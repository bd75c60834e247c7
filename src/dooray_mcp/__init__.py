"""Dooray MCP Server - Model Context Protocol integration.

This package exposes the Dooray project-management REST API (projects,
tasks, wikis, drive) as MCP tools, enabling AI assistants to work with it.

Modules:
- server: stdio MCP server implementation
- config: credential and environment settings
- client: authenticated Dooray HTTP client (incl. 307 file transfers)
- errors: exception types
- envelope: Dooray response envelope unwrapping
- tools: MCP tool registry
- dispatcher: tool call validation and error normalization
- schemas: pydantic tool input models
- handlers: Tool implementation handlers
- formatters: Response formatting utilities
- prompts, resources: static prompt and reference document tables
"""

__version__ = "0.1.0"

from . import formatters
from . import tools
from . import handlers

__all__ = ["formatters", "tools", "handlers", "__version__"]
