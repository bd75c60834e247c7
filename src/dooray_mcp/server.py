"""Dooray MCP Server - Expose Dooray projects, wikis and drive to AI assistants."""
import sys
import asyncio
import logging
from typing import Any, Iterable, Optional

from dotenv import load_dotenv
from mcp.server import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.stdio import stdio_server
from mcp.types import CallToolResult, GetPromptResult, Prompt, Resource, Tool
from pydantic import AnyUrl

from . import __version__
from . import prompts
from . import resources
from . import tools
from .client import DoorayClient
from .config import get_log_level, load_credential
from .dispatcher import Dispatcher
from .errors import AuthenticationError

logger = logging.getLogger("dooray-mcp")

SERVER_NAME = "dooray-mcp"


def create_server(client: DoorayClient) -> Server:
    """Build the MCP server instance around an injected DoorayClient."""
    app = Server(SERVER_NAME, version=__version__)
    registry = tools.build_registry()
    dispatcher = Dispatcher(registry, client)

    @app.list_tools()
    async def list_tools() -> list[Tool]:
        """List available MCP tools for Dooray."""
        return [spec.to_tool() for spec in registry.list_all()]

    # Arguments are validated by the dispatcher against the pydantic models.
    @app.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: Any) -> CallToolResult:
        """Handle MCP tool calls by delegating to the dispatcher."""
        return await dispatcher.dispatch(name, arguments)

    @app.list_prompts()
    async def list_prompts() -> list[Prompt]:
        return prompts.list_prompts()

    @app.get_prompt()
    async def get_prompt(name: str, arguments: Optional[dict[str, str]]) -> GetPromptResult:
        return prompts.get_prompt(name, arguments)

    @app.list_resources()
    async def list_resources() -> list[Resource]:
        return resources.list_resources()

    @app.read_resource()
    async def read_resource(uri: AnyUrl) -> Iterable[ReadResourceContents]:
        return resources.read_resource(str(uri), client.base_url)

    return app


def configure_logging(level: str) -> None:
    # stdout carries the MCP protocol; logs go to stderr.
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr,
        force=True
    )


async def main():
    """Run the MCP server."""
    load_dotenv()
    configure_logging(get_log_level())

    try:
        credential = load_credential()
    except AuthenticationError as e:
        logger.error(f"Failed to start Dooray MCP server: {e}")
        sys.exit(1)

    logger.info(f"MCP Server starting with DOORAY_API_BASE_URL: {credential.base_url}")
    async with DoorayClient(credential) as client:
        app = create_server(client)
        async with stdio_server() as (read_stream, write_stream):
            await app.run(read_stream, write_stream, app.create_initialization_options())


def run():
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
