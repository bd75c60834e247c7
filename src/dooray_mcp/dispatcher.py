"""Tool call dispatch: lookup, validation, execution and error normalization.

``Dispatcher.dispatch`` is the single place where exceptions raised below
the MCP layer are turned into results. It never raises: the MCP protocol
expects exactly one structured response per tool call.
"""
import logging
from typing import Any, Optional

from mcp.types import CallToolResult
from pydantic import ValidationError

from . import formatters
from .client import DoorayClient
from .errors import AuthenticationError, DoorayAPIError, TransportError, format_error
from .tools import ToolRegistry

logger = logging.getLogger("dooray-mcp.dispatcher")


def format_validation_error(error: ValidationError) -> str:
    """Render pydantic errors as ``Validation Error: field: msg, ...``."""
    messages = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ()))
        messages.append(f"{location}: {item['msg']}" if location else item["msg"])
    return "Validation Error: " + ", ".join(messages)


class Dispatcher:
    """Turns ``(name, raw arguments)`` into a CallToolResult."""

    def __init__(self, registry: ToolRegistry, client: DoorayClient):
        self.registry = registry
        self.client = client

    async def dispatch(self, name: str, arguments: Optional[Any]) -> CallToolResult:
        logger.info(f"Tool call: {name}")
        logger.debug(f"Tool call arguments for {name}: {arguments}")

        spec = self.registry.lookup(name)
        if spec is None:
            logger.warning(f"Unknown tool requested: {name}")
            return formatters.error_result(f"Error: Unknown tool '{name}'")

        try:
            validated = spec.input_model.model_validate(arguments if arguments is not None else {})
        except ValidationError as e:
            logger.info(f"Invalid arguments for {name}: {e.error_count()} error(s)")
            return formatters.error_result(format_validation_error(e))

        try:
            return await spec.handler(validated, self.client)
        except (AuthenticationError, TransportError) as e:
            logger.error(f"{type(e).__name__} during {name} call: {format_error(e)}")
            return formatters.error_result(f"Error: {format_error(e)}")
        except DoorayAPIError as e:
            logger.error(f"API error during {name} call: {e!r}")
            return formatters.error_result(f"Dooray API Error: {format_error(e)}")
        except Exception as e:
            logger.exception(f"Unexpected error during {name} call")
            return formatters.error_result(f"Error: {format_error(e)}")
