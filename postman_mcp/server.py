"""Main MCP server implementation for the Postman API."""

import asyncio
import logging
import sys
from typing import Any, Dict, List, Optional

from mcp import Resource, Tool
from mcp import types
from mcp.server import NotificationOptions, Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.models import InitializationOptions
from mcp.shared.exceptions import McpError
from mcp.types import CallToolResult, GetPromptResult, Prompt, ResourceTemplate

from . import __version__
from .adapters.postman_client import PostmanClient
from .config.settings import Settings, configure_logging, load_settings
from .core.dispatcher import Dispatcher
from .core.errors import ConfigurationError, ErrorEnvelope
from .prompts.postman_prompts import PostmanPrompts
from .registry.operations import build_registry
from .resources.postman_resources import PostmanResourceProvider

logger = logging.getLogger(__name__)

SERVER_NAME = "postman-mcp-server"


class PostmanMCPServer:
    """MCP Server exposing the Postman API as tools, resources and prompts."""

    def __init__(self, settings: Settings, client: Optional[PostmanClient] = None):
        """Initialize the MCP server around one shared Postman client.

        Args:
            settings: Validated runtime settings
            client: Pre-built client (tests inject one with a mock transport)
        """
        self.settings = settings
        self.client = client or PostmanClient(
            settings.api_key, base_url=settings.base_url, timeout=settings.timeout
        )

        self.registry = build_registry(self.client)
        self.dispatcher = Dispatcher(self.registry)
        self.resource_provider = PostmanResourceProvider(self.client)
        self.prompts = PostmanPrompts()

        # Create MCP server instance
        self.server = Server(SERVER_NAME)

        # Register handlers
        self._register_handlers()

    def _register_handlers(self):
        """Register all MCP handlers."""

        @self.server.list_tools()
        async def handle_list_tools() -> List[Tool]:
            """List all available tools."""
            return [definition.to_tool() for definition in self.registry.all()]

        # Registered raw so the dispatcher alone validates arguments and
        # protocol-level failures reach the client as JSON-RPC errors
        self.server.request_handlers[types.CallToolRequest] = self._handle_call_tool

        @self.server.list_resources()
        async def handle_list_resources() -> List[Resource]:
            """List all available resources."""
            return await self.resource_provider.list_resources()

        @self.server.list_resource_templates()
        async def handle_list_resource_templates() -> List[ResourceTemplate]:
            return await self.resource_provider.list_resource_templates()

        @self.server.read_resource()
        async def handle_read_resource(uri) -> List[ReadResourceContents]:
            """Read a specific resource."""
            return await self.resource_provider.read_resource(str(uri))

        @self.server.list_prompts()
        async def handle_list_prompts() -> List[Prompt]:
            return await self.prompts.list_prompts()

        @self.server.get_prompt()
        async def handle_get_prompt(name: str, arguments: Optional[Dict[str, str]]) -> GetPromptResult:
            return await self.prompts.get_prompt(name, arguments)

    async def _handle_call_tool(self, request: types.CallToolRequest) -> types.ServerResult:
        result = await self.call_tool(request.params.name, request.params.arguments)
        return types.ServerResult(result)

    async def call_tool(self, name: str, arguments: Optional[Dict[str, Any]]) -> CallToolResult:
        """Run a tool call through the dispatcher.

        Raises:
            McpError: For unknown tools, invalid arguments and resources the
                tool cannot handle
        """
        outcome = await self.dispatcher.invoke(name, arguments)
        if isinstance(outcome, ErrorEnvelope):
            if outcome.is_protocol_error:
                raise McpError(outcome.to_error_data())
            return outcome.to_tool_result()
        return outcome

    async def run(self):
        """Run the MCP server over stdio."""
        from mcp.server.stdio import stdio_server

        try:
            async with stdio_server() as (read_stream, write_stream):
                await self.server.run(
                    read_stream,
                    write_stream,
                    InitializationOptions(
                        server_name=SERVER_NAME,
                        server_version=__version__,
                        capabilities=self.server.get_capabilities(
                            notification_options=NotificationOptions(),
                            experimental_capabilities={}
                        )
                    )
                )
        finally:
            await self.client.close()


def main():
    """Main entry point for the MCP server."""
    try:
        settings = load_settings()
    except ConfigurationError as e:
        configure_logging()
        logger.error(f"Configuration error: {e.message}")
        sys.exit(1)

    configure_logging(settings.log_level)
    logger.info(f"Starting {SERVER_NAME} {__version__} against {settings.base_url}")
    server = PostmanMCPServer(settings)
    asyncio.run(server.run())


if __name__ == "__main__":
    main()
