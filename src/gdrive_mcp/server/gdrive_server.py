"""Google Drive / Sheets MCP server.

Exposes Drive files as resources (gdrive:///<file id>) and Drive/Sheets
operations as tools, over the stdio transport. OAuth tokens come from
TokenStorage and are refreshed automatically by the API client.
"""

import asyncio
import logging
from typing import Any

from mcp import types
from mcp.server import Server
from mcp.server.stdio import stdio_server

from gdrive_mcp.__version__ import __version__
from gdrive_mcp.api import GoogleWorkspaceAPI, WorkspaceAPI
from gdrive_mcp.config import get_log_level
from gdrive_mcp.server.dispatcher import ToolDispatcher
from gdrive_mcp.server.resources import ResourceBrowser
from gdrive_mcp.server.tools import TOOLS

logger = logging.getLogger(__name__)

SERVER_NAME = "gdrive-mcp"


class GDriveServer:
    """MCP server for Google Drive and Google Sheets.

    Attributes:
        server: MCP Server instance.
        api: Remote Drive/Sheets capability shared by all requests.
        dispatcher: Tool call dispatcher.
        browser: Resource lister/reader.
    """

    def __init__(self, api: WorkspaceAPI | None = None) -> None:
        """Initialize the server.

        Args:
            api: Remote capability to use. Defaults to GoogleWorkspaceAPI
                backed by the configured token store.
        """
        self.server = Server(SERVER_NAME, version=__version__)
        self.api = api if api is not None else GoogleWorkspaceAPI()
        self.dispatcher = ToolDispatcher(self.api)
        self.browser = ResourceBrowser(self.api)
        self._setup_handlers()

    async def close(self) -> None:
        """Release the API client's HTTP resources."""
        close = getattr(self.api, "close", None)
        if close is not None:
            await close()

    def _setup_handlers(self) -> None:
        """Register MCP request handlers."""

        @self.server.list_tools()
        async def list_tools() -> list[types.Tool]:
            """Return the static tool catalog."""
            return TOOLS

        # Registered directly: the decorators hide the cursor and the isError flag
        async def list_resources(req: types.ListResourcesRequest) -> types.ServerResult:
            cursor = req.params.cursor if req.params is not None else None
            return types.ServerResult(await self.browser.list(cursor))

        async def read_resource(req: types.ReadResourceRequest) -> types.ServerResult:
            return types.ServerResult(await self.browser.read(str(req.params.uri)))

        async def call_tool(req: types.CallToolRequest) -> types.ServerResult:
            return types.ServerResult(
                await self.dispatcher.dispatch(req.params.name, req.params.arguments)
            )

        self.server.request_handlers[types.ListResourcesRequest] = list_resources
        self.server.request_handlers[types.ReadResourceRequest] = read_resource
        self.server.request_handlers[types.CallToolRequest] = call_tool

    async def list_resources(self, cursor: str | None = None) -> types.ListResourcesResult:
        """List one page of Drive files as resources."""
        return await self.browser.list(cursor)

    async def read_resource(self, uri: str) -> types.ReadResourceResult:
        """Read one Drive file."""
        return await self.browser.read(uri)

    async def call_tool(self, name: str, arguments: dict[str, Any] | None) -> types.CallToolResult:
        """Invoke a tool by name."""
        return await self.dispatcher.dispatch(name, arguments)

    async def run(self) -> None:
        """Run the MCP server using stdio transport."""
        try:
            async with stdio_server() as (read_stream, write_stream):
                await self.server.run(
                    read_stream,
                    write_stream,
                    self.server.create_initialization_options(),
                )
        finally:
            await self.close()


def main() -> None:
    """Entry point for the Drive/Sheets MCP server."""
    # stderr only; stdout carries the protocol
    logging.basicConfig(level=get_log_level())
    logger.info("Starting %s %s", SERVER_NAME, __version__)
    server = GDriveServer()
    asyncio.run(server.run())


if __name__ == "__main__":
    main()
