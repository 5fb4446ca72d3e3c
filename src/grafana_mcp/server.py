"""Grafana MCP Server - Main entry point."""

import logging
from typing import Any, Dict

import uvicorn
from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.tools import Tool
from fastmcp.tools.tool import ToolResult as MCPToolResult
from mcp.types import TextContent
from pydantic import Field
from starlette.applications import Starlette
from starlette.responses import JSONResponse
from starlette.routing import Mount, Route

from . import __version__
from .bridge import create_rest_bridge
from .config import Settings, setup_logging
from .dispatcher import ToolDispatcher

logger = logging.getLogger(__name__)

SERVICE_NAME = "grafana-mcp"

INSTRUCTIONS = """Grafana and Prometheus tools.

Provides tools for:
- **query_metrics**: PromQL range queries against Prometheus
- **get_dashboards** / **create_dashboard**: Grafana dashboards
- **get_alerts**: Grafana alerts with a per-state summary
- **health_check**: Grafana and Prometheus health

Times accept "now", relative offsets like "30m", "1h", "2d", or ISO 8601.
"""


class DispatchedTool(Tool):
    """MCP tool whose calls run through the ToolDispatcher."""

    dispatcher: Any = Field(exclude=True)

    async def run(self, arguments: Dict[str, Any]) -> MCPToolResult:
        result = await self.dispatcher.dispatch(self.name, arguments)
        if result.is_error:
            raise ToolError(result.text)
        return MCPToolResult(content=[TextContent(type="text", text=result.text)])


def create_mcp_server(dispatcher: ToolDispatcher) -> FastMCP:
    """Create the FastMCP server and register every tool the dispatcher knows."""
    mcp = FastMCP(name=SERVICE_NAME, instructions=INSTRUCTIONS)
    for tool in dispatcher.list_tools():
        mcp.add_tool(DispatchedTool(
            name=tool["name"],
            description=tool["description"],
            parameters=tool["inputSchema"],
            dispatcher=dispatcher,
        ))
    return mcp


def create_app(settings: Settings) -> Starlette:
    """Starlette app with health routes, the REST bridge and MCP mounted at /."""
    dispatcher = ToolDispatcher(settings)
    mcp = create_mcp_server(dispatcher)

    async def health(request):
        """Health check endpoint."""
        return JSONResponse({
            "status": "healthy",
            "service": SERVICE_NAME,
            "version": __version__,
            "tools": dispatcher.tool_names,
        })

    async def ready(request):
        """Readiness probe."""
        return JSONResponse({"ready": True})

    # Use http_app() for stateless HTTP MCP transport
    mcp_app = mcp.http_app(stateless_http=True)

    routes = [
        Route("/health", health, methods=["GET"]),
        Route("/ready", ready, methods=["GET"]),
        Route("/api/call", create_rest_bridge(dispatcher, SERVICE_NAME), methods=["POST"]),
        Mount("/", app=mcp_app),
    ]

    app = Starlette(routes=routes, lifespan=mcp_app.lifespan)
    app.state.mcp = mcp
    app.state.dispatcher = dispatcher
    return app


settings = Settings.from_env()
app = create_app(settings)


def main():
    """Run the server."""
    setup_logging(settings.log_level)
    logger.info(
        f"Starting {SERVICE_NAME} on {settings.host}:{settings.port} "
        f"(grafana={settings.grafana.base_url}, prometheus={settings.prometheus.base_url})"
    )
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
