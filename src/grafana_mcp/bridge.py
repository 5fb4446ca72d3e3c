"""REST bridge so agents can call tools with a plain POST instead of an MCP session."""

import json
import logging
import os
from typing import Awaitable, Callable, Optional

from starlette.requests import Request
from starlette.responses import JSONResponse

from .dispatcher import ToolDispatcher


def create_rest_bridge(
    dispatcher: ToolDispatcher,
    name: str,
    auth_token: Optional[str] = None,
) -> Callable[[Request], Awaitable[JSONResponse]]:
    """Create the /api/call endpoint.

    Args:
        dispatcher: Dispatcher the calls are routed to
        name: Service name for logging
        auth_token: Required Bearer token; defaults to A2A_API_TOKEN, empty disables auth

    Returns:
        Async endpoint function for the /api/call route
    """
    logger = logging.getLogger(f"{name}.rest_bridge")

    if auth_token is None:
        auth_token = os.environ.get("A2A_API_TOKEN", "")

    async def api_call(request: Request) -> JSONResponse:
        """Invoke a tool via POST.

        Request body:
            {"tool": "tool_name", "arguments": {...}}

        Response:
            {"status": "success" | "error", "tool": ..., "output": ... | "error": ...}
        """
        if auth_token:
            auth_header = request.headers.get("Authorization", "")
            if not auth_header.startswith("Bearer "):
                return JSONResponse(
                    {"status": "error", "error": "Missing Bearer token"},
                    status_code=401
                )
            if auth_header[7:] != auth_token:
                return JSONResponse(
                    {"status": "error", "error": "Invalid token"},
                    status_code=403
                )

        try:
            body = await request.json()
        except ValueError as e:
            return JSONResponse(
                {"status": "error", "error": f"Invalid JSON: {e}"},
                status_code=400
            )

        tool_name = body.get("tool") if isinstance(body, dict) else None
        if not tool_name:
            return JSONResponse(
                {"status": "error", "error": "Missing 'tool' field"},
                status_code=400
            )

        if tool_name not in dispatcher.tool_names:
            logger.warning(f"Tool not found: {tool_name}")
            return JSONResponse({
                "status": "error",
                "tool": tool_name,
                "error": f"Tool not found: {tool_name}"
            }, status_code=404)

        arguments = body.get("arguments") or {}
        logger.info(f"REST bridge call: {tool_name}({arguments})")
        result = await dispatcher.dispatch(tool_name, arguments)

        if result.is_error:
            return JSONResponse({
                "status": "error",
                "tool": tool_name,
                "error": result.text
            }, status_code=500)

        return JSONResponse({
            "status": "success",
            "tool": tool_name,
            "output": json.loads(result.text)
        })

    return api_call
