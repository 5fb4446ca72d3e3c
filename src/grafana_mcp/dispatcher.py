"""Tool dispatch: validate, run the backend adapter, wrap the outcome.

Every invocation yields exactly one ToolResult. This is the only place
failures are turned into error envelopes.
"""

import json
import logging
from typing import Any, Awaitable, Callable, Dict, List, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field

from .config import Settings
from .errors import ToolCallError
from .schemas import ToolSpec, get_schema, list_tool_specs
from .tools import grafana, health, metrics
from .validator import validate

logger = logging.getLogger(__name__)

Handler = Callable[[Dict[str, Any], Settings], Awaitable[Any]]

HANDLERS: Dict[str, Handler] = {
    "query_metrics": metrics.query_metrics,
    "get_dashboards": grafana.get_dashboards,
    "create_dashboard": grafana.create_dashboard,
    "get_alerts": grafana.get_alerts,
    "health_check": health.health_check,
}


class TextContent(BaseModel):
    type: str = "text"
    text: str


class ToolResult(BaseModel):
    """Response envelope for one tool invocation."""

    model_config = ConfigDict(populate_by_name=True)

    content: List[TextContent]
    is_error: bool = Field(default=False, alias="isError")

    @classmethod
    def success(cls, payload: Any) -> "ToolResult":
        return cls(content=[TextContent(text=json.dumps(payload, indent=2))])

    @classmethod
    def error(cls, tool_name: str, message: str) -> "ToolResult":
        return cls(
            content=[TextContent(text=f"Error executing {tool_name}: {message}")],
            is_error=True,
        )

    @property
    def text(self) -> str:
        return self.content[0].text

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class RegisteredTool(NamedTuple):
    spec: ToolSpec
    handler: Handler


class ToolDispatcher:
    """Routes tool invocations by name to their adapters."""

    def __init__(self, settings: Settings, handlers: Optional[Dict[str, Handler]] = None):
        self.settings = settings
        handlers = handlers if handlers is not None else HANDLERS
        self._tools: Dict[str, RegisteredTool] = {}
        for spec in list_tool_specs():
            if spec.name not in handlers:
                raise ValueError(f"No handler registered for tool: {spec.name}")
            self._tools[spec.name] = RegisteredTool(spec, handlers[spec.name])

    def list_tools(self) -> List[Dict[str, Any]]:
        """Name, description and inputSchema of every tool, for discovery."""
        return [tool.spec.describe() for tool in self._tools.values()]

    @property
    def tool_names(self) -> List[str]:
        return list(self._tools)

    async def dispatch(self, name: str, arguments: Any = None) -> ToolResult:
        """Run one tool invocation and wrap its outcome.

        Args:
            name: Tool name
            arguments: Raw arguments from the caller

        Returns:
            ToolResult holding the JSON payload, or isError with
            "Error executing <name>: <message>"
        """
        try:
            get_schema(name)
            tool = self._tools[name]
            args = validate(name, arguments)
            logger.debug(f"Executing {name}({args})")
            payload = await tool.handler(args, self.settings)
            return ToolResult.success(payload)
        except ToolCallError as e:
            logger.warning(f"Tool {name} failed: {e}")
            return ToolResult.error(name, str(e))
        except Exception as e:
            logger.exception(f"Tool {name} raised unexpectedly")
            return ToolResult.error(name, f"{type(e).__name__}: {e}")
