"""Tool input schemas.

Each tool is a ToolSpec holding declarative FieldSpec entries. A ToolSpec
compiles its fields into a pydantic model for validation and into a JSON
schema for discovery, so adding a tool is just another entry in TOOL_SPECS.
"""

import copy
from typing import Annotated, Any, Dict, List, Literal, Optional, Tuple, Type

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    TypeAdapter,
    ValidationError,
    create_model,
)

from .errors import UnknownToolError

FieldType = Literal["string", "array", "object"]

_JSON_TYPES = {"string": str, "object": Dict[str, Any]}


class FieldSpec(BaseModel):
    """One input field: its type, whether it is required, and its constraints."""

    model_config = ConfigDict(frozen=True)

    type: FieldType
    description: str = ""
    required: bool = False
    default: Any = None
    allowed_values: Optional[Tuple[str, ...]] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    items: Optional[FieldType] = None

    def annotation(self) -> Any:
        """Python type pydantic validates this field against."""
        if self.allowed_values:
            base = Literal[self.allowed_values]
        elif self.type == "array":
            item = _JSON_TYPES.get(self.items, Any) if self.items else Any
            base = List[item]
        else:
            base = _JSON_TYPES[self.type]

        if (self.min_length is not None or self.max_length is not None) and not self.allowed_values:
            base = Annotated[base, Field(min_length=self.min_length, max_length=self.max_length)]

        # an absent optional field still defaults to None; an explicit null is rejected
        return base

    def pydantic_field(self) -> Any:
        if self.required:
            return Field(..., description=self.description)
        if isinstance(self.default, (list, dict)):
            default = self.default
            return Field(default_factory=lambda: copy.deepcopy(default), description=self.description)
        return Field(default=self.default, description=self.description)

    def json_schema(self) -> Dict[str, Any]:
        schema: Dict[str, Any] = {"type": self.type}
        if self.description:
            schema["description"] = self.description
        if self.allowed_values:
            schema["enum"] = list(self.allowed_values)
        if self.type == "array" and self.items:
            schema["items"] = {"type": self.items}
        length_keys = ("minItems", "maxItems") if self.type == "array" else ("minLength", "maxLength")
        if self.min_length is not None:
            schema[length_keys[0]] = self.min_length
        if self.max_length is not None:
            schema[length_keys[1]] = self.max_length
        if not self.required and self.default is not None:
            schema["default"] = self.default
        return schema


class ToolSpec(BaseModel):
    """Name, description and input schema of one tool."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    inputs: Dict[str, FieldSpec] = Field(default_factory=dict)
    allow_extra: bool = True

    _model: Type[BaseModel] = PrivateAttr()

    def model_post_init(self, __context: Any) -> None:
        for field_name, spec in self.inputs.items():
            if spec.required or spec.default is None:
                continue
            try:
                TypeAdapter(spec.annotation()).validate_python(spec.default)
            except ValidationError as e:
                raise ValueError(
                    f"Default for {self.name}.{field_name} violates its own constraints: {e}"
                ) from e

        self._model = create_model(
            f"{''.join(part.title() for part in self.name.split('_'))}Input",
            __config__=ConfigDict(extra="allow" if self.allow_extra else "forbid"),
            **{
                field_name: (spec.annotation(), spec.pydantic_field())
                for field_name, spec in self.inputs.items()
            },
        )

    @property
    def input_model(self) -> Type[BaseModel]:
        return self._model

    @property
    def input_schema(self) -> Dict[str, Any]:
        """JSON schema advertised to callers."""
        schema: Dict[str, Any] = {
            "type": "object",
            "properties": {name: spec.json_schema() for name, spec in self.inputs.items()},
        }
        required = [name for name, spec in self.inputs.items() if spec.required]
        if required:
            schema["required"] = required
        if not self.allow_extra:
            schema["additionalProperties"] = False
        return schema

    def describe(self) -> Dict[str, Any]:
        return {"name": self.name, "description": self.description, "inputSchema": self.input_schema}


ALERT_STATES = ("alerting", "ok", "paused", "pending")

TOOL_SPECS: Tuple[ToolSpec, ...] = (
    ToolSpec(
        name="query_metrics",
        description="Query metrics from Prometheus via Grafana",
        inputs={
            "query": FieldSpec(
                type="string", required=True, min_length=1, max_length=1000,
                description="PromQL query to execute",
            ),
            "start": FieldSpec(
                type="string", default="1h",
                description='Start time (ISO 8601 or relative like "1h")',
            ),
            "end": FieldSpec(
                type="string", default="now",
                description='End time (ISO 8601 or relative like "now")',
            ),
        },
    ),
    ToolSpec(
        name="get_dashboards",
        description="List all Grafana dashboards",
        inputs={
            "search": FieldSpec(
                type="string", default="", max_length=100,
                description="Search term to filter dashboards",
            ),
        },
    ),
    ToolSpec(
        name="create_dashboard",
        description="Create a new Grafana dashboard",
        inputs={
            "title": FieldSpec(
                type="string", required=True, min_length=1, max_length=200,
                description="Dashboard title",
            ),
            "panels": FieldSpec(
                type="array", items="object", default=[],
                description="Array of panel configurations",
            ),
        },
    ),
    ToolSpec(
        name="get_alerts",
        description="Get current alerts from Grafana",
        inputs={
            "state": FieldSpec(
                type="string", allowed_values=ALERT_STATES,
                description="Filter alerts by state",
            ),
        },
    ),
    ToolSpec(
        name="health_check",
        description="Check the health status of Grafana and connected data sources",
        allow_extra=False,
    ),
)

_REGISTRY: Dict[str, ToolSpec] = {spec.name: spec for spec in TOOL_SPECS}


def get_schema(tool_name: str) -> ToolSpec:
    """Look up a tool's spec, raising UnknownToolError for unregistered names."""
    try:
        return _REGISTRY[tool_name]
    except KeyError:
        raise UnknownToolError(tool_name) from None


def list_tool_specs() -> List[ToolSpec]:
    return list(TOOL_SPECS)
