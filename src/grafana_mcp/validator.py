"""Argument validation against the tool schemas."""

from typing import Any, Dict

from pydantic import ValidationError

from .errors import ArgumentValidationError
from .schemas import get_schema


def _format_error(error: Dict[str, Any]) -> ArgumentValidationError:
    loc = ".".join(str(part) for part in error.get("loc", ()))
    field = str(error["loc"][0]) if error.get("loc") else ""
    reason = error.get("msg", "invalid value")
    if loc:
        return ArgumentValidationError(f"Validation error: {loc}: {reason}", field=field)
    return ArgumentValidationError(f"Validation error: {reason}")


def validate(tool_name: str, raw_args: Any) -> Dict[str, Any]:
    """Validate raw arguments for a tool and fill in defaults.

    Args:
        tool_name: Registered tool name
        raw_args: Arguments as received from the caller (None means no arguments)

    Returns:
        Normalized arguments: every declared field present, undeclared
        fields passed through unchanged

    Raises:
        UnknownToolError: tool_name is not registered
        ArgumentValidationError: first violated constraint, naming the field
    """
    spec = get_schema(tool_name)

    if raw_args is None:
        raw_args = {}
    if not isinstance(raw_args, dict):
        raise ArgumentValidationError(
            f"Validation error: arguments must be an object, got {type(raw_args).__name__}"
        )

    try:
        model = spec.input_model.model_validate(raw_args)
    except ValidationError as e:
        raise _format_error(e.errors()[0]) from None

    return model.model_dump()
