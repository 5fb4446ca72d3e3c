"""Failures a tool call can end in.

Every class here is caught by the dispatcher and turned into an error
envelope; none of them reach the transport.
"""


class ToolCallError(Exception):
    """Base for expected tool call failures."""


class UnknownToolError(ToolCallError):
    def __init__(self, name: str):
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class ArgumentValidationError(ToolCallError):
    """Arguments did not match the tool's input schema."""

    def __init__(self, message: str, field: str = ""):
        super().__init__(message)
        self.field = field


class TimeFormatError(ToolCallError):
    """A time expression was neither 'now', relative, nor a timestamp."""


class BackendError(ToolCallError):
    """Non-2xx response or transport failure from a backend."""


class BackendTimeoutError(BackendError):
    """Backend did not answer within the call's deadline."""
