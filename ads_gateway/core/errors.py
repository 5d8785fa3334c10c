"""
Gateway Errors
==============

Error kinds raised by the gateway. Each kind carries the error code and HTTP
status the API reports for it.
"""

from typing import Optional


class GatewayError(Exception):
    """Base class for errors reported to API callers."""

    code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code

    def to_dict(self) -> dict:
        return {"message": self.message, "code": self.code}


class ToolError(GatewayError):
    """Tool execution failure."""


class TooManyConnectionsError(GatewayError):
    """The SSE connection limit is reached."""

    code = "TOO_MANY_CONNECTIONS"
    status_code = 503


class UnknownToolError(ToolError):
    """Requested tool is not in the registry."""

    code = "UNKNOWN_TOOL"
    status_code = 400

    def __init__(self, name: str):
        super().__init__(f"Unknown tool: {name}")
        self.tool_name = name


class InvalidParamsError(ToolError):
    """Tool parameters failed validation."""

    code = "INVALID_PARAMS"
    status_code = 400


class NotFoundError(ToolError):
    """Requested object does not exist in the backend."""

    code = "NOT_FOUND"
    status_code = 404


class UpstreamError(ToolError):
    """The ads backend failed; message and code come from the SDK when known."""

    status_code = 500

    def __init__(self, message: Optional[str] = None, code: Optional[str] = None):
        super().__init__(message or "Internal server error", code)
