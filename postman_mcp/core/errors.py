"""
Error taxonomy for the Postman MCP server.

Two families of failures exist:

- Protocol-level errors (unknown operation, invalid arguments, resource not
  handled). These are caused by the caller and abort the request with a
  JSON-RPC error.
- Soft errors (everything coming back from the Postman API or the network).
  These are returned as a normal tool result with ``isError: true`` so the
  calling agent can inspect the message and adapt.

Status codes are classified exactly once, in
``postman_mcp.adapters.postman_client``. Everything else works with the
exception types defined here.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from mcp.types import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    CallToolResult,
    ErrorData,
    TextContent,
)


# ============================================================================
# Enums
# ============================================================================

class ErrorKind(Enum):
    """Classified failure kinds surfaced at the dispatcher boundary."""
    UNKNOWN_OPERATION = "unknown_operation"
    INVALID_ARGUMENTS = "invalid_arguments"
    RESOURCE_NOT_HANDLED = "resource_not_handled"
    UPSTREAM_REJECTED = "upstream_rejected"          # 400 / 422 / 429
    UPSTREAM_UNAUTHORIZED = "upstream_unauthorized"  # 401
    UPSTREAM_FORBIDDEN = "upstream_forbidden"        # 403
    UPSTREAM_NOT_FOUND = "upstream_not_found"        # 404
    UPSTREAM_INTERNAL = "upstream_internal"          # 5xx / unrecognized
    TRANSPORT_FAILURE = "transport_failure"          # no response / setup

    @property
    def is_protocol(self) -> bool:
        return self in _PROTOCOL_CODES


_PROTOCOL_CODES = {
    ErrorKind.UNKNOWN_OPERATION: METHOD_NOT_FOUND,
    ErrorKind.INVALID_ARGUMENTS: INVALID_PARAMS,
    ErrorKind.RESOURCE_NOT_HANDLED: INVALID_REQUEST,
}


# ============================================================================
# Exceptions
# ============================================================================

class PostmanMCPError(Exception):
    """Base exception for all server errors."""
    kind: ErrorKind = ErrorKind.UPSTREAM_INTERNAL

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(PostmanMCPError):
    """Startup configuration is missing or invalid."""


class InvalidArgumentsError(PostmanMCPError):
    """Arguments passed schema validation but are still unusable.

    Raised by handlers for checks the schema cannot express, such as the
    ``{ownerId}-{uuid}`` format of environment UIDs.
    """
    kind = ErrorKind.INVALID_ARGUMENTS


class UpstreamError(PostmanMCPError):
    """A Postman API call failed. Subclasses map one-to-one to an ErrorKind."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        method: Optional[str] = None,
        path: Optional[str] = None,
        details: Any = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.method = method
        self.path = path
        self.details = details

    def to_data(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"kind": self.kind.value}
        if self.status_code is not None:
            data["status"] = self.status_code
        if self.path:
            data["endpoint"] = f"{self.method} {self.path}"
        if self.details:
            data["details"] = self.details
        return data


class BadRequest(UpstreamError):
    kind = ErrorKind.UPSTREAM_REJECTED


class RateLimited(UpstreamError):
    kind = ErrorKind.UPSTREAM_REJECTED


class Unauthorized(UpstreamError):
    kind = ErrorKind.UPSTREAM_UNAUTHORIZED


class Forbidden(UpstreamError):
    kind = ErrorKind.UPSTREAM_FORBIDDEN


class NotFound(UpstreamError):
    kind = ErrorKind.UPSTREAM_NOT_FOUND


class UpstreamInternal(UpstreamError):
    kind = ErrorKind.UPSTREAM_INTERNAL


class NoResponse(UpstreamError):
    """Request was sent but nothing came back (timeout, connection reset)."""
    kind = ErrorKind.TRANSPORT_FAILURE


class RequestSetupError(UpstreamError):
    """Request could not be built or sent at all."""
    kind = ErrorKind.TRANSPORT_FAILURE


# ============================================================================
# Envelope
# ============================================================================

@dataclass(frozen=True)
class ErrorEnvelope:
    """Classified failure produced by the dispatcher.

    Protocol kinds are raised by the server as ``McpError``; soft kinds are
    rendered into an ``isError`` tool result.
    """
    kind: ErrorKind
    message: str
    data: Optional[Dict[str, Any]] = None

    @property
    def is_protocol_error(self) -> bool:
        return self.kind.is_protocol

    def to_error_data(self) -> ErrorData:
        """Render as JSON-RPC error data."""
        code = _PROTOCOL_CODES.get(self.kind, INTERNAL_ERROR)
        data = {"kind": self.kind.value}
        if self.data:
            data.update(self.data)
        return ErrorData(code=code, message=self.message, data=data)

    def to_tool_result(self) -> CallToolResult:
        """Render as a soft ``isError`` tool result."""
        text = self.message
        if self.data and self.data.get("details"):
            text = f"{text}\n{json.dumps(self.data['details'], indent=2)}"
        return CallToolResult(
            content=[TextContent(type="text", text=text)],
            isError=True,
        )
