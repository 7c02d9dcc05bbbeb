"""
Dispatcher - The request/response cycle for tool calls.

Per call: look the operation up, validate the arguments against its compiled
shape, check resource capability when a ``resourceUri`` is passed, invoke the
owning tool set and normalize whatever comes back.

``invoke`` never raises. It returns either a ``CallToolResult`` (success, or a
soft upstream failure with ``isError: true``) or an ``ErrorEnvelope`` carrying
a protocol-level kind for the server layer to raise as a JSON-RPC error.
"""

import json
import logging
from typing import Any, Dict, Optional, Union

from mcp.types import CallToolResult, TextContent

from ..registry.operation_registry import OperationNotFound, OperationRegistry
from ..validators.schema_validator import ValidationFailure, validate
from .errors import ErrorEnvelope, ErrorKind, InvalidArgumentsError, UpstreamError

logger = logging.getLogger(__name__)

RESOURCE_URI_ARG = "resourceUri"

DispatchResult = Union[CallToolResult, ErrorEnvelope]


def render_payload(payload: Any) -> str:
    """Render a handler payload as tool result text.

    Strings are passed through as-is; everything else is pretty-printed JSON.
    """
    if isinstance(payload, str):
        return payload
    return json.dumps(payload, indent=2, default=str)


def success_result(payload: Any) -> CallToolResult:
    return CallToolResult(
        content=[TextContent(type="text", text=render_payload(payload))],
        isError=False,
    )


class Dispatcher:
    """Runs tool calls against an OperationRegistry."""

    def __init__(self, registry: OperationRegistry):
        self.registry = registry

    async def invoke(self, name: str, raw_args: Optional[Dict[str, Any]]) -> DispatchResult:
        """
        Execute one tool call.

        Args:
            name: Operation name
            raw_args: Untyped arguments from the caller (None means no arguments)

        Returns:
            CallToolResult for successes and soft failures, ErrorEnvelope for
            protocol-level failures
        """
        # Received
        try:
            operation = self.registry.lookup(name)
        except OperationNotFound as e:
            return ErrorEnvelope(ErrorKind.UNKNOWN_OPERATION, str(e), {"tool": name})

        # Validated
        try:
            args = validate({} if raw_args is None else raw_args, operation.definition.shape)
        except ValidationFailure as e:
            logger.debug(f"Rejected arguments for {name}: {e.message}")
            return ErrorEnvelope(ErrorKind.INVALID_ARGUMENTS, e.message, {"tool": name, "field": e.path})

        envelope = self._check_resource(name, args, operation.handler)
        if envelope is not None:
            return envelope

        # Executing
        try:
            payload = await operation.handler.handle_tool(name, args)
            # Completed
            return success_result(payload)
        except InvalidArgumentsError as e:
            return ErrorEnvelope(ErrorKind.INVALID_ARGUMENTS, e.message, {"tool": name})
        except OperationNotFound as e:
            return ErrorEnvelope(ErrorKind.UNKNOWN_OPERATION, str(e), {"tool": name})
        except UpstreamError as e:
            logger.warning(f"Tool {name} failed ({e.kind.value}): {e.message}")
            return ErrorEnvelope(e.kind, e.message, e.to_data()).to_tool_result()
        except Exception as e:
            logger.exception(f"Unexpected error executing tool {name}")
            return ErrorEnvelope(
                ErrorKind.UPSTREAM_INTERNAL, f"Error executing {name}: {e}"
            ).to_tool_result()

    def _check_resource(self, name: str, args: Dict[str, Any], handler: Any) -> Optional[ErrorEnvelope]:
        uri = args.get(RESOURCE_URI_ARG)
        if uri is None:
            return None
        if not isinstance(uri, str):
            return ErrorEnvelope(
                ErrorKind.INVALID_ARGUMENTS,
                f"Field '{RESOURCE_URI_ARG}' must be string",
                {"tool": name, "field": RESOURCE_URI_ARG},
            )
        if not handler.can_handle_resource(uri):
            return ErrorEnvelope(
                ErrorKind.RESOURCE_NOT_HANDLED,
                f"Tool {name} cannot handle resource: {uri}",
                {"tool": name, "uri": uri},
            )
        return None
