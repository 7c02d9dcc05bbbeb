"""Shared base class for the Postman feature tool sets."""

import logging
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Mapping
from urllib.parse import quote

from mcp import Tool

from ..adapters.postman_client import PostmanClient
from ..registry.operation_registry import OperationDefinition, OperationNotFound
from ..resources.uri_router import RouteFailure, parse_resource_uri

logger = logging.getLogger(__name__)

ToolHandlerFn = Callable[[Dict[str, Any]], Awaitable[Any]]


def endpoint(*parts: Any) -> str:
    """Join path parts into an endpoint, percent-encoding each part."""
    return "/" + "/".join(quote(str(part), safe="") for part in parts)


def pick(arguments: Mapping[str, Any], *keys: str, **renamed: str) -> Dict[str, Any]:
    """Copy the listed argument keys into a query/body dict.

    ``renamed`` maps an output key to the argument key it is read from.
    Missing keys are skipped.
    """
    selected = {key: arguments[key] for key in keys if key in arguments}
    for out_key, arg_key in renamed.items():
        if arg_key in arguments:
            selected[out_key] = arguments[arg_key]
    return selected


class PostmanToolSet:
    """Base for one feature area of the Postman API.

    Subclasses provide ``get_tools()`` (the advertised catalog) and
    ``get_handlers()`` (operation name -> coroutine taking the validated
    arguments). ``resource_types`` lists the first URI segments whose
    resources this tool set operates on.
    """

    resource_types: Iterable[str] = ()

    def __init__(self, client: PostmanClient):
        self.client = client

    def get_tools(self) -> List[Tool]:
        raise NotImplementedError

    def get_handlers(self) -> Dict[str, ToolHandlerFn]:
        raise NotImplementedError

    def get_definitions(self) -> List[OperationDefinition]:
        return [OperationDefinition.from_tool(tool) for tool in self.get_tools()]

    async def handle_tool(self, name: str, arguments: Dict[str, Any]) -> Any:
        """Route a tool call to its handler.

        Raises:
            OperationNotFound: If this tool set does not serve ``name``
        """
        handler = self.get_handlers().get(name)
        if handler is None:
            raise OperationNotFound(name)
        return await handler(arguments)

    def can_handle_resource(self, uri: str) -> bool:
        try:
            segments = parse_resource_uri(uri)
        except RouteFailure:
            return False
        return segments[0] in set(self.resource_types)

