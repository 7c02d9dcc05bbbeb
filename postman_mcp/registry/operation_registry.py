"""
Operation Registry - Ordered catalog of Postman operations.

Each feature tool set (workspaces, environments, collections, ...) contributes
a list of operation definitions together with itself as the handler. The
registry merges all contributions into one flat namespace:

- Names are unique across every tool set; a duplicate is a startup error.
- Iteration order is registration order, which is the order clients see in
  ``tools/list``.
- Built once at startup and only read afterwards.

Handlers use double dispatch: the dispatcher passes the operation name back
into ``handler.handle_tool(name, arguments)``.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, NamedTuple, Protocol

from mcp.types import Tool

from ..validators.schema_validator import JSONSchema, Shape, compile_schema

logger = logging.getLogger(__name__)


# ============================================================================
# Data Classes
# ============================================================================

class OperationHandler(Protocol):
    """What the dispatcher needs from a tool set."""

    async def handle_tool(self, name: str, arguments: Dict[str, Any]) -> Any: ...

    def can_handle_resource(self, uri: str) -> bool: ...


@dataclass(frozen=True)
class OperationDefinition:
    """
    Immutable description of one callable operation.

    The shape is compiled from ``input_schema`` once, when the definition is
    created, and reused for every call.
    """
    name: str
    description: str
    input_schema: JSONSchema
    shape: Shape = field(compare=False, repr=False, default=None)

    def __post_init__(self):
        if self.shape is None:
            object.__setattr__(self, "shape", compile_schema(self.input_schema))

    @classmethod
    def from_tool(cls, tool: Tool) -> "OperationDefinition":
        return cls(
            name=tool.name,
            description=tool.description or "",
            input_schema=tool.inputSchema,
        )

    def to_tool(self) -> Tool:
        return Tool(name=self.name, description=self.description, inputSchema=self.input_schema)


class RegisteredOperation(NamedTuple):
    definition: OperationDefinition
    handler: OperationHandler


# ============================================================================
# Exceptions
# ============================================================================

class OperationRegistryError(Exception):
    """Base exception for registry errors."""
    pass


class OperationNotFound(OperationRegistryError):
    """Operation not found in registry."""

    def __init__(self, name: str):
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class OperationAlreadyRegistered(OperationRegistryError):
    """Operation already registered."""
    pass


class InvalidOperationDefinition(OperationRegistryError):
    """Definition or handler is unusable."""
    pass


# ============================================================================
# Registry
# ============================================================================

class OperationRegistry:
    """
    Central registry of all operations.

    Usage:
        registry = OperationRegistry()
        registry.register(workspace_tools.get_definitions(), workspace_tools)
        op = registry.lookup("list_workspaces")
        result = await op.handler.handle_tool(op.definition.name, args)
    """

    def __init__(self):
        self._operations: Dict[str, RegisteredOperation] = {}

    def register(
        self,
        definitions: Iterable[OperationDefinition],
        handler: OperationHandler,
    ) -> None:
        """
        Register a batch of operations served by one handler.

        The batch is checked as a whole before anything is added, so a
        failing call leaves the registry unchanged.

        Args:
            definitions: Operation definitions contributed by a tool set
            handler: Object implementing ``handle_tool`` for those names

        Raises:
            OperationAlreadyRegistered: If any name is already taken, or
                appears twice in the batch
            InvalidOperationDefinition: If a definition or the handler is unusable
        """
        definitions = list(definitions)
        if not callable(getattr(handler, "handle_tool", None)):
            raise InvalidOperationDefinition(
                f"Handler {type(handler).__name__} does not implement handle_tool"
            )

        seen = set()
        for definition in definitions:
            self._validate_definition(definition)
            if definition.name in self._operations:
                owner = type(self._operations[definition.name].handler).__name__
                raise OperationAlreadyRegistered(
                    f"Operation '{definition.name}' already registered by {owner}"
                )
            if definition.name in seen:
                raise OperationAlreadyRegistered(
                    f"Operation '{definition.name}' declared twice by {type(handler).__name__}"
                )
            seen.add(definition.name)

        for definition in definitions:
            self._operations[definition.name] = RegisteredOperation(definition, handler)
            logger.debug(f"Registered operation: {definition.name}")

    def register_tool_set(self, tool_set: Any) -> None:
        """Register every operation a tool set advertises."""
        self.register(tool_set.get_definitions(), tool_set)

    def lookup(self, name: str) -> RegisteredOperation:
        """
        Get operation and handler by name.

        Raises:
            OperationNotFound: If the name is not registered
        """
        try:
            return self._operations[name]
        except KeyError:
            raise OperationNotFound(name) from None

    def all(self) -> List[OperationDefinition]:
        """All definitions in registration order."""
        return [registered.definition for registered in self._operations.values()]

    def names(self) -> List[str]:
        return list(self._operations)

    def __len__(self) -> int:
        return len(self._operations)

    def __contains__(self, name: str) -> bool:
        return name in self._operations

    def _validate_definition(self, definition: OperationDefinition) -> None:
        if not isinstance(definition, OperationDefinition):
            raise InvalidOperationDefinition(f"Not an OperationDefinition: {definition!r}")
        if not definition.name:
            raise InvalidOperationDefinition("Operation name is required")
        schema = definition.input_schema
        if not isinstance(schema, dict) or schema.get("type") != "object":
            raise InvalidOperationDefinition(
                f"Operation '{definition.name}' input schema must be an object schema"
            )
