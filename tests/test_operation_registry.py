"""Tests for the operation registry and the startup registrations."""

import logging

import pytest

from postman_mcp.registry import (
    InvalidOperationDefinition,
    OperationAlreadyRegistered,
    OperationDefinition,
    OperationNotFound,
    OperationRegistry,
)
from postman_mcp.registry.operations import TOOL_SET_ORDER, build_registry
from postman_mcp.validators.schema_validator import ObjectShape


def _definition(name, **properties):
    return OperationDefinition(
        name=name,
        description=f"{name} operation",
        input_schema={"type": "object", "properties": properties, "required": []},
    )


class EchoHandler:
    async def handle_tool(self, name, arguments):
        return {"name": name, "arguments": arguments}

    def can_handle_resource(self, uri):
        return False


class TestOperationRegistry:

    @pytest.fixture
    def registry(self):
        return OperationRegistry()

    def test_register_and_lookup(self, registry):
        handler = EchoHandler()
        registry.register([_definition("a"), _definition("b")], handler)
        registered = registry.lookup("b")
        assert registered.definition.name == "b"
        assert registered.handler is handler
        assert "a" in registry
        assert "b" in registry
        assert len(registry) == 2

    def test_lookup_unknown(self, registry):
        with pytest.raises(OperationNotFound, match="Unknown tool: nope"):
            registry.lookup("nope")

    def test_duplicate_across_batches(self, registry):
        registry.register([_definition("a")], EchoHandler())
        with pytest.raises(OperationAlreadyRegistered):
            registry.register([_definition("a")], EchoHandler())

    def test_duplicate_within_batch(self, registry):
        with pytest.raises(OperationAlreadyRegistered):
            registry.register([_definition("a"), _definition("a")], EchoHandler())

    def test_failed_batch_leaves_registry_unchanged(self, registry):
        registry.register([_definition("a")], EchoHandler())
        with pytest.raises(OperationAlreadyRegistered):
            registry.register([_definition("b"), _definition("a")], EchoHandler())
        assert registry.names() == ["a"]

    def test_handler_must_implement_handle_tool(self, registry):
        with pytest.raises(InvalidOperationDefinition):
            registry.register([_definition("a")], object())

    def test_empty_name_rejected(self, registry):
        with pytest.raises(InvalidOperationDefinition):
            registry.register([_definition("")], EchoHandler())

    def test_non_object_schema_rejected(self, registry):
        definition = OperationDefinition("a", "", {"type": "string"})
        with pytest.raises(InvalidOperationDefinition):
            registry.register([definition], EchoHandler())

    def test_registration_order_preserved(self, registry):
        registry.register([_definition("z"), _definition("m")], EchoHandler())
        registry.register([_definition("a")], EchoHandler())
        assert registry.names() == ["z", "m", "a"]
        assert [d.name for d in registry.all()] == ["z", "m", "a"]

    def test_definition_compiles_shape_once(self):
        definition = _definition("a", workspace={"type": "string"})
        assert isinstance(definition.shape, ObjectShape)
        assert definition.shape.field("workspace") is not None
        tool = definition.to_tool()
        assert tool.name == "a"
        assert tool.inputSchema == definition.input_schema


class TestBuildRegistry:
    """The full Postman catalog."""

    @pytest.fixture
    def registry(self, client):
        return build_registry(client)

    def test_catalog_size(self, registry):
        # 7 + 9 + 12 + 1 + 8 + 26 + 13 + 6 + 11
        assert len(registry) == 93

    def test_catalog_is_stable(self, registry):
        first = registry.names()
        second = registry.names()
        assert first == second
        assert [d.name for d in registry.all()] == first

    def test_tool_sets_in_fixed_order(self, registry):
        handler_types = []
        for name in registry.names():
            handler_type = type(registry.lookup(name).handler)
            if not handler_types or handler_types[-1] is not handler_type:
                handler_types.append(handler_type)
        assert handler_types == list(TOOL_SET_ORDER)

    def test_first_and_last_operations(self, registry):
        names = registry.names()
        assert names[0] == "list_workspaces"
        assert names[-1] == "update_workspace_tags"

    def test_every_handler_serves_its_names(self, registry):
        for name in registry.names():
            handler = registry.lookup(name).handler
            assert name in handler.get_handlers(), f"{type(handler).__name__} has no handler for {name}"

    def test_every_schema_compiles_to_object(self, registry):
        for definition in registry.all():
            assert isinstance(definition.shape, ObjectShape), definition.name

    def test_registration_logs_operation_names(self, client, caplog):
        with caplog.at_level(logging.DEBUG, logger="postman_mcp.registry.operations"):
            build_registry(client)
        assert "Registered 93 Postman operations" in caplog.text
        assert "list_workspaces, get_workspace" in caplog.text
