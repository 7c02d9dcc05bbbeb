"""Tests for access control and additional feature tools."""

import pytest

from postman_mcp.core.errors import InvalidArgumentsError
from postman_mcp.tools.auth_tools import MAX_ROLE_OPERATIONS, AuthTools
from postman_mcp.tools.feature_tools import FeatureTools
from postman_mcp.validators.schema_validator import is_valid

ROLE_OPERATION = {"op": "update", "path": "/user", "value": [{"id": 1, "role": "EDITOR"}]}


class TestAuthTools:

    @pytest.fixture
    def tools(self, client):
        return AuthTools(client)

    @pytest.fixture
    def definitions(self, tools):
        return {definition.name: definition for definition in tools.get_definitions()}

    def test_workspace_roles_capped(self, definitions):
        shape = definitions["update_workspace_roles"].shape
        assert is_valid({"workspaceId": "w1", "operations": [ROLE_OPERATION] * MAX_ROLE_OPERATIONS}, shape)
        assert not is_valid({"workspaceId": "w1", "operations": [ROLE_OPERATION] * (MAX_ROLE_OPERATIONS + 1)}, shape)

    def test_role_enum_enforced(self, definitions):
        shape = definitions["update_collection_roles"].shape
        bad = {**ROLE_OPERATION, "value": [{"id": 1, "role": "OWNER"}]}
        assert not is_valid({"collectionId": "c1", "operations": [bad]}, shape)

    @pytest.mark.asyncio
    async def test_update_workspace_roles(self, tools, postman_api):
        postman_api.route("PATCH", "/workspaces/w1/roles", json_body={"roles": []})
        await tools.handle_tool("update_workspace_roles", {
            "workspaceId": "w1", "operations": [ROLE_OPERATION], "identifierType": "scim",
        })
        assert postman_api.last_json() == {"roles": [ROLE_OPERATION]}
        assert postman_api.last.headers["identifierType"] == "scim"

    @pytest.mark.asyncio
    async def test_get_workspace_roles_scim(self, tools, postman_api):
        postman_api.route("GET", "/workspaces/w1/roles", json_body={"roles": {}})
        await tools.handle_tool("get_workspace_roles", {"workspaceId": "w1", "includeScim": True})
        assert postman_api.last.url.params["include"] == "scim"

    @pytest.mark.asyncio
    async def test_list_access_keys(self, tools, postman_api):
        postman_api.route("GET", "/collection-access-keys", json_body={"data": []})
        await tools.handle_tool("list_collection_access_keys", {"collectionId": "c1"})
        assert postman_api.last.url.params["collectionId"] == "c1"


class TestFeatureTools:

    @pytest.fixture
    def tools(self, client):
        return FeatureTools(client)

    @pytest.mark.asyncio
    async def test_add_pan_folder(self, tools, postman_api):
        postman_api.route("POST", "/network/private", json_body={"folder": {"id": 1}})
        await tools.handle_tool("add_pan_element", {"type": "folder", "name": "Payments", "parentFolderId": 0})
        assert postman_api.last_json() == {"folder": {"name": "Payments", "parentFolderId": 0}}

    @pytest.mark.asyncio
    async def test_add_pan_element(self, tools, postman_api):
        postman_api.route("POST", "/network/private", json_body={"collection": {"id": "c1"}})
        await tools.handle_tool("add_pan_element", {"type": "collection", "name": "C", "elementId": "c1"})
        assert postman_api.last_json() == {"collection": {"id": "c1"}}

    @pytest.mark.asyncio
    async def test_add_pan_element_requires_element_id(self, tools, postman_api):
        with pytest.raises(InvalidArgumentsError, match="elementId"):
            await tools.handle_tool("add_pan_element", {"type": "api", "name": "A"})
        assert postman_api.requests == []

    @pytest.mark.asyncio
    async def test_update_pan_element(self, tools, postman_api):
        postman_api.route("PUT", "/network/private/api/a1", json_body={"api": {"id": "a1"}})
        await tools.handle_tool("update_pan_element", {"elementId": "a1", "elementType": "api", "summary": "s"})
        assert postman_api.last_json() == {"api": {"summary": "s"}}

    @pytest.mark.asyncio
    async def test_create_webhook(self, tools, postman_api):
        postman_api.route("POST", "/webhooks", json_body={"webhook": {"id": "h1"}})
        webhook = {"name": "Trigger", "collection": "c1"}
        await tools.handle_tool("create_webhook", {"workspace": "w1", "webhook": webhook})
        assert postman_api.last_json() == {"webhook": webhook}
        assert postman_api.last.url.params["workspace"] == "w1"

    @pytest.mark.asyncio
    async def test_account_invoices(self, tools, postman_api):
        postman_api.route("GET", "/accounts/acc1/invoices", json_body={"data": []})
        await tools.handle_tool("list_account_invoices", {"accountId": "acc1", "status": "PAID"})
        assert postman_api.last.url.params["status"] == "PAID"

    @pytest.mark.asyncio
    async def test_tagged_elements(self, tools, postman_api):
        postman_api.route("GET", "/tags/payments/entities", json_body={"data": {"entities": []}})
        await tools.handle_tool("get_tagged_elements", {"slug": "payments", "entityType": "api"})
        assert postman_api.last.url.params["entityType"] == "api"
