"""Tests for MCP server wiring."""

import json

import pytest
from mcp import types
from mcp.shared.exceptions import McpError

from postman_mcp import server as server_module
from postman_mcp.config.settings import Settings
from postman_mcp.server import PostmanMCPServer


@pytest.fixture
def mcp_server(client):
    return PostmanMCPServer(Settings(api_key="PMAK-test-key"), client=client)


def _call_request(name, arguments=None):
    return types.CallToolRequest(
        method="tools/call",
        params=types.CallToolRequestParams(name=name, arguments=arguments),
    )


class TestServerWiring:

    def test_shares_injected_client(self, mcp_server, client):
        assert mcp_server.client is client
        assert mcp_server.resource_provider.client is client

    def test_raw_call_tool_handler_registered(self, mcp_server):
        handler = mcp_server.server.request_handlers[types.CallToolRequest]
        assert handler == mcp_server._handle_call_tool

    @pytest.mark.asyncio
    async def test_list_tools(self, mcp_server):
        handler = mcp_server.server.request_handlers[types.ListToolsRequest]
        result = await handler(types.ListToolsRequest(method="tools/list"))
        names = [tool.name for tool in result.root.tools]
        assert names == mcp_server.registry.names()

    @pytest.mark.asyncio
    async def test_call_tool_success(self, mcp_server, postman_api):
        postman_api.route("GET", "/workspaces", json_body={"workspaces": []})
        result = await mcp_server.server.request_handlers[types.CallToolRequest](
            _call_request("list_workspaces", {})
        )
        assert isinstance(result.root, types.CallToolResult)
        assert result.root.isError is False
        assert json.loads(result.root.content[0].text) == {"workspaces": []}

    @pytest.mark.asyncio
    async def test_call_tool_soft_error(self, mcp_server, postman_api):
        postman_api.route("GET", "/me", status=401, json_body={"error": {"message": "Invalid API Key"}})
        result = await mcp_server.call_tool("get_user_info", {})
        assert result.isError is True
        assert "Unauthorized" in result.content[0].text

    @pytest.mark.asyncio
    async def test_unknown_tool_is_protocol_error(self, mcp_server):
        with pytest.raises(McpError) as exc:
            await mcp_server.server.request_handlers[types.CallToolRequest](_call_request("not_a_real_tool"))
        assert exc.value.error.code == types.METHOD_NOT_FOUND

    @pytest.mark.asyncio
    async def test_invalid_arguments_is_protocol_error(self, mcp_server):
        with pytest.raises(McpError) as exc:
            await mcp_server.call_tool("get_workspace", {})
        assert exc.value.error.code == types.INVALID_PARAMS
        assert "workspace" in exc.value.error.message

    @pytest.mark.asyncio
    async def test_list_prompts(self, mcp_server):
        handler = mcp_server.server.request_handlers[types.ListPromptsRequest]
        result = await handler(types.ListPromptsRequest(method="prompts/list"))
        assert [prompt.name for prompt in result.root.prompts] == ["create_collection", "create_environment"]

    @pytest.mark.asyncio
    async def test_read_resource(self, mcp_server, postman_api):
        postman_api.route("GET", "/workspaces", json_body={"workspaces": [{"id": "w1"}]})
        handler = mcp_server.server.request_handlers[types.ReadResourceRequest]
        result = await handler(
            types.ReadResourceRequest(
                method="resources/read",
                params=types.ReadResourceRequestParams(uri="postman://workspaces"),
            )
        )
        contents = result.root.contents[0]
        assert json.loads(contents.text) == {"workspaces": [{"id": "w1"}]}
        assert contents.mimeType == "application/json"


class TestMain:

    def test_missing_api_key_exits(self, monkeypatch):
        monkeypatch.delenv("POSTMAN_API_KEY", raising=False)
        with pytest.raises(SystemExit) as exc:
            server_module.main()
        assert exc.value.code == 1
