"""Tests for API builder tools."""

import pytest

from postman_mcp.registry import OperationDefinition
from postman_mcp.tools.api_tools import ApiTools
from postman_mcp.validators.schema_validator import is_valid

V10 = "application/vnd.api.v10+json"


@pytest.fixture
def tools(client):
    return ApiTools(client)


class TestApiToolSchemas:

    @pytest.fixture
    def definitions(self, tools):
        return {definition.name: definition for definition in tools.get_definitions()}

    def test_catalog(self, tools, definitions):
        assert len(definitions) == 26
        assert set(definitions) == set(tools.get_handlers())

    def test_schema_type_enum_enforced(self, definitions):
        shape = definitions["create_api_schema"].shape
        files = [{"path": "index.json", "content": "{}"}]
        assert is_valid({"apiId": "a1", "type": "openapi:3", "files": files}, shape)
        assert not is_valid({"apiId": "a1", "type": "openapi:4", "files": files}, shape)

    def test_include_items_enum_enforced(self, definitions):
        shape = definitions["get_api"].shape
        assert is_valid({"apiId": "a1", "include": ["versions", "schemas"]}, shape)
        assert not is_valid({"apiId": "a1", "include": ["everything"]}, shape)

    def test_definitions_are_operation_definitions(self, definitions):
        assert all(isinstance(d, OperationDefinition) for d in definitions.values())


class TestApiTools:

    @pytest.mark.asyncio
    async def test_every_call_uses_v10(self, tools, postman_api):
        postman_api.route("GET", "/apis", json_body={"apis": []})
        await tools.handle_tool("list_apis", {"workspaceId": "w1", "limit": 5})
        assert postman_api.last.headers["Accept"] == V10
        assert postman_api.last.url.params["workspaceId"] == "w1"

    @pytest.mark.asyncio
    async def test_get_api_include_joined(self, tools, postman_api):
        postman_api.route("GET", "/apis/a1", json_body={"id": "a1"})
        await tools.handle_tool("get_api", {"apiId": "a1", "include": ["versions", "gitInfo"]})
        assert postman_api.last.url.params["include"] == "versions,gitInfo"

    @pytest.mark.asyncio
    async def test_create_api(self, tools, postman_api):
        postman_api.route("POST", "/apis", json_body={"id": "a1"})
        await tools.handle_tool("create_api", {"name": "Payments", "summary": "s", "workspaceId": "w1"})
        assert postman_api.last.url.params["workspaceId"] == "w1"
        assert postman_api.last_json() == {"name": "Payments", "summary": "s"}

    @pytest.mark.asyncio
    async def test_add_api_collection_passes_body(self, tools, postman_api):
        postman_api.route("POST", "/apis/a1/collections", json_body={"id": "c1"})
        await tools.handle_tool("add_api_collection", {
            "apiId": "a1", "operationType": "COPY_COLLECTION", "data": {"collectionId": "c1"},
        })
        assert postman_api.last_json() == {"operationType": "COPY_COLLECTION", "data": {"collectionId": "c1"}}

    @pytest.mark.asyncio
    async def test_get_api_schema_params(self, tools, postman_api):
        postman_api.route("GET", "/apis/a1/schemas/s1", json_body={"id": "s1"})
        await tools.handle_tool("get_api_schema", {"apiId": "a1", "schemaId": "s1", "bundled": True})
        assert postman_api.last.url.params["bundled"] == "true"

    @pytest.mark.asyncio
    async def test_schema_file_path_keeps_directories(self, tools, postman_api):
        postman_api.route("PUT", "/apis/a1/schemas/s1/files/specs/main.yaml", json_body={"id": "f1"})
        await tools.handle_tool("create_update_schema_file", {
            "apiId": "a1", "schemaId": "s1", "filePath": "specs/main.yaml", "content": "openapi: 3.0.0",
        })
        assert postman_api.last.url.path == "/apis/a1/schemas/s1/files/specs/main.yaml"
        assert postman_api.last_json() == {"content": "openapi: 3.0.0"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name,args,path,message", [
        ("delete_api", {"apiId": "a1"}, "/apis/a1", "API deleted successfully"),
        ("delete_api_version", {"apiId": "a1", "versionId": "v1"}, "/apis/a1/versions/v1",
         "API version deleted successfully"),
        ("delete_api_comment", {"apiId": "a1", "commentId": 3}, "/apis/a1/comments/3", "Comment deleted successfully"),
        ("delete_schema_file", {"apiId": "a1", "schemaId": "s1", "filePath": "index.json"},
         "/apis/a1/schemas/s1/files/index.json", "Schema file deleted successfully"),
    ])
    async def test_deletes_confirm(self, tools, postman_api, name, args, path, message):
        postman_api.route("DELETE", path, status=204)
        assert await tools.handle_tool(name, args) == message

    @pytest.mark.asyncio
    async def test_create_api_version(self, tools, postman_api):
        postman_api.route("POST", "/apis/a1/versions", json_body={"id": "v1"})
        await tools.handle_tool("create_api_version", {
            "apiId": "a1", "name": "1.0", "schemas": [{"id": "s1"}], "collections": [{"id": "c1"}],
            "releaseNotes": "first",
        })
        assert postman_api.last_json() == {
            "name": "1.0", "schemas": [{"id": "s1"}], "collections": [{"id": "c1"}], "releaseNotes": "first",
        }

    @pytest.mark.asyncio
    async def test_update_api_comment(self, tools, postman_api):
        postman_api.route("PUT", "/apis/a1/comments/9", json_body={"id": 9})
        await tools.handle_tool("update_api_comment", {"apiId": "a1", "commentId": 9, "content": "edited"})
        assert postman_api.last_json() == {"content": "edited"}

    @pytest.mark.asyncio
    async def test_update_api_tags(self, tools, postman_api):
        postman_api.route("PUT", "/apis/a1/tags", json_body={"tags": []})
        await tools.handle_tool("update_api_tags", {"apiId": "a1", "tags": [{"slug": "payments"}]})
        assert postman_api.last_json() == {"tags": [{"slug": "payments"}]}

    @pytest.mark.asyncio
    async def test_sync_and_task_status(self, tools, postman_api):
        postman_api.route("PUT", "/apis/a1/collections/c1/sync-with-schema-tasks", json_body={"taskId": "t1"})
        postman_api.route("GET", "/apis/a1/tasks/t1", json_body={"status": "completed"})
        assert await tools.handle_tool("sync_collection_with_schema", {"apiId": "a1", "collectionId": "c1"}) == {
            "taskId": "t1"
        }
        assert postman_api.last_json() == {}
        assert await tools.handle_tool("get_task_status", {"apiId": "a1", "taskId": "t1"}) == {"status": "completed"}
