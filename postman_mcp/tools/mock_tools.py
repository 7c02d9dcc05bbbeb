"""Mock server tools: mocks, call logs, publishing and server responses."""

import logging
from typing import Any, Dict, List

from mcp import Tool

from .base import PostmanToolSet, endpoint, pick

logger = logging.getLogger(__name__)

CALL_LOG_FILTERS = (
    "limit", "cursor", "until", "since", "responseStatusCode", "responseType",
    "requestMethod", "requestPath", "sort", "direction", "include",
)

MOCK_ID_PROPERTY = {"type": "string", "description": "The mock server ID"}
SERVER_RESPONSE_ID_PROPERTY = {"type": "string", "description": "The server response ID"}

HEADERS_SCHEMA = {
    "type": "array",
    "description": "Response headers",
    "items": {
        "type": "object",
        "properties": {
            "key": {"type": "string"},
            "value": {"type": "string"}
        }
    }
}


def _mock_id_schema(*extra_required: str, **extra_properties: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "type": "object",
        "required": ["mockId", *extra_required],
        "properties": {"mockId": MOCK_ID_PROPERTY, **extra_properties}
    }


def _server_response_schema(required: List[str]) -> Dict[str, Any]:
    return {
        "type": "object",
        "required": required,
        "properties": {
            "name": {"type": "string", "description": "Response name"},
            "code": {"type": "number", "description": "HTTP status code"},
            "headers": HEADERS_SCHEMA,
            "body": {"type": "string", "description": "Response body content"},
            "active": {"type": "boolean", "description": "Set as active response"},
            "delay": {"type": "number", "description": "Response delay in milliseconds"}
        }
    }


class MockTools(PostmanToolSet):
    """Handles mock server operations."""

    resource_types = ("mocks",)

    def get_tools(self) -> List[Tool]:
        """Return all mock server tools."""
        return [
            Tool(
                name="list_mocks",
                description="List all mock servers",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "teamId": {
                            "type": "string",
                            "description": "Return only results that belong to the given team ID"
                        },
                        "workspace": {
                            "type": "string",
                            "description": (
                                "Return only results found in the given workspace. If both "
                                "teamId and workspace provided, only workspace is used."
                            )
                        }
                    },
                    "required": []
                }
            ),
            Tool(
                name="create_mock",
                description=(
                    "Create a new mock server. Creates in Personal workspace if workspace "
                    "not specified."
                ),
                inputSchema={
                    "type": "object",
                    "properties": {
                        "workspace": {"type": "string", "description": "Workspace ID to create the mock in"},
                        "mock": {
                            "type": "object",
                            "required": ["collection", "name"],
                            "properties": {
                                "collection": {"type": "string", "description": "Collection ID to mock"},
                                "name": {"type": "string", "description": "Mock server name"},
                                "description": {"type": "string", "description": "Mock server description"},
                                "environment": {"type": "string", "description": "Environment ID to use"},
                                "private": {"type": "boolean", "description": "Access control setting"},
                                "versionTag": {"type": "string", "description": "Collection version tag"}
                            }
                        }
                    },
                    "required": ["mock"]
                }
            ),
            Tool(
                name="get_mock",
                description="Get details of a specific mock server",
                inputSchema=_mock_id_schema()
            ),
            Tool(
                name="update_mock",
                description="Update an existing mock server",
                inputSchema=_mock_id_schema(
                    "mock",
                    mock={
                        "type": "object",
                        "properties": {
                            "name": {"type": "string", "description": "New mock server name"},
                            "description": {"type": "string", "description": "Updated description"},
                            "environment": {"type": "string", "description": "New environment ID"},
                            "private": {"type": "boolean", "description": "Updated access control setting"},
                            "versionTag": {"type": "string", "description": "Updated collection version tag"}
                        }
                    }
                )
            ),
            Tool(
                name="delete_mock",
                description="Delete a mock server",
                inputSchema=_mock_id_schema()
            ),
            Tool(
                name="get_mock_call_logs",
                description=(
                    "Get mock call logs. Maximum 6.5MB or 100 call logs per API call. "
                    "Retention period based on Postman plan."
                ),
                inputSchema=_mock_id_schema(
                    limit={"type": "number", "description": "Maximum number of logs to return (default: 100)"},
                    cursor={"type": "string", "description": "Pagination cursor"},
                    until={"type": "string", "description": "Return logs until this timestamp"},
                    since={"type": "string", "description": "Return logs since this timestamp"},
                    responseStatusCode={"type": "number", "description": "Filter by response status code"},
                    responseType={"type": "string", "description": "Filter by response type"},
                    requestMethod={"type": "string", "description": "Filter by request method"},
                    requestPath={"type": "string", "description": "Filter by request path"},
                    sort={"type": "string", "enum": ["servedAt"], "description": "Sort field"},
                    direction={"type": "string", "enum": ["asc", "desc"], "description": "Sort direction"},
                    include={
                        "type": "string",
                        "description": (
                            "Include additional data (request.headers, request.body, "
                            "response.headers, response.body)"
                        )
                    }
                )
            ),
            Tool(
                name="publish_mock",
                description="Publish mock server (sets Access Control to public)",
                inputSchema=_mock_id_schema()
            ),
            Tool(
                name="unpublish_mock",
                description="Unpublish mock server (sets Access Control to private)",
                inputSchema=_mock_id_schema()
            ),
            Tool(
                name="list_server_responses",
                description="Get all server responses for a mock",
                inputSchema=_mock_id_schema()
            ),
            Tool(
                name="create_server_response",
                description="Create a server response. Only one server response can be active at a time.",
                inputSchema=_mock_id_schema(
                    "serverResponse",
                    serverResponse=_server_response_schema(["name", "code", "headers", "body"])
                )
            ),
            Tool(
                name="get_server_response",
                description="Get a specific server response",
                inputSchema=_mock_id_schema(
                    "serverResponseId", serverResponseId=SERVER_RESPONSE_ID_PROPERTY
                )
            ),
            Tool(
                name="update_server_response",
                description="Update a server response",
                inputSchema=_mock_id_schema(
                    "serverResponseId",
                    "serverResponse",
                    serverResponseId=SERVER_RESPONSE_ID_PROPERTY,
                    serverResponse=_server_response_schema([])
                )
            ),
            Tool(
                name="delete_server_response",
                description="Delete a server response",
                inputSchema=_mock_id_schema(
                    "serverResponseId", serverResponseId=SERVER_RESPONSE_ID_PROPERTY
                )
            ),
        ]

    def get_handlers(self):
        return {
            "list_mocks": self._list_mocks,
            "create_mock": self._create_mock,
            "get_mock": self._get_mock,
            "update_mock": self._update_mock,
            "delete_mock": self._delete_mock,
            "get_mock_call_logs": self._get_mock_call_logs,
            "publish_mock": self._publish_mock,
            "unpublish_mock": self._unpublish_mock,
            "list_server_responses": self._list_server_responses,
            "create_server_response": self._create_server_response,
            "get_server_response": self._get_server_response,
            "update_server_response": self._update_server_response,
            "delete_server_response": self._delete_server_response,
        }

    async def _list_mocks(self, args: Dict[str, Any]) -> Any:
        return await self.client.get("/mocks", params=pick(args, "teamId", "workspace"))

    async def _create_mock(self, args: Dict[str, Any]) -> Any:
        return await self.client.post(
            "/mocks", body={"mock": args["mock"]}, params=pick(args, workspaceId="workspace")
        )

    async def _get_mock(self, args: Dict[str, Any]) -> Any:
        return await self.client.get(endpoint("mocks", args["mockId"]))

    async def _update_mock(self, args: Dict[str, Any]) -> Any:
        return await self.client.put(endpoint("mocks", args["mockId"]), body={"mock": args["mock"]})

    async def _delete_mock(self, args: Dict[str, Any]) -> Any:
        return await self.client.delete(endpoint("mocks", args["mockId"]))

    async def _get_mock_call_logs(self, args: Dict[str, Any]) -> Any:
        return await self.client.get(
            endpoint("mocks", args["mockId"], "call-logs"), params=pick(args, *CALL_LOG_FILTERS)
        )

    async def _publish_mock(self, args: Dict[str, Any]) -> Any:
        return await self.client.post(endpoint("mocks", args["mockId"], "publish"))

    async def _unpublish_mock(self, args: Dict[str, Any]) -> Any:
        return await self.client.delete(endpoint("mocks", args["mockId"], "unpublish"))

    async def _list_server_responses(self, args: Dict[str, Any]) -> Any:
        return await self.client.get(endpoint("mocks", args["mockId"], "server-responses"))

    async def _create_server_response(self, args: Dict[str, Any]) -> Any:
        return await self.client.post(
            endpoint("mocks", args["mockId"], "server-responses"),
            body={"serverResponse": args["serverResponse"]},
        )

    async def _get_server_response(self, args: Dict[str, Any]) -> Any:
        return await self.client.get(
            endpoint("mocks", args["mockId"], "server-responses", args["serverResponseId"])
        )

    async def _update_server_response(self, args: Dict[str, Any]) -> Any:
        return await self.client.put(
            endpoint("mocks", args["mockId"], "server-responses", args["serverResponseId"]),
            body={"serverResponse": args["serverResponse"]},
        )

    async def _delete_server_response(self, args: Dict[str, Any]) -> Any:
        return await self.client.delete(
            endpoint("mocks", args["mockId"], "server-responses", args["serverResponseId"])
        )
