"""API builder tools: APIs, schemas, schema files, versions, comments, tags and tasks.

Every call in this module uses the v10 API builder media type, which the
Postman API requires for the ``/apis`` endpoints.
"""

import logging
from typing import Any, Dict, List
from urllib.parse import quote

from mcp import Tool

from ..adapters.postman_client import V10_HEADERS
from .base import PostmanToolSet, endpoint, pick

logger = logging.getLogger(__name__)

API_COLLECTION_OPERATIONS = ["COPY_COLLECTION", "CREATE_NEW", "GENERATE_FROM_SCHEMA"]

API_SCHEMA_TYPES = [
    "proto:2", "proto:3", "graphql", "openapi:3_1", "openapi:3", "openapi:2",
    "openapi:1", "raml:1", "raml:0_8", "wsdl:2", "wsdl:1", "asyncapi:2",
]

API_INCLUDES = ["collections", "versions", "schemas", "gitInfo"]

API_ID = {"type": "string", "description": "API ID"}
SCHEMA_ID = {"type": "string", "description": "Schema ID"}
VERSION_ID = {"type": "string", "description": "Version ID"}
VIEWER_VERSION_ID = {"type": "string", "description": "Version ID (required for API viewers)"}
FILE_PATH = {"type": "string", "description": "Path to the schema file"}
COMMENT_ID = {"type": "number", "description": "Comment ID"}
CURSOR = {"type": "string", "description": "Pagination cursor"}
LIMIT = {"type": "number", "description": "Maximum number of results"}
ROOT_FLAG = {
    "type": "object",
    "properties": {
        "enabled": {"type": "boolean", "description": "Tag as root file (protobuf only)"}
    }
}


def _schema(required: List[str], **properties: Dict[str, Any]) -> Dict[str, Any]:
    return {"type": "object", "properties": properties, "required": required}


def _file_path(path: str) -> str:
    # Schema file paths may contain directories; keep their slashes
    return quote(path.lstrip("/"), safe="/")


class ApiTools(PostmanToolSet):
    """Handles API builder operations."""

    resource_types = ("apis",)

    def get_tools(self) -> List[Tool]:
        """Return all API builder tools."""
        return [
            Tool(
                name="list_apis",
                description="List all APIs in a workspace",
                inputSchema=_schema(
                    ["workspaceId"],
                    workspaceId={"type": "string", "description": "Workspace ID (required)"},
                    createdBy={"type": "number", "description": "Filter by creator user ID"},
                    cursor=CURSOR,
                    description={"type": "string", "description": "Filter by description text"},
                    limit=LIMIT,
                )
            ),
            Tool(
                name="get_api",
                description="Get details of a specific API",
                inputSchema=_schema(
                    ["apiId"],
                    apiId=API_ID,
                    include={
                        "type": "array",
                        "items": {"type": "string", "enum": API_INCLUDES},
                        "description": "Additional data to include"
                    },
                )
            ),
            Tool(
                name="create_api",
                description="Create a new API",
                inputSchema=_schema(
                    ["name", "workspaceId"],
                    name={"type": "string", "description": "API name"},
                    summary={"type": "string", "description": "Brief description"},
                    description={"type": "string", "description": "Detailed description (supports Markdown)"},
                    workspaceId={"type": "string", "description": "Target workspace ID"},
                )
            ),
            Tool(
                name="update_api",
                description="Update an existing API",
                inputSchema=_schema(
                    ["apiId"],
                    apiId=API_ID,
                    name={"type": "string", "description": "New API name"},
                    summary={"type": "string", "description": "Updated brief description"},
                    description={"type": "string", "description": "Updated detailed description"},
                )
            ),
            Tool(
                name="delete_api",
                description="Delete an API",
                inputSchema=_schema(["apiId"], apiId=API_ID)
            ),
            Tool(
                name="add_api_collection",
                description="Add a collection to an API",
                inputSchema=_schema(
                    ["apiId", "operationType"],
                    apiId=API_ID,
                    operationType={
                        "type": "string",
                        "enum": API_COLLECTION_OPERATIONS,
                        "description": "Type of collection operation"
                    },
                    data={"type": "object", "description": "Collection data based on operation type"},
                )
            ),
            Tool(
                name="get_api_collection",
                description="Get a specific collection from an API",
                inputSchema=_schema(
                    ["apiId", "collectionId"],
                    apiId=API_ID,
                    collectionId={"type": "string", "description": "Collection ID"},
                    versionId=VIEWER_VERSION_ID,
                )
            ),
            Tool(
                name="create_api_schema",
                description="Create a schema for an API",
                inputSchema=_schema(
                    ["apiId", "type", "files"],
                    apiId=API_ID,
                    type={"type": "string", "enum": API_SCHEMA_TYPES, "description": "Schema type"},
                    files={
                        "type": "array",
                        "description": "Schema files",
                        "items": {
                            "type": "object",
                            "properties": {
                                "path": {"type": "string", "description": "File path"},
                                "content": {"type": "string", "description": "File content"},
                                "root": ROOT_FLAG
                            },
                            "required": ["path", "content"]
                        }
                    },
                )
            ),
            Tool(
                name="get_api_schema",
                description="Get a specific schema from an API",
                inputSchema=_schema(
                    ["apiId", "schemaId"],
                    apiId=API_ID,
                    schemaId=SCHEMA_ID,
                    versionId=VIEWER_VERSION_ID,
                    bundled={"type": "boolean", "description": "Return schema in bundled format"},
                )
            ),
            Tool(
                name="create_api_version",
                description="Create a new version of an API",
                inputSchema=_schema(
                    ["apiId", "name", "schemas", "collections"],
                    apiId=API_ID,
                    name={"type": "string", "description": "Version name"},
                    schemas={
                        "type": "array",
                        "description": "Schema references",
                        "items": {
                            "type": "object",
                            "properties": {
                                "id": {"type": "string"},
                                "filePath": {"type": "string"},
                                "directoryPath": {"type": "string"}
                            }
                        }
                    },
                    collections={
                        "type": "array",
                        "description": "Collection references",
                        "items": {
                            "type": "object",
                            "properties": {
                                "id": {"type": "string"},
                                "filePath": {"type": "string"}
                            }
                        }
                    },
                    branch={"type": "string", "description": "Git branch (for git-linked APIs)"},
                    releaseNotes={"type": "string", "description": "Version release notes"},
                )
            ),
            Tool(
                name="get_api_versions",
                description="Get all versions of an API",
                inputSchema=_schema(["apiId"], apiId=API_ID, cursor=CURSOR, limit=LIMIT)
            ),
            Tool(
                name="get_api_version",
                description="Get a specific version of an API",
                inputSchema=_schema(["apiId", "versionId"], apiId=API_ID, versionId=VERSION_ID)
            ),
            Tool(
                name="update_api_version",
                description="Update an API version",
                inputSchema=_schema(
                    ["apiId", "versionId", "name"],
                    apiId=API_ID,
                    versionId=VERSION_ID,
                    name={"type": "string", "description": "New version name"},
                    releaseNotes={"type": "string", "description": "Updated release notes"},
                )
            ),
            Tool(
                name="delete_api_version",
                description="Delete an API version",
                inputSchema=_schema(["apiId", "versionId"], apiId=API_ID, versionId=VERSION_ID)
            ),
            Tool(
                name="get_api_comments",
                description="Get comments for an API",
                inputSchema=_schema(["apiId"], apiId=API_ID, cursor=CURSOR, limit=LIMIT)
            ),
            Tool(
                name="create_api_comment",
                description="Create a new comment on an API (max 10,000 characters)",
                inputSchema=_schema(
                    ["apiId", "content"],
                    apiId=API_ID,
                    content={"type": "string", "description": "Comment text (max 10,000 characters)"},
                    threadId={"type": "number", "description": "Thread ID for replies"},
                )
            ),
            Tool(
                name="update_api_comment",
                description="Update an existing API comment (max 10,000 characters)",
                inputSchema=_schema(
                    ["apiId", "commentId", "content"],
                    apiId=API_ID,
                    commentId=COMMENT_ID,
                    content={"type": "string", "description": "Updated comment text (max 10,000 characters)"},
                )
            ),
            Tool(
                name="delete_api_comment",
                description="Delete an API comment",
                inputSchema=_schema(["apiId", "commentId"], apiId=API_ID, commentId=COMMENT_ID)
            ),
            Tool(
                name="get_api_tags",
                description="Get tags for an API",
                inputSchema=_schema(["apiId"], apiId=API_ID)
            ),
            Tool(
                name="update_api_tags",
                description="Update tags for an API",
                inputSchema=_schema(
                    ["apiId", "tags"],
                    apiId=API_ID,
                    tags={
                        "type": "array",
                        "items": {
                            "type": "object",
                            "properties": {
                                "slug": {"type": "string", "description": "Tag slug"},
                                "name": {"type": "string", "description": "Tag display name"}
                            },
                            "required": ["slug"]
                        },
                        "description": "List of tags"
                    },
                )
            ),
            Tool(
                name="get_api_schema_files",
                description="Get files in an API schema",
                inputSchema=_schema(
                    ["apiId", "schemaId"],
                    apiId=API_ID,
                    schemaId=SCHEMA_ID,
                    cursor=CURSOR,
                    limit=LIMIT,
                    versionId=VIEWER_VERSION_ID,
                )
            ),
            Tool(
                name="get_schema_file_contents",
                description="Get contents of a schema file",
                inputSchema=_schema(
                    ["apiId", "schemaId", "filePath"],
                    apiId=API_ID,
                    schemaId=SCHEMA_ID,
                    filePath=FILE_PATH,
                    versionId=VIEWER_VERSION_ID,
                )
            ),
            Tool(
                name="create_update_schema_file",
                description="Create or update a schema file",
                inputSchema=_schema(
                    ["apiId", "schemaId", "filePath", "content"],
                    apiId=API_ID,
                    schemaId=SCHEMA_ID,
                    filePath=FILE_PATH,
                    content={"type": "string", "description": "File content"},
                    root=ROOT_FLAG,
                )
            ),
            Tool(
                name="delete_schema_file",
                description="Delete a schema file",
                inputSchema=_schema(
                    ["apiId", "schemaId", "filePath"],
                    apiId=API_ID,
                    schemaId=SCHEMA_ID,
                    filePath=FILE_PATH,
                )
            ),
            Tool(
                name="sync_collection_with_schema",
                description="Sync a collection with its schema",
                inputSchema=_schema(
                    ["apiId", "collectionId"],
                    apiId=API_ID,
                    collectionId={"type": "string", "description": "Collection ID"},
                )
            ),
            Tool(
                name="get_task_status",
                description="Get status of an asynchronous task",
                inputSchema=_schema(
                    ["apiId", "taskId"],
                    apiId=API_ID,
                    taskId={"type": "string", "description": "Task ID"},
                )
            ),
        ]

    def get_handlers(self):
        return {
            "list_apis": self._list_apis,
            "get_api": self._get_api,
            "create_api": self._create_api,
            "update_api": self._update_api,
            "delete_api": self._delete_api,
            "add_api_collection": self._add_api_collection,
            "get_api_collection": self._get_api_collection,
            "create_api_schema": self._create_api_schema,
            "get_api_schema": self._get_api_schema,
            "create_api_version": self._create_api_version,
            "get_api_versions": self._get_api_versions,
            "get_api_version": self._get_api_version,
            "update_api_version": self._update_api_version,
            "delete_api_version": self._delete_api_version,
            "get_api_comments": self._get_api_comments,
            "create_api_comment": self._create_api_comment,
            "update_api_comment": self._update_api_comment,
            "delete_api_comment": self._delete_api_comment,
            "get_api_tags": self._get_api_tags,
            "update_api_tags": self._update_api_tags,
            "get_api_schema_files": self._get_api_schema_files,
            "get_schema_file_contents": self._get_schema_file_contents,
            "create_update_schema_file": self._create_update_schema_file,
            "delete_schema_file": self._delete_schema_file,
            "sync_collection_with_schema": self._sync_collection_with_schema,
            "get_task_status": self._get_task_status,
        }

    async def _call(self, method: str, path: str, **kwargs) -> Any:
        return await self.client.call(method, path, headers=V10_HEADERS, **kwargs)

    # APIs

    async def _list_apis(self, args: Dict[str, Any]) -> Any:
        return await self._call(
            "GET", "/apis",
            params=pick(args, "workspaceId", "createdBy", "cursor", "description", "limit"),
        )

    async def _get_api(self, args: Dict[str, Any]) -> Any:
        params = {"include": ",".join(args["include"])} if args.get("include") else None
        return await self._call("GET", endpoint("apis", args["apiId"]), params=params)

    async def _create_api(self, args: Dict[str, Any]) -> Any:
        return await self._call(
            "POST", "/apis",
            params={"workspaceId": args["workspaceId"]},
            body=pick(args, "name", "summary", "description"),
        )

    async def _update_api(self, args: Dict[str, Any]) -> Any:
        body = {key: value for key, value in args.items() if key != "apiId"}
        return await self._call("PUT", endpoint("apis", args["apiId"]), body=body)

    async def _delete_api(self, args: Dict[str, Any]) -> Any:
        await self._call("DELETE", endpoint("apis", args["apiId"]))
        return "API deleted successfully"

    # Collections

    async def _add_api_collection(self, args: Dict[str, Any]) -> Any:
        body = {key: value for key, value in args.items() if key != "apiId"}
        return await self._call("POST", endpoint("apis", args["apiId"], "collections"), body=body)

    async def _get_api_collection(self, args: Dict[str, Any]) -> Any:
        return await self._call(
            "GET", endpoint("apis", args["apiId"], "collections", args["collectionId"]),
            params=pick(args, "versionId"),
        )

    async def _sync_collection_with_schema(self, args: Dict[str, Any]) -> Any:
        return await self._call(
            "PUT",
            endpoint("apis", args["apiId"], "collections", args["collectionId"], "sync-with-schema-tasks"),
            body={},
        )

    # Schemas

    async def _create_api_schema(self, args: Dict[str, Any]) -> Any:
        return await self._call(
            "POST", endpoint("apis", args["apiId"], "schemas"), body=pick(args, "type", "files")
        )

    async def _get_api_schema(self, args: Dict[str, Any]) -> Any:
        return await self._call(
            "GET", endpoint("apis", args["apiId"], "schemas", args["schemaId"]),
            params=pick(args, "versionId", "bundled"),
        )

    async def _get_api_schema_files(self, args: Dict[str, Any]) -> Any:
        return await self._call(
            "GET", endpoint("apis", args["apiId"], "schemas", args["schemaId"], "files"),
            params=pick(args, "cursor", "limit", "versionId"),
        )

    def _schema_file_path(self, args: Dict[str, Any]) -> str:
        base = endpoint("apis", args["apiId"], "schemas", args["schemaId"], "files")
        return f"{base}/{_file_path(args['filePath'])}"

    async def _get_schema_file_contents(self, args: Dict[str, Any]) -> Any:
        return await self._call("GET", self._schema_file_path(args), params=pick(args, "versionId"))

    async def _create_update_schema_file(self, args: Dict[str, Any]) -> Any:
        return await self._call(
            "PUT", self._schema_file_path(args), body=pick(args, "content", "root")
        )

    async def _delete_schema_file(self, args: Dict[str, Any]) -> Any:
        await self._call("DELETE", self._schema_file_path(args))
        return "Schema file deleted successfully"

    # Versions

    async def _create_api_version(self, args: Dict[str, Any]) -> Any:
        return await self._call(
            "POST", endpoint("apis", args["apiId"], "versions"),
            body=pick(args, "name", "schemas", "collections", "branch", "releaseNotes"),
        )

    async def _get_api_versions(self, args: Dict[str, Any]) -> Any:
        return await self._call(
            "GET", endpoint("apis", args["apiId"], "versions"), params=pick(args, "cursor", "limit")
        )

    async def _get_api_version(self, args: Dict[str, Any]) -> Any:
        return await self._call("GET", endpoint("apis", args["apiId"], "versions", args["versionId"]))

    async def _update_api_version(self, args: Dict[str, Any]) -> Any:
        return await self._call(
            "PUT", endpoint("apis", args["apiId"], "versions", args["versionId"]),
            body=pick(args, "name", "releaseNotes"),
        )

    async def _delete_api_version(self, args: Dict[str, Any]) -> Any:
        await self._call("DELETE", endpoint("apis", args["apiId"], "versions", args["versionId"]))
        return "API version deleted successfully"

    # Comments

    async def _get_api_comments(self, args: Dict[str, Any]) -> Any:
        return await self._call(
            "GET", endpoint("apis", args["apiId"], "comments"), params=pick(args, "cursor", "limit")
        )

    async def _create_api_comment(self, args: Dict[str, Any]) -> Any:
        return await self._call(
            "POST", endpoint("apis", args["apiId"], "comments"), body=pick(args, "content", "threadId")
        )

    async def _update_api_comment(self, args: Dict[str, Any]) -> Any:
        return await self._call(
            "PUT", endpoint("apis", args["apiId"], "comments", args["commentId"]),
            body={"content": args["content"]},
        )

    async def _delete_api_comment(self, args: Dict[str, Any]) -> Any:
        await self._call("DELETE", endpoint("apis", args["apiId"], "comments", args["commentId"]))
        return "Comment deleted successfully"

    # Tags

    async def _get_api_tags(self, args: Dict[str, Any]) -> Any:
        return await self._call("GET", endpoint("apis", args["apiId"], "tags"))

    async def _update_api_tags(self, args: Dict[str, Any]) -> Any:
        return await self._call("PUT", endpoint("apis", args["apiId"], "tags"), body={"tags": args["tags"]})

    # Tasks

    async def _get_task_status(self, args: Dict[str, Any]) -> Any:
        return await self._call("GET", endpoint("apis", args["apiId"], "tasks", args["taskId"]))
