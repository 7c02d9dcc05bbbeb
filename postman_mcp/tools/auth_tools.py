"""Access control tools: collection access keys and workspace/collection roles."""

import logging
from typing import Any, Dict, List, Optional

from mcp import Tool

from .base import PostmanToolSet, endpoint, pick

logger = logging.getLogger(__name__)

MAX_ROLE_OPERATIONS = 50


def _role_operations_schema(max_items: Optional[int] = None) -> Dict[str, Any]:
    schema = {
        "type": "array",
        "items": {
            "type": "object",
            "required": ["op", "path", "value"],
            "properties": {
                "op": {"type": "string", "enum": ["update"], "description": "Operation type"},
                "path": {
                    "type": "string",
                    "enum": ["/user", "/group", "/team"],
                    "description": "Resource path"
                },
                "value": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "required": ["id", "role"],
                        "properties": {
                            "id": {"type": "number", "description": "User/group/team ID"},
                            "role": {
                                "type": "string",
                                "enum": ["VIEWER", "EDITOR"],
                                "description": "Role to assign"
                            }
                        }
                    }
                }
            }
        }
    }
    if max_items is not None:
        schema["maxItems"] = max_items
    return schema


class AuthTools(PostmanToolSet):
    """Handles access keys and role management."""

    resource_types = ("workspaces", "collections")

    def get_tools(self) -> List[Tool]:
        """Return all access control tools."""
        return [
            Tool(
                name="list_collection_access_keys",
                description="List collection access keys with optional filtering by collection ID",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "collectionId": {"type": "string", "description": "Filter results by collection ID"},
                        "cursor": {"type": "string", "description": "Pagination cursor"}
                    },
                    "required": []
                }
            ),
            Tool(
                name="delete_collection_access_key",
                description="Delete a collection access key",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "keyId": {"type": "string", "description": "The collection access key ID to delete"}
                    },
                    "required": ["keyId"]
                }
            ),
            Tool(
                name="list_workspace_roles",
                description="Get all available workspace roles based on team's plan",
                inputSchema={"type": "object", "properties": {}, "required": []}
            ),
            Tool(
                name="get_workspace_roles",
                description="Get roles for a specific workspace",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "workspaceId": {"type": "string", "description": "The workspace ID"},
                        "includeScim": {"type": "boolean", "description": "Include SCIM info in response"}
                    },
                    "required": ["workspaceId"]
                }
            ),
            Tool(
                name="update_workspace_roles",
                description=(
                    "Update workspace roles for users and groups "
                    f"(limited to {MAX_ROLE_OPERATIONS} operations per call)"
                ),
                inputSchema={
                    "type": "object",
                    "properties": {
                        "workspaceId": {"type": "string", "description": "The workspace ID"},
                        "operations": _role_operations_schema(MAX_ROLE_OPERATIONS),
                        "identifierType": {
                            "type": "string",
                            "enum": ["scim"],
                            "description": "Optional SCIM identifier type"
                        }
                    },
                    "required": ["workspaceId", "operations"]
                }
            ),
            Tool(
                name="get_collection_roles",
                description="Get roles for a collection",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "collectionId": {"type": "string", "description": "The collection ID"}
                    },
                    "required": ["collectionId"]
                }
            ),
            Tool(
                name="update_collection_roles",
                description="Update collection roles (requires EDITOR role)",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "collectionId": {"type": "string", "description": "The collection ID"},
                        "operations": _role_operations_schema()
                    },
                    "required": ["collectionId", "operations"]
                }
            ),
            Tool(
                name="get_authenticated_user",
                description="Get authenticated user information",
                inputSchema={"type": "object", "properties": {}, "required": []}
            ),
        ]

    def get_handlers(self):
        return {
            "list_collection_access_keys": self._list_collection_access_keys,
            "delete_collection_access_key": self._delete_collection_access_key,
            "list_workspace_roles": self._list_workspace_roles,
            "get_workspace_roles": self._get_workspace_roles,
            "update_workspace_roles": self._update_workspace_roles,
            "get_collection_roles": self._get_collection_roles,
            "update_collection_roles": self._update_collection_roles,
            "get_authenticated_user": self._get_authenticated_user,
        }

    async def _list_collection_access_keys(self, args: Dict[str, Any]) -> Any:
        return await self.client.get(
            "/collection-access-keys", params=pick(args, "collectionId", "cursor")
        )

    async def _delete_collection_access_key(self, args: Dict[str, Any]) -> Any:
        return await self.client.delete(endpoint("collection-access-keys", args["keyId"]))

    async def _list_workspace_roles(self, args: Dict[str, Any]) -> Any:
        return await self.client.get("/workspaces-roles")

    async def _get_workspace_roles(self, args: Dict[str, Any]) -> Any:
        params = {"include": "scim"} if args.get("includeScim") else None
        return await self.client.get(endpoint("workspaces", args["workspaceId"], "roles"), params=params)

    async def _update_workspace_roles(self, args: Dict[str, Any]) -> Any:
        headers = {"identifierType": args["identifierType"]} if "identifierType" in args else None
        return await self.client.patch(
            endpoint("workspaces", args["workspaceId"], "roles"),
            body={"roles": args["operations"]},
            headers=headers,
        )

    async def _get_collection_roles(self, args: Dict[str, Any]) -> Any:
        return await self.client.get(endpoint("collections", args["collectionId"], "roles"))

    async def _update_collection_roles(self, args: Dict[str, Any]) -> Any:
        return await self.client.patch(
            endpoint("collections", args["collectionId"], "roles"),
            body={"roles": args["operations"]},
        )

    async def _get_authenticated_user(self, args: Dict[str, Any]) -> Any:
        return await self.client.get("/me")
