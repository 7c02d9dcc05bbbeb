"""Collection tools: collection CRUD, forks and the folder/request/response sub-items."""

import logging
from typing import Any, Dict, List

from mcp import Tool

from .base import PostmanToolSet, endpoint, pick

logger = logging.getLogger(__name__)

# Sub-items of a collection addressed as /collections/{id}/{segment}/{itemId}
SUB_ITEMS = (
    ("folder", "folders"),
    ("request", "requests"),
    ("response", "responses"),
)

COLLECTION_INFO_SCHEMA = {
    "type": "object",
    "required": ["name", "schema"],
    "properties": {
        "name": {"type": "string", "description": "The collection's name"},
        "description": {"type": "string", "description": "The collection's description"},
        "schema": {"type": "string", "description": "The collection's schema URL"}
    }
}

COLLECTION_ITEMS_SCHEMA = {
    "type": "array",
    "description": "Collection items (requests, folders)",
    "items": {"type": "object"}
}


def _collection_schema(required: List[str]) -> Dict[str, Any]:
    return {
        "type": "object",
        "description": "Collection details in Postman Collection Format v2.1",
        "required": required,
        "properties": {
            "info": COLLECTION_INFO_SCHEMA,
            "item": COLLECTION_ITEMS_SCHEMA
        }
    }


def _sub_item_tools(kind: str) -> List[Tool]:
    id_field = f"{kind}_id"
    return [
        Tool(
            name=f"get_collection_{kind}",
            description=f"Get details of a specific {kind} in a collection",
            inputSchema={
                "type": "object",
                "properties": {
                    "collection_id": {"type": "string", "description": "Collection ID"},
                    id_field: {"type": "string", "description": f"{kind.capitalize()} ID"},
                    "ids": {"type": "boolean", "description": "Return only properties that contain ID values"},
                    "uid": {"type": "boolean", "description": "Return all IDs in UID format"},
                    "populate": {"type": "boolean", "description": f"Return all {kind} contents"}
                },
                "required": ["collection_id", id_field]
            }
        ),
        Tool(
            name=f"delete_collection_{kind}",
            description=f"Delete a {kind} from a collection",
            inputSchema={
                "type": "object",
                "properties": {
                    "collection_id": {"type": "string", "description": "Collection ID"},
                    id_field: {"type": "string", "description": f"{kind.capitalize()} ID"}
                },
                "required": ["collection_id", id_field]
            }
        ),
    ]


class CollectionTools(PostmanToolSet):
    """Handles collection operations."""

    resource_types = ("collections",)

    def get_tools(self) -> List[Tool]:
        """Return all collection tools."""
        tools = [
            Tool(
                name="list_collections",
                description="List all collections in a workspace. Supports filtering and pagination.",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "workspace": {"type": "string", "description": "Workspace ID"},
                        "name": {
                            "type": "string",
                            "description": "Filter results by collections that match the given name"
                        },
                        "limit": {"type": "number", "description": "Maximum number of results to return"},
                        "offset": {"type": "number", "description": "Number of results to skip"}
                    },
                    "required": []
                }
            ),
            Tool(
                name="get_collection",
                description="Get details of a specific collection",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "collection_id": {"type": "string", "description": "Collection ID"},
                        "access_key": {
                            "type": "string",
                            "description": (
                                "Collection's read-only access key. Using this query "
                                "parameter does not require an API key."
                            )
                        },
                        "model": {
                            "type": "string",
                            "enum": ["minimal"],
                            "description": "Return minimal collection data (only root-level request and folder IDs)"
                        }
                    },
                    "required": ["collection_id"]
                }
            ),
            Tool(
                name="create_collection",
                description="Create a new collection in a workspace. Supports Postman Collection v2.1.0 format.",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "workspace": {"type": "string", "description": "Workspace ID"},
                        "collection": _collection_schema(["info"])
                    },
                    "required": ["workspace", "collection"]
                }
            ),
            Tool(
                name="update_collection",
                description=(
                    "Update an existing collection. Full collection replacement with "
                    "maximum size of 20 MB."
                ),
                inputSchema={
                    "type": "object",
                    "properties": {
                        "collection_id": {"type": "string", "description": "Collection ID"},
                        "collection": _collection_schema(["info", "item"])
                    },
                    "required": ["collection_id", "collection"]
                }
            ),
            Tool(
                name="delete_collection",
                description="Delete a collection",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "collection_id": {"type": "string", "description": "Collection ID"}
                    },
                    "required": ["collection_id"]
                }
            ),
        ]
        for kind, _ in SUB_ITEMS:
            tools.extend(_sub_item_tools(kind))
        tools.append(
            Tool(
                name="fork_collection",
                description="Fork a collection to a workspace",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "collection_id": {"type": "string", "description": "Collection ID to fork"},
                        "workspace": {"type": "string", "description": "Destination workspace ID"},
                        "label": {"type": "string", "description": "Label for the forked collection"}
                    },
                    "required": ["collection_id", "workspace", "label"]
                }
            )
        )
        return tools

    def get_handlers(self):
        handlers = {
            "list_collections": self._list_collections,
            "get_collection": self._get_collection,
            "create_collection": self._create_collection,
            "update_collection": self._update_collection,
            "delete_collection": self._delete_collection,
            "fork_collection": self._fork_collection,
        }
        for kind, segment in SUB_ITEMS:
            handlers[f"get_collection_{kind}"] = self._sub_item_getter(kind, segment)
            handlers[f"delete_collection_{kind}"] = self._sub_item_deleter(kind, segment)
        return handlers

    async def _list_collections(self, args: Dict[str, Any]) -> Any:
        return await self.client.get(
            "/collections", params=pick(args, "workspace", "name", "limit", "offset")
        )

    async def _get_collection(self, args: Dict[str, Any]) -> Any:
        return await self.client.get(
            endpoint("collections", args["collection_id"]),
            params=pick(args, "access_key", "model"),
        )

    async def _create_collection(self, args: Dict[str, Any]) -> Any:
        return await self.client.post(
            "/collections",
            body={"collection": args["collection"]},
            params={"workspace": args["workspace"]},
        )

    async def _update_collection(self, args: Dict[str, Any]) -> Any:
        return await self.client.put(
            endpoint("collections", args["collection_id"]),
            body={"collection": args["collection"]},
        )

    async def _delete_collection(self, args: Dict[str, Any]) -> Any:
        return await self.client.delete(endpoint("collections", args["collection_id"]))

    async def _fork_collection(self, args: Dict[str, Any]) -> Any:
        return await self.client.post(
            endpoint("collections", "fork", args["collection_id"]),
            body={"label": args["label"]},
            params={"workspace": args["workspace"]},
        )

    def _sub_item_getter(self, kind: str, segment: str):
        async def get_sub_item(args: Dict[str, Any]) -> Any:
            return await self.client.get(
                endpoint("collections", args["collection_id"], segment, args[f"{kind}_id"]),
                params=pick(args, "ids", "uid", "populate"),
            )
        return get_sub_item

    def _sub_item_deleter(self, kind: str, segment: str):
        async def delete_sub_item(args: Dict[str, Any]) -> Any:
            return await self.client.delete(
                endpoint("collections", args["collection_id"], segment, args[f"{kind}_id"])
            )
        return delete_sub_item
