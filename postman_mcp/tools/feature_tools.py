"""Additional Postman features: billing, comment threads, Private API Network, webhooks and tags."""

import logging
from typing import Any, Dict, List

from mcp import Tool

from ..core.errors import InvalidArgumentsError
from .base import PostmanToolSet, endpoint, pick

logger = logging.getLogger(__name__)

PAN_ELEMENT_TYPES = ["api", "collection", "workspace", "folder"]

PAN_FILTERS = (
    "since", "until", "addedBy", "name", "summary", "description",
    "sort", "direction", "offset", "limit", "parentFolderId", "type",
)


class FeatureTools(PostmanToolSet):
    """Handles billing, comments, Private API Network, webhooks and tags."""

    resource_types = ("workspaces", "network")

    def get_tools(self) -> List[Tool]:
        """Return all additional feature tools."""
        return [
            # Billing
            Tool(
                name="get_accounts",
                description="Gets Postman billing account details for the given team",
                inputSchema={"type": "object", "properties": {}, "required": []}
            ),
            Tool(
                name="list_account_invoices",
                description="Gets all invoices for a Postman billing account filtered by status",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "accountId": {"type": "string", "description": "The account's ID"},
                        "status": {"type": "string", "enum": ["PAID"], "description": "The account's status"}
                    },
                    "required": ["accountId", "status"]
                }
            ),
            # Comments
            Tool(
                name="resolve_comment_thread",
                description="Resolves a comment and any associated replies",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "threadId": {"type": "string", "description": "The comment thread ID"}
                    },
                    "required": ["threadId"]
                }
            ),
            # Private API Network
            Tool(
                name="list_pan_elements",
                description="Get all elements and folders in Private API Network",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "since": {
                            "type": "string",
                            "description": "Return only results created since the given time (ISO 8601)"
                        },
                        "until": {
                            "type": "string",
                            "description": "Return only results created until this given time (ISO 8601)"
                        },
                        "addedBy": {
                            "type": "integer",
                            "description": "Return only elements published by the given user ID"
                        },
                        "name": {
                            "type": "string",
                            "description": "Return only elements whose name includes the given value"
                        },
                        "summary": {
                            "type": "string",
                            "description": "Return only elements whose summary includes the given value"
                        },
                        "description": {
                            "type": "string",
                            "description": "Return only elements whose description includes the given value"
                        },
                        "sort": {"type": "string", "enum": ["createdAt", "updatedAt"], "description": "Sort field"},
                        "direction": {"type": "string", "enum": ["asc", "desc"], "description": "Sort direction"},
                        "offset": {"type": "integer", "description": "Number of results to skip"},
                        "limit": {"type": "integer", "description": "Maximum number of results to return"},
                        "parentFolderId": {
                            "type": "integer",
                            "description": "Return elements in specific folder. Use 0 for root folder."
                        },
                        "type": {
                            "type": "string",
                            "enum": ["api", "folder", "collection", "workspace"],
                            "description": "Filter by element type"
                        }
                    },
                    "required": []
                }
            ),
            Tool(
                name="add_pan_element",
                description="Add element or folder to Private API Network",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "type": {"type": "string", "enum": PAN_ELEMENT_TYPES, "description": "Element type"},
                        "name": {"type": "string", "description": "Element/folder name"},
                        "description": {"type": "string", "description": "Element/folder description"},
                        "summary": {"type": "string", "description": "Element summary"},
                        "parentFolderId": {"type": "integer", "description": "Parent folder ID"},
                        "elementId": {"type": "string", "description": "ID of API/collection/workspace to add"}
                    },
                    "required": ["type", "name"]
                }
            ),
            Tool(
                name="update_pan_element",
                description="Update element or folder in Private API Network",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "elementId": {"type": "string", "description": "Element ID"},
                        "elementType": {"type": "string", "enum": PAN_ELEMENT_TYPES, "description": "Element type"},
                        "name": {"type": "string", "description": "Updated name"},
                        "description": {"type": "string", "description": "Updated description"},
                        "summary": {"type": "string", "description": "Updated summary"},
                        "parentFolderId": {"type": "integer", "description": "New parent folder ID"}
                    },
                    "required": ["elementId", "elementType"]
                }
            ),
            Tool(
                name="remove_pan_element",
                description="Remove element or folder from Private API Network",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "elementId": {"type": "string", "description": "Element ID"},
                        "elementType": {"type": "string", "enum": PAN_ELEMENT_TYPES, "description": "Element type"}
                    },
                    "required": ["elementId", "elementType"]
                }
            ),
            # Webhooks
            Tool(
                name="create_webhook",
                description="Creates webhook that triggers collection with custom payload",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "workspace": {"type": "string", "description": "Workspace ID"},
                        "webhook": {
                            "type": "object",
                            "properties": {
                                "name": {"type": "string", "description": "Webhook name"},
                                "collection": {"type": "string", "description": "Collection ID to trigger"},
                                "description": {"type": "string", "description": "Webhook description"},
                                "events": {
                                    "type": "array",
                                    "description": "Array of events to trigger on",
                                    "items": {"type": "string"}
                                }
                            },
                            "required": ["name", "collection"]
                        }
                    },
                    "required": ["workspace", "webhook"]
                }
            ),
            # Tags
            Tool(
                name="get_tagged_elements",
                description="Get elements by tag",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "slug": {"type": "string", "description": "Tag slug"},
                        "limit": {"type": "integer", "description": "Maximum number of results to return"},
                        "direction": {"type": "string", "enum": ["asc", "desc"], "description": "Sort direction"},
                        "cursor": {"type": "string", "description": "Pagination cursor"},
                        "entityType": {
                            "type": "string",
                            "enum": ["api", "collection", "workspace"],
                            "description": "Filter by entity type"
                        }
                    },
                    "required": ["slug"]
                }
            ),
            Tool(
                name="get_workspace_tags",
                description="Get workspace tags",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "workspaceId": {"type": "string", "description": "Workspace ID"}
                    },
                    "required": ["workspaceId"]
                }
            ),
            Tool(
                name="update_workspace_tags",
                description="Update workspace tags",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "workspaceId": {"type": "string", "description": "Workspace ID"},
                        "tags": {
                            "type": "array",
                            "description": "Array of tag objects",
                            "items": {
                                "type": "object",
                                "properties": {
                                    "slug": {"type": "string", "description": "Tag slug"},
                                    "name": {"type": "string", "description": "Tag name"}
                                },
                                "required": ["slug", "name"]
                            }
                        }
                    },
                    "required": ["workspaceId", "tags"]
                }
            ),
        ]

    def get_handlers(self):
        return {
            "get_accounts": self._get_accounts,
            "list_account_invoices": self._list_account_invoices,
            "resolve_comment_thread": self._resolve_comment_thread,
            "list_pan_elements": self._list_pan_elements,
            "add_pan_element": self._add_pan_element,
            "update_pan_element": self._update_pan_element,
            "remove_pan_element": self._remove_pan_element,
            "create_webhook": self._create_webhook,
            "get_tagged_elements": self._get_tagged_elements,
            "get_workspace_tags": self._get_workspace_tags,
            "update_workspace_tags": self._update_workspace_tags,
        }

    # Billing

    async def _get_accounts(self, args: Dict[str, Any]) -> Any:
        return await self.client.get("/accounts")

    async def _list_account_invoices(self, args: Dict[str, Any]) -> Any:
        return await self.client.get(
            endpoint("accounts", args["accountId"], "invoices"), params=pick(args, "status")
        )

    # Comments

    async def _resolve_comment_thread(self, args: Dict[str, Any]) -> Any:
        return await self.client.post(endpoint("comments-resolutions", args["threadId"]))

    # Private API Network

    async def _list_pan_elements(self, args: Dict[str, Any]) -> Any:
        return await self.client.get("/network/private", params=pick(args, *PAN_FILTERS))

    async def _add_pan_element(self, args: Dict[str, Any]) -> Any:
        element_type = args["type"]
        if element_type == "folder":
            payload = {"folder": pick(args, "name", "description", "parentFolderId")}
        else:
            if "elementId" not in args:
                raise InvalidArgumentsError(f"elementId is required when adding a {element_type}")
            payload = {element_type: {"id": args["elementId"]}}
        return await self.client.post("/network/private", body=payload)

    async def _update_pan_element(self, args: Dict[str, Any]) -> Any:
        element_type = args["elementType"]
        if element_type == "folder":
            fields = pick(args, "name", "description", "parentFolderId")
        else:
            fields = pick(args, "name", "description", "summary", "parentFolderId")
        return await self.client.put(
            endpoint("network", "private", element_type, args["elementId"]),
            body={element_type: fields},
        )

    async def _remove_pan_element(self, args: Dict[str, Any]) -> Any:
        return await self.client.delete(
            endpoint("network", "private", args["elementType"], args["elementId"])
        )

    # Webhooks

    async def _create_webhook(self, args: Dict[str, Any]) -> Any:
        return await self.client.post(
            "/webhooks", body={"webhook": args["webhook"]}, params=pick(args, "workspace")
        )

    # Tags

    async def _get_tagged_elements(self, args: Dict[str, Any]) -> Any:
        return await self.client.get(
            endpoint("tags", args["slug"], "entities"),
            params=pick(args, "limit", "direction", "cursor", "entityType"),
        )

    async def _get_workspace_tags(self, args: Dict[str, Any]) -> Any:
        return await self.client.get(endpoint("workspaces", args["workspaceId"], "tags"))

    async def _update_workspace_tags(self, args: Dict[str, Any]) -> Any:
        return await self.client.put(
            endpoint("workspaces", args["workspaceId"], "tags"), body={"tags": args["tags"]}
        )
