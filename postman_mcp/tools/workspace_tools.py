"""Workspace tools: listing, CRUD and global variables."""

import logging
from typing import Any, Dict, List

from mcp import Tool

from .base import PostmanToolSet, endpoint, pick

logger = logging.getLogger(__name__)

WORKSPACE_TYPES = ["personal", "team", "private", "public", "partner"]

VARIABLE_SCHEMA = {
    "type": "object",
    "properties": {
        "key": {"type": "string", "description": "Variable name"},
        "value": {"type": "string", "description": "Variable value"},
        "type": {
            "type": "string",
            "enum": ["default", "secret"],
            "description": "Variable type (default: default)"
        },
        "enabled": {"type": "boolean", "description": "Whether the variable is enabled"}
    },
    "required": ["key", "value"]
}


class WorkspaceTools(PostmanToolSet):
    """Handles workspace operations."""

    resource_types = ("workspaces",)

    def get_tools(self) -> List[Tool]:
        """Return all workspace tools."""
        return [
            Tool(
                name="list_workspaces",
                description="List all workspaces",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "type": {
                            "type": "string",
                            "enum": WORKSPACE_TYPES,
                            "description": "Filter workspaces by type"
                        },
                        "createdBy": {
                            "type": "string",
                            "description": "Filter workspaces by creator"
                        },
                        "include": {
                            "type": "string",
                            "description": "Additional data to include in response"
                        }
                    },
                    "required": []
                }
            ),
            Tool(
                name="get_workspace",
                description="Get details of a specific workspace",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "workspace": {
                            "type": "string",
                            "description": "Workspace ID"
                        },
                        "include": {
                            "type": "string",
                            "description": "Additional data to include in response"
                        }
                    },
                    "required": ["workspace"]
                }
            ),
            Tool(
                name="create_workspace",
                description="Create a new workspace",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "name": {"type": "string", "description": "Workspace name"},
                        "description": {"type": "string", "description": "Workspace description"},
                        "type": {
                            "type": "string",
                            "enum": WORKSPACE_TYPES,
                            "description": "Workspace type"
                        }
                    },
                    "required": ["name", "type"]
                }
            ),
            Tool(
                name="update_workspace",
                description="Update an existing workspace",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "workspace_id": {"type": "string", "description": "Workspace ID"},
                        "name": {"type": "string", "description": "New workspace name"},
                        "description": {"type": "string", "description": "New workspace description"},
                        "type": {
                            "type": "string",
                            "enum": WORKSPACE_TYPES,
                            "description": "New workspace type"
                        }
                    },
                    "required": ["workspace_id"]
                }
            ),
            Tool(
                name="delete_workspace",
                description="Delete a workspace",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "workspace_id": {"type": "string", "description": "Workspace ID"}
                    },
                    "required": ["workspace_id"]
                }
            ),
            Tool(
                name="get_global_variables",
                description="Get the global variables of a workspace",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "workspace_id": {"type": "string", "description": "Workspace ID"}
                    },
                    "required": ["workspace_id"]
                }
            ),
            Tool(
                name="update_global_variables",
                description="Replace the global variables of a workspace",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "workspace_id": {"type": "string", "description": "Workspace ID"},
                        "variables": {
                            "type": "array",
                            "items": VARIABLE_SCHEMA,
                            "description": "Complete list of global variables"
                        }
                    },
                    "required": ["workspace_id", "variables"]
                }
            ),
        ]

    def get_handlers(self):
        return {
            "list_workspaces": self._list_workspaces,
            "get_workspace": self._get_workspace,
            "create_workspace": self._create_workspace,
            "update_workspace": self._update_workspace,
            "delete_workspace": self._delete_workspace,
            "get_global_variables": self._get_global_variables,
            "update_global_variables": self._update_global_variables,
        }

    async def _list_workspaces(self, args: Dict[str, Any]) -> Any:
        return await self.client.get("/workspaces", params=pick(args, "type", "createdBy", "include"))

    async def _get_workspace(self, args: Dict[str, Any]) -> Any:
        return await self.client.get(
            endpoint("workspaces", args["workspace"]), params=pick(args, "include")
        )

    async def _create_workspace(self, args: Dict[str, Any]) -> Any:
        workspace = pick(args, "name", "type", "description")
        return await self.client.post("/workspaces", body={"workspace": workspace})

    async def _update_workspace(self, args: Dict[str, Any]) -> Any:
        workspace = pick(args, "name", "type", "description")
        return await self.client.put(
            endpoint("workspaces", args["workspace_id"]), body={"workspace": workspace}
        )

    async def _delete_workspace(self, args: Dict[str, Any]) -> Any:
        return await self.client.delete(endpoint("workspaces", args["workspace_id"]))

    async def _get_global_variables(self, args: Dict[str, Any]) -> Any:
        return await self.client.get(endpoint("workspaces", args["workspace_id"], "global-variables"))

    async def _update_global_variables(self, args: Dict[str, Any]) -> Any:
        return await self.client.put(
            endpoint("workspaces", args["workspace_id"], "global-variables"),
            body={"variables": args["variables"]},
        )
