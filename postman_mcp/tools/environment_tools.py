"""Environment tools: CRUD, forks, merges and pulls.

Postman addresses environments by UID, ``{ownerId}-{environmentId}`` where
the owner is numeric and the environment id is a UUID. Every operation that
takes an ``environmentId`` checks that format before calling the API, and
responses are decorated with a computed ``uid`` so follow-up calls can use it
directly.
"""

import logging
import re
from typing import Any, Dict, List

from mcp import Tool

from ..core.errors import InvalidArgumentsError
from .base import PostmanToolSet, endpoint, pick

logger = logging.getLogger(__name__)

_UUID_RE = re.compile(r"^[\da-f]{8}-[\da-f]{4}-[\da-f]{4}-[\da-f]{4}-[\da-f]{12}$")
_OWNER_RE = re.compile(r"^\d+$")

UID_DESCRIPTION = (
    "Environment ID in format: {ownerId}-{environmentId} "
    '(e.g., "31912785-b8cdb26a-0c58-4f35-9775-4945c39d7ee2")'
)


def is_valid_uid(uid: str) -> bool:
    """Check the ``{ownerId}-{uuid}`` environment UID format."""
    owner, sep, environment_id = uid.partition("-")
    if not sep:
        return False
    return bool(_OWNER_RE.match(owner) and _UUID_RE.match(environment_id))


def construct_uid(owner: Any, environment_id: Any) -> str:
    return f"{owner}-{environment_id}"


def with_uid(payload: Any) -> Any:
    """Add ``uid`` to an environment payload when owner and id are known.

    Handles bare environment objects as well as the API's
    ``{"environment": {...}}`` wrapper.
    """
    if not isinstance(payload, dict):
        return payload
    if isinstance(payload.get("environment"), dict):
        return {**payload, "environment": with_uid(payload["environment"])}
    if payload.get("owner") is not None and payload.get("id") is not None:
        return {**payload, "uid": construct_uid(payload["owner"], payload["id"])}
    return payload


def _normalize_values(values: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [
        {
            "key": value["key"],
            "value": value["value"],
            "type": value.get("type", "default"),
            "enabled": value.get("enabled", True) is not False,
        }
        for value in values
    ]


ENVIRONMENT_VALUE_SCHEMA = {
    "type": "object",
    "properties": {
        "key": {"type": "string", "description": "Variable name"},
        "value": {"type": "string", "description": "Variable value"},
        "type": {"type": "string", "enum": ["default", "secret"], "description": "Variable type"},
        "enabled": {"type": "boolean", "description": "Variable enabled status"}
    },
    "required": ["key", "value"]
}


class EnvironmentTools(PostmanToolSet):
    """Handles environment operations."""

    resource_types = ("environments",)

    def get_tools(self) -> List[Tool]:
        """Return all environment tools."""
        return [
            Tool(
                name="list_environments",
                description="List all environments in a workspace",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "workspace": {"type": "string", "description": "Workspace ID"}
                    },
                    "required": ["workspace"]
                }
            ),
            Tool(
                name="get_environment",
                description="Get details of a specific environment",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "environmentId": {"type": "string", "description": UID_DESCRIPTION}
                    },
                    "required": ["environmentId"]
                }
            ),
            Tool(
                name="create_environment",
                description=(
                    'Create a new environment in a workspace. Creates in "My Workspace" '
                    "if workspace not specified."
                ),
                inputSchema={
                    "type": "object",
                    "properties": {
                        "environment": {
                            "type": "object",
                            "description": "Environment details",
                            "properties": {
                                "name": {"type": "string", "description": "Environment name"},
                                "values": {
                                    "type": "array",
                                    "description": "Environment variables",
                                    "items": ENVIRONMENT_VALUE_SCHEMA
                                }
                            },
                            "required": ["name", "values"]
                        },
                        "workspace": {"type": "string", "description": "Workspace ID (optional)"}
                    },
                    "required": ["environment"]
                }
            ),
            Tool(
                name="update_environment",
                description=(
                    "Update an existing environment. Only include variables that need "
                    "to be modified."
                ),
                inputSchema={
                    "type": "object",
                    "properties": {
                        "environmentId": {
                            "type": "string",
                            "description": "Environment ID in format: {ownerId}-{environmentId}"
                        },
                        "environment": {
                            "type": "object",
                            "description": "Environment details to update",
                            "properties": {
                                "name": {"type": "string", "description": "New environment name (optional)"},
                                "values": {
                                    "type": "array",
                                    "description": "Environment variables to update (optional)",
                                    "items": ENVIRONMENT_VALUE_SCHEMA
                                }
                            }
                        }
                    },
                    "required": ["environmentId", "environment"]
                }
            ),
            Tool(
                name="delete_environment",
                description="Delete an environment",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "environmentId": {
                            "type": "string",
                            "description": "Environment ID in format: {ownerId}-{environmentId}"
                        }
                    },
                    "required": ["environmentId"]
                }
            ),
            Tool(
                name="fork_environment",
                description="Create a fork of an environment in a workspace",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "environmentId": {"type": "string", "description": "Environment ID"},
                        "label": {"type": "string", "description": "Label/name for the forked environment"},
                        "workspace": {"type": "string", "description": "Target workspace ID"}
                    },
                    "required": ["environmentId", "label", "workspace"]
                }
            ),
            Tool(
                name="get_environment_forks",
                description="Get a list of environment forks",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "environmentId": {"type": "string", "description": "Environment ID"},
                        "cursor": {"type": "string", "description": "Pagination cursor"},
                        "direction": {"type": "string", "enum": ["asc", "desc"], "description": "Sort direction"},
                        "limit": {"type": "number", "description": "Number of results per page"},
                        "sort": {"type": "string", "enum": ["createdAt"], "description": "Sort field"}
                    },
                    "required": ["environmentId"]
                }
            ),
            Tool(
                name="merge_environment_fork",
                description="Merge a forked environment back into its parent",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "environmentId": {"type": "string", "description": "Environment ID"},
                        "source": {"type": "string", "description": "Source environment ID"},
                        "destination": {"type": "string", "description": "Destination environment ID"},
                        "strategy": {
                            "type": "object",
                            "description": "Merge strategy options",
                            "properties": {
                                "deleteSource": {
                                    "type": "boolean",
                                    "description": "Whether to delete the source environment after merging"
                                }
                            }
                        }
                    },
                    "required": ["environmentId", "source", "destination"]
                }
            ),
            Tool(
                name="pull_environment",
                description="Pull changes from parent environment into forked environment",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "environmentId": {"type": "string", "description": "Environment ID"},
                        "source": {"type": "string", "description": "Source (parent) environment ID"},
                        "destination": {"type": "string", "description": "Destination (fork) environment ID"}
                    },
                    "required": ["environmentId", "source", "destination"]
                }
            ),
        ]

    def get_handlers(self):
        return {
            "list_environments": self._list_environments,
            "get_environment": self._get_environment,
            "create_environment": self._create_environment,
            "update_environment": self._update_environment,
            "delete_environment": self._delete_environment,
            "fork_environment": self._fork_environment,
            "get_environment_forks": self._get_environment_forks,
            "merge_environment_fork": self._merge_environment_fork,
            "pull_environment": self._pull_environment,
        }

    def _environment_path(self, args: Dict[str, Any], *rest: str) -> str:
        environment_id = args["environmentId"]
        if not is_valid_uid(environment_id):
            raise InvalidArgumentsError(
                "Invalid environment ID format. Expected format: {ownerId}-{environmentId}"
            )
        return endpoint("environments", environment_id, *rest)

    async def _list_environments(self, args: Dict[str, Any]) -> Any:
        data = await self.client.get("/environments", params=pick(args, "workspace"))
        if isinstance(data, dict) and isinstance(data.get("environments"), list):
            data = {**data, "environments": [with_uid(env) for env in data["environments"]]}
        return data

    async def _get_environment(self, args: Dict[str, Any]) -> Any:
        return with_uid(await self.client.get(self._environment_path(args)))

    async def _create_environment(self, args: Dict[str, Any]) -> Any:
        environment = args["environment"]
        body: Dict[str, Any] = {
            "environment": {
                "name": environment["name"],
                "values": _normalize_values(environment["values"]),
            }
        }
        return with_uid(
            await self.client.post("/environments", body=body, params=pick(args, "workspace"))
        )

    async def _update_environment(self, args: Dict[str, Any]) -> Any:
        path = self._environment_path(args)
        environment = args["environment"]
        update: Dict[str, Any] = {}
        if environment.get("name"):
            update["name"] = environment["name"]
        if "values" in environment:
            update["values"] = _normalize_values(environment["values"])
        return with_uid(await self.client.put(path, body={"environment": update}))

    async def _delete_environment(self, args: Dict[str, Any]) -> Any:
        return await self.client.delete(self._environment_path(args))

    async def _fork_environment(self, args: Dict[str, Any]) -> Any:
        return with_uid(
            await self.client.post(
                self._environment_path(args, "forks"),
                body={"forkName": args["label"]},
                params={"workspace": args["workspace"]},
            )
        )

    async def _get_environment_forks(self, args: Dict[str, Any]) -> Any:
        data = await self.client.get(
            self._environment_path(args, "forks"),
            params=pick(args, "cursor", "direction", "limit", "sort"),
        )
        if isinstance(data, dict) and isinstance(data.get("forks"), list):
            data = {**data, "forks": [with_uid(fork) for fork in data["forks"]]}
        return data

    async def _merge_environment_fork(self, args: Dict[str, Any]) -> Any:
        body = pick(args, "source", "destination")
        strategy = args.get("strategy") or {}
        if "deleteSource" in strategy:
            body["deleteSource"] = strategy["deleteSource"]
        return with_uid(await self.client.post(self._environment_path(args, "merges"), body=body))

    async def _pull_environment(self, args: Dict[str, Any]) -> Any:
        body = pick(args, "source", "destination")
        return with_uid(await self.client.post(self._environment_path(args, "pulls"), body=body))
