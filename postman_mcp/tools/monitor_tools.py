"""Monitor tools: scheduled collection runs."""

from typing import Any, Dict, List

from mcp import Tool

from .base import PostmanToolSet, endpoint, pick

MONITOR_OPTIONS_SCHEMA = {
    "type": "object",
    "description": "Monitor options",
    "properties": {
        "strictSSL": {"type": "boolean", "description": "SSL verification setting"},
        "followRedirects": {"type": "boolean", "description": "Redirect handling"},
        "requestTimeout": {"type": "number", "description": "Request timeout in ms"}
    }
}


def _monitor_schema(required: List[str], schedule_required: List[str]) -> Dict[str, Any]:
    return {
        "type": "object",
        "description": "Monitor details",
        "properties": {
            "name": {"type": "string", "description": "Monitor name"},
            "collection": {"type": "string", "description": "Collection ID to monitor"},
            "environment": {"type": "string", "description": "Environment ID to use"},
            "schedule": {
                "type": "object",
                "description": "Schedule configuration",
                "properties": {
                    "cron": {"type": "string", "description": "Cron expression for timing"},
                    "timezone": {"type": "string", "description": "Timezone for schedule"}
                },
                "required": schedule_required
            },
            "options": MONITOR_OPTIONS_SCHEMA
        },
        "required": required
    }


MONITOR_ID_SCHEMA = {
    "type": "object",
    "properties": {
        "monitorId": {"type": "string", "description": "Monitor ID"}
    },
    "required": ["monitorId"]
}


class MonitorTools(PostmanToolSet):
    """Handles monitor operations."""

    resource_types = ("monitors",)

    def get_tools(self) -> List[Tool]:
        return [
            Tool(
                name="list_monitors",
                description="Get all monitors",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "workspace": {
                            "type": "string",
                            "description": "Return only monitors found in the given workspace"
                        }
                    },
                    "required": []
                }
            ),
            Tool(
                name="get_monitor",
                description="Get details of a specific monitor",
                inputSchema=MONITOR_ID_SCHEMA
            ),
            Tool(
                name="create_monitor",
                description=(
                    "Create a new monitor. Cannot create monitors for collections "
                    "added to an API definition."
                ),
                inputSchema={
                    "type": "object",
                    "properties": {
                        "monitor": _monitor_schema(["name", "collection", "schedule"], ["cron", "timezone"]),
                        "workspace": {"type": "string", "description": "Workspace ID"}
                    },
                    "required": ["monitor"]
                }
            ),
            Tool(
                name="update_monitor",
                description="Update an existing monitor",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "monitorId": {"type": "string", "description": "Monitor ID"},
                        "monitor": _monitor_schema([], [])
                    },
                    "required": ["monitorId", "monitor"]
                }
            ),
            Tool(
                name="delete_monitor",
                description="Delete a monitor",
                inputSchema=MONITOR_ID_SCHEMA
            ),
            Tool(
                name="run_monitor",
                description=(
                    "Run a monitor. For async=true, response won't include stats, executions, "
                    "and failures. Use GET /monitors/{id} to get this information for async runs."
                ),
                inputSchema={
                    "type": "object",
                    "properties": {
                        "monitorId": {"type": "string", "description": "Monitor ID"},
                        "async": {
                            "type": "boolean",
                            "description": "If true, runs the monitor asynchronously from the created monitor run task",
                            "default": False
                        }
                    },
                    "required": ["monitorId"]
                }
            ),
        ]

    def get_handlers(self):
        return {
            "list_monitors": self._list_monitors,
            "get_monitor": self._get_monitor,
            "create_monitor": self._create_monitor,
            "update_monitor": self._update_monitor,
            "delete_monitor": self._delete_monitor,
            "run_monitor": self._run_monitor,
        }

    async def _list_monitors(self, args: Dict[str, Any]) -> Any:
        return await self.client.get("/monitors", params=pick(args, "workspace"))

    async def _get_monitor(self, args: Dict[str, Any]) -> Any:
        return await self.client.get(endpoint("monitors", args["monitorId"]))

    async def _create_monitor(self, args: Dict[str, Any]) -> Any:
        return await self.client.post(
            "/monitors", body={"monitor": args["monitor"]}, params=pick(args, "workspace")
        )

    async def _update_monitor(self, args: Dict[str, Any]) -> Any:
        return await self.client.put(
            endpoint("monitors", args["monitorId"]), body={"monitor": args["monitor"]}
        )

    async def _delete_monitor(self, args: Dict[str, Any]) -> Any:
        return await self.client.delete(endpoint("monitors", args["monitorId"]))

    async def _run_monitor(self, args: Dict[str, Any]) -> Any:
        return await self.client.post(
            endpoint("monitors", args["monitorId"], "run"), params=pick(args, "async")
        )
