"""User tools."""

from typing import Any, Dict, List

from mcp import Tool

from .base import PostmanToolSet


class UserTools(PostmanToolSet):
    """Handles the authenticated user's profile."""

    resource_types = ("user",)

    def get_tools(self) -> List[Tool]:
        return [
            Tool(
                name="get_user_info",
                description="Get information about the authenticated user",
                inputSchema={
                    "type": "object",
                    "properties": {},
                    "required": []
                }
            ),
        ]

    def get_handlers(self):
        return {"get_user_info": self._get_user_info}

    async def _get_user_info(self, args: Dict[str, Any]) -> Any:
        return await self.client.get("/me")
