"""Prompt templates that walk an assistant through common Postman workflows."""

import json
import logging
from typing import Dict, List, Optional

from mcp.types import GetPromptResult, Prompt, PromptArgument, PromptMessage, TextContent

logger = logging.getLogger(__name__)


PROMPTS = [
    Prompt(
        name="create_collection",
        description="Create a new Postman collection with specified endpoints",
        arguments=[
            PromptArgument(name="name", description="Collection name", required=True),
            PromptArgument(name="description", description="Collection description", required=False),
            PromptArgument(
                name="endpoints",
                description='JSON array of endpoints, e.g. [{"path": "/users", "method": "GET", "description": "..."}]',
                required=True,
            ),
        ],
    ),
    Prompt(
        name="create_environment",
        description="Create a new Postman environment with variables",
        arguments=[
            PromptArgument(name="name", description="Environment name", required=True),
            PromptArgument(
                name="variables",
                description='JSON array of variables, e.g. [{"key": "baseUrl", "value": "...", "type": "default"}]',
                required=True,
            ),
        ],
    ),
]


def _list_argument(raw: str) -> str:
    """Pretty-print a JSON array argument; fall back to the raw text."""
    try:
        parsed = json.loads(raw)
    except ValueError:
        return raw
    if not isinstance(parsed, list):
        return raw
    return json.dumps(parsed, indent=2)


def _require(arguments: Dict[str, str], prompt: Prompt) -> None:
    missing = [
        argument.name for argument in prompt.arguments or []
        if argument.required and not arguments.get(argument.name)
    ]
    if missing:
        raise ValueError(f"Missing required arguments for prompt {prompt.name}: {', '.join(missing)}")


class PostmanPrompts:
    """Lists and renders the Postman prompts."""

    def __init__(self):
        self._prompts = {prompt.name: prompt for prompt in PROMPTS}

    async def list_prompts(self) -> List[Prompt]:
        return list(self._prompts.values())

    async def get_prompt(self, name: str, arguments: Optional[Dict[str, str]] = None) -> GetPromptResult:
        """Render a prompt into one user message.

        Raises:
            ValueError: If the prompt is unknown or a required argument is missing
        """
        prompt = self._prompts.get(name)
        if prompt is None:
            raise ValueError(f"Unknown prompt: {name}")
        arguments = arguments or {}
        _require(arguments, prompt)

        if name == "create_collection":
            text = self._render_create_collection(arguments)
        else:
            text = self._render_create_environment(arguments)

        return GetPromptResult(
            description=prompt.description,
            messages=[PromptMessage(role="user", content=TextContent(type="text", text=text))],
        )

    def _render_create_collection(self, arguments: Dict[str, str]) -> str:
        lines = [f"Create a Postman collection named \"{arguments['name']}\"."]
        if arguments.get("description"):
            lines.append(f"Description: {arguments['description']}")
        lines.extend([
            "",
            "It should contain one request per endpoint below:",
            _list_argument(arguments["endpoints"]),
            "",
            "Use the create_collection tool with a v2.1 collection body "
            "(info.name, info.schema and one item per request). Pass the "
            "workspace argument if the target workspace is known; call "
            "list_workspaces first if it is not.",
        ])
        return "\n".join(lines)

    def _render_create_environment(self, arguments: Dict[str, str]) -> str:
        return "\n".join([
            f"Create a Postman environment named \"{arguments['name']}\" with these variables:",
            _list_argument(arguments["variables"]),
            "",
            "Use the create_environment tool. Each variable needs key and value; "
            "type is 'default' or 'secret' and defaults to 'default'. Mark "
            "credentials and tokens as 'secret'.",
        ])
