"""Shared fixtures: a scripted fake of the Postman API behind httpx.MockTransport."""

import json
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx
import pytest

from postman_mcp.adapters.postman_client import PostmanClient

BASE_URL = "https://api.postman.test"
API_KEY = "PMAK-test-key"

ENVIRONMENT_UID = "12345-b8cdb26a-0c58-4f35-9775-4945c39d7ee2"


class FakePostmanAPI:
    """Answers requests from a (method, path) route table and records them.

    Unrouted requests get the 404 body the real API returns for unknown
    instances.
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self._routes: Dict[Tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}

    def route(
        self,
        method: str,
        path: str,
        status: int = 200,
        json_body: Any = None,
        text: Optional[str] = None,
    ) -> None:
        def respond(request: httpx.Request) -> httpx.Response:
            if text is not None:
                return httpx.Response(status, text=text)
            if json_body is None:
                return httpx.Response(status)
            return httpx.Response(status, json=json_body)

        self._routes[(method.upper(), path)] = respond

    def route_error(self, method: str, path: str, error: Exception) -> None:
        def respond(request: httpx.Request) -> httpx.Response:
            raise error

        self._routes[(method.upper(), path)] = respond

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        respond = self._routes.get((request.method, request.url.path))
        if respond is None:
            return httpx.Response(
                404,
                json={"error": {"name": "instanceNotFoundError", "message": "We could not find that resource"}},
            )
        return respond(request)

    @property
    def last(self) -> httpx.Request:
        assert self.requests, "no request reached the fake Postman API"
        return self.requests[-1]

    def last_json(self) -> Any:
        content = self.last.content
        return json.loads(content) if content else None


@pytest.fixture
def postman_api():
    """Scripted Postman API fake."""
    return FakePostmanAPI()


@pytest.fixture
def client(postman_api):
    """PostmanClient wired to the fake API."""
    return PostmanClient(
        API_KEY,
        base_url=BASE_URL,
        timeout=5.0,
        transport=httpx.MockTransport(postman_api.handle),
    )
