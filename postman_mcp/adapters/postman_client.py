"""Async client for the Postman REST API.

Every tool set shares one ``PostmanClient``. It owns the credential header,
the default content headers and the request timeout, and it is the only
place where HTTP status codes are turned into the typed errors of
``postman_mcp.core.errors``.
"""

import logging
from typing import Any, Dict, Mapping, Optional

import httpx

from ..core.errors import (
    BadRequest,
    Forbidden,
    NoResponse,
    NotFound,
    RateLimited,
    RequestSetupError,
    Unauthorized,
    UpstreamError,
    UpstreamInternal,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.getpostman.com"
DEFAULT_TIMEOUT = 30.0

# The API builder endpoints (/apis) only answer to the v10 media type
V10_HEADERS = {"Accept": "application/vnd.api.v10+json"}


class PostmanClient:
    """Thin wrapper around a shared ``httpx.AsyncClient``."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the Postman API client.

        Args:
            api_key: Postman API key, sent as ``X-Api-Key``
            base_url: API base address
            timeout: Per-request timeout in seconds
            transport: Optional transport override (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={
                "X-Api-Key": api_key,
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    async def get(self, path: str, params: Optional[Mapping[str, Any]] = None, **kwargs) -> Any:
        return await self.call("GET", path, params=params, **kwargs)

    async def post(self, path: str, body: Any = None, **kwargs) -> Any:
        return await self.call("POST", path, body=body, **kwargs)

    async def put(self, path: str, body: Any = None, **kwargs) -> Any:
        return await self.call("PUT", path, body=body, **kwargs)

    async def patch(self, path: str, body: Any = None, **kwargs) -> Any:
        return await self.call("PATCH", path, body=body, **kwargs)

    async def delete(self, path: str, **kwargs) -> Any:
        return await self.call("DELETE", path, **kwargs)

    async def call(
        self,
        method: str,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        body: Any = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Any:
        """
        Perform one API call.

        Args:
            method: HTTP verb
            path: Endpoint path relative to the base URL (may carry a query)
            params: Query parameters; ``None`` values are dropped
            body: JSON body
            headers: Per-call headers, overriding the defaults

        Returns:
            Parsed JSON payload, raw text for non-JSON bodies, or None when
            the response body is empty

        Raises:
            UpstreamError: classified failure (see ``core.errors``)
        """
        method = method.upper()
        query = _clean_params(params)
        logger.debug(f"{method} {path} params={sorted(query)}")

        try:
            request = self.client.build_request(
                method,
                path,
                params=query or None,
                json=body,
                headers=dict(headers) if headers else None,
            )
        except (httpx.InvalidURL, ValueError, TypeError) as e:
            raise RequestSetupError(
                f"Request setup error: {e}", method=method, path=path
            ) from e

        try:
            response = await self.client.send(request)
        except httpx.TimeoutException as e:
            raise NoResponse(
                f"No response received from Postman API: request timed out after {self.timeout}s",
                method=method,
                path=path,
            ) from e
        except (httpx.UnsupportedProtocol, httpx.LocalProtocolError) as e:
            raise RequestSetupError(
                f"Request setup error: {e}", method=method, path=path
            ) from e
        except httpx.TransportError as e:
            raise NoResponse(
                f"No response received from Postman API: {e}", method=method, path=path
            ) from e
        except httpx.DecodingError as e:
            raise UpstreamInternal(
                f"Postman API returned an undecodable response: {e}", method=method, path=path
            ) from e
        except httpx.RequestError as e:
            raise NoResponse(
                f"No response received from Postman API: {e}", method=method, path=path
            ) from e

        if response.is_success:
            return _parse_body(response)

        error = classify_response(response, method, path)
        logger.warning(f"{method} {path} failed with {response.status_code}: {error.message}")
        raise error


# ============================================================================
# Helpers
# ============================================================================

def _clean_params(params: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    if not params:
        return {}
    cleaned = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        cleaned[key] = value
    return cleaned


def _parse_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def _upstream_message(payload: Any) -> Optional[str]:
    """Pull the human-readable message out of a Postman error body."""
    if not isinstance(payload, dict):
        return None
    error = payload.get("error")
    if isinstance(error, dict):
        message = error.get("message") or error.get("name")
        if message:
            return str(message)
    elif isinstance(error, str) and error:
        return error
    for key in ("message", "detail", "title"):
        if payload.get(key):
            return str(payload[key])
    return None


def classify_response(response: httpx.Response, method: str, path: str) -> UpstreamError:
    """Map a non-success response onto exactly one UpstreamError subclass."""
    status = response.status_code
    try:
        payload = response.json()
    except ValueError:
        payload = None
    upstream = _upstream_message(payload)
    details = None
    if isinstance(payload, dict) and isinstance(payload.get("error"), dict):
        details = payload["error"].get("details")

    common = {"status_code": status, "method": method, "path": path}

    if status in (400, 422):
        return BadRequest(f"Bad request: {upstream or 'request rejected by Postman API'}", details=details, **common)
    if status == 401:
        return Unauthorized(f"Unauthorized: {upstream or 'invalid or missing API key'}", **common)
    if status == 403:
        return Forbidden(f"Forbidden: {upstream or 'insufficient permissions'}", **common)
    if status == 404:
        return NotFound(f"Resource not found: {upstream or path}", **common)
    if status == 429:
        return RateLimited(f"Rate limit exceeded: {upstream or 'too many requests'}", **common)
    # 5xx and any status we do not recognize; only the upstream message field is echoed
    return UpstreamInternal(
        f"Postman API error ({status}): {upstream or 'internal server error'}", **common
    )
