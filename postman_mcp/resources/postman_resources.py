"""MCP resource provider exposing read-only Postman entities."""

import logging
from typing import List

from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.shared.exceptions import McpError
from mcp.types import INVALID_REQUEST, ErrorData, Resource
from mcp.types import ResourceTemplate as MCPResourceTemplate

from ..adapters.postman_client import V10_HEADERS, PostmanClient
from ..core.dispatcher import render_payload
from ..core.errors import ErrorEnvelope, UpstreamError
from .uri_router import (
    DirectResource,
    DirectResourceRouter,
    ResourceRouter,
    ResourceTemplate,
    RouteFailure,
    TemplatedResourceRouter,
)

logger = logging.getLogger(__name__)


def _versions_endpoint(v) -> str:
    path = f"/apis/{v['apiId']}/versions"
    if "versionId" in v:
        path = f"{path}/{v['versionId']}"
    return path


def _server_responses_endpoint(v) -> str:
    path = f"/mocks/{v['mockId']}/server-responses"
    if "serverResponseId" in v:
        path = f"{path}/{v['serverResponseId']}"
    return path


DIRECT_RESOURCES = [
    DirectResource("workspaces", "/workspaces", "Workspaces", "All workspaces available to the API key"),
    DirectResource("user", "/me", "Current user", "The authenticated user"),
    DirectResource("collections", "/collections", "Collections", "All accessible collections"),
    DirectResource("environments", "/environments", "Environments", "All accessible environments"),
    DirectResource("mocks", "/mocks", "Mock servers", "All mock servers"),
    DirectResource("monitors", "/monitors", "Monitors", "All monitors"),
]

# Order matters: the first matching template wins
RESOURCE_TEMPLATES = [
    ResourceTemplate(
        "postman://workspaces/{workspaceId}/collections",
        lambda v: f"/collections?workspace={v['workspaceId']}",
        "Workspace collections",
        "Collections in a workspace",
    ),
    ResourceTemplate(
        "postman://workspaces/{workspaceId}/environments",
        lambda v: f"/environments?workspace={v['workspaceId']}",
        "Workspace environments",
        "Environments in a workspace",
    ),
    ResourceTemplate(
        "postman://workspaces/{workspaceId}",
        lambda v: f"/workspaces/{v['workspaceId']}",
        "Workspace",
        "Details of a workspace",
    ),
    ResourceTemplate(
        "postman://collections/{collectionId}/folders/{folderId}",
        lambda v: f"/collections/{v['collectionId']}/folders/{v['folderId']}",
        "Collection folder",
        "A folder in a collection",
    ),
    ResourceTemplate(
        "postman://collections/{collectionId}/requests/{requestId}",
        lambda v: f"/collections/{v['collectionId']}/requests/{v['requestId']}",
        "Collection request",
        "A request in a collection",
    ),
    ResourceTemplate(
        "postman://collections/{collectionId}/responses/{responseId}",
        lambda v: f"/collections/{v['collectionId']}/responses/{v['responseId']}",
        "Collection response",
        "A saved response in a collection",
    ),
    ResourceTemplate(
        "postman://collections/{collectionId}",
        lambda v: f"/collections/{v['collectionId']}",
        "Collection",
        "Full contents of a collection",
    ),
    ResourceTemplate(
        "postman://environments/{environmentId}",
        lambda v: f"/environments/{v['environmentId']}",
        "Environment",
        "Details of an environment",
    ),
    ResourceTemplate(
        "postman://apis/{apiId}/versions/{versionId?}",
        _versions_endpoint,
        "API versions",
        "All versions of an API, or one version when versionId is given",
        headers=V10_HEADERS,
    ),
    ResourceTemplate(
        "postman://apis/{apiId}/schemas/{schemaId}/files",
        lambda v: f"/apis/{v['apiId']}/schemas/{v['schemaId']}/files",
        "API schema files",
        "Files of an API schema",
        headers=V10_HEADERS,
    ),
    ResourceTemplate(
        "postman://apis/{apiId}/schemas/{schemaId}",
        lambda v: f"/apis/{v['apiId']}/schemas/{v['schemaId']}",
        "API schema",
        "A schema of an API",
        headers=V10_HEADERS,
    ),
    ResourceTemplate(
        "postman://apis/{apiId}",
        lambda v: f"/apis/{v['apiId']}",
        "API",
        "Details of an API",
        headers=V10_HEADERS,
    ),
    ResourceTemplate(
        "postman://mocks/{mockId}/server-responses/{serverResponseId?}",
        _server_responses_endpoint,
        "Mock server responses",
        "Server responses of a mock, or one response when serverResponseId is given",
    ),
    ResourceTemplate(
        "postman://mocks/{mockId}/call-logs",
        lambda v: f"/mocks/{v['mockId']}/call-logs",
        "Mock call logs",
        "Recent calls served by a mock",
    ),
    ResourceTemplate(
        "postman://mocks/{mockId}",
        lambda v: f"/mocks/{v['mockId']}",
        "Mock server",
        "Details of a mock server",
    ),
    ResourceTemplate(
        "postman://monitors/{monitorId}",
        lambda v: f"/monitors/{v['monitorId']}",
        "Monitor",
        "Details of a monitor",
    ),
]


def build_router() -> ResourceRouter:
    return ResourceRouter(
        DirectResourceRouter(DIRECT_RESOURCES),
        TemplatedResourceRouter(RESOURCE_TEMPLATES),
    )


class PostmanResourceProvider:
    """Expose Postman entities as MCP resources for direct consumption."""

    def __init__(self, client: PostmanClient, router: ResourceRouter = None):
        """Initialize the resource provider.

        Args:
            client: Shared Postman API client
            router: Resource router (defaults to the built-in resource set)
        """
        self.client = client
        self.router = router or build_router()

    async def list_resources(self) -> List[Resource]:
        """List the fixed, unparameterized resources."""
        return [
            Resource(
                uri=resource.uri,
                name=resource.title,
                description=resource.description,
                mimeType=resource.mime_type,
            )
            for resource in self.router.direct.resources
        ]

    async def list_resource_templates(self) -> List[MCPResourceTemplate]:
        """List parameterized resources as RFC 6570 templates."""
        return [
            MCPResourceTemplate(
                uriTemplate=template.advertised_uri_template,
                name=template.name,
                description=template.description,
                mimeType=template.mime_type,
            )
            for template in self.router.templated.templates
        ]

    async def read_resource(self, uri: str) -> List[ReadResourceContents]:
        """Read a specific resource.

        Args:
            uri: Resource URI such as ``postman://collections/{id}``

        Returns:
            One JSON content block

        Raises:
            McpError: If the URI is unknown or the Postman API call fails
        """
        uri = str(uri)
        try:
            route = self.router.resolve(uri)
        except RouteFailure as e:
            raise McpError(
                ErrorData(
                    code=INVALID_REQUEST,
                    message=f"Unknown resource: {uri}",
                    data={"reason": e.reason},
                )
            ) from e

        try:
            payload = await self.client.get(route.endpoint, headers=route.headers)
        except UpstreamError as e:
            logger.warning(f"Reading {uri} failed ({e.kind.value}): {e.message}")
            raise McpError(ErrorEnvelope(e.kind, e.message, e.to_data()).to_error_data()) from e

        return [ReadResourceContents(content=render_payload(payload), mime_type=route.mime_type)]
