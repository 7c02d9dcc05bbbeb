"""
Startup registrations for postman-mcp-server.

Registers every Postman feature tool set with a fresh registry, in the order
clients see them in ``tools/list``.
"""

import logging

from ...adapters.postman_client import PostmanClient
from ...tools.api_tools import ApiTools
from ...tools.auth_tools import AuthTools
from ...tools.collection_tools import CollectionTools
from ...tools.environment_tools import EnvironmentTools
from ...tools.feature_tools import FeatureTools
from ...tools.mock_tools import MockTools
from ...tools.monitor_tools import MonitorTools
from ...tools.user_tools import UserTools
from ...tools.workspace_tools import WorkspaceTools
from ..operation_registry import OperationRegistry

logger = logging.getLogger(__name__)

TOOL_SET_ORDER = (
    WorkspaceTools,
    EnvironmentTools,
    CollectionTools,
    UserTools,
    AuthTools,
    ApiTools,
    MockTools,
    MonitorTools,
    FeatureTools,
)


def build_tool_sets(client: PostmanClient) -> list:
    """Instantiate every tool set around the shared client."""
    return [tool_set_cls(client) for tool_set_cls in TOOL_SET_ORDER]


def build_registry(client: PostmanClient) -> OperationRegistry:
    """Register all tool sets.

    Raises:
        OperationAlreadyRegistered: If two tool sets claim the same name
    """
    registry = OperationRegistry()
    for tool_set in build_tool_sets(client):
        registry.register_tool_set(tool_set)
    logger.info(f"Registered {len(registry)} Postman operations")
    logger.debug(f"Operations: {', '.join(registry.names())}")
    return registry


__all__ = [
    'TOOL_SET_ORDER',
    'build_tool_sets',
    'build_registry',
]
