"""
Operation Registry for postman-mcp-server.

Provides the ordered, collision-free catalog of Postman operations.
"""

from .operation_registry import (
    OperationRegistry,
    OperationDefinition,
    OperationHandler,
    RegisteredOperation,
    # Exceptions
    OperationRegistryError,
    OperationNotFound,
    OperationAlreadyRegistered,
    InvalidOperationDefinition,
)

__all__ = [
    'OperationRegistry',
    'OperationDefinition',
    'OperationHandler',
    'RegisteredOperation',
    # Exceptions
    'OperationRegistryError',
    'OperationNotFound',
    'OperationAlreadyRegistered',
    'InvalidOperationDefinition',
]
