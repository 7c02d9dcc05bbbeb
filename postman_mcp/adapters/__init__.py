"""
Adapter modules for external service integrations.

This package contains the async client wrapping the Postman REST API.
"""

from .postman_client import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, V10_HEADERS, PostmanClient

__all__ = [
    'PostmanClient',
    'DEFAULT_BASE_URL',
    'DEFAULT_TIMEOUT',
    'V10_HEADERS',
]
