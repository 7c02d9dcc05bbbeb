"""
Core Layer - Error taxonomy and the tool call dispatcher.

Modules:
- errors: ErrorKind, typed exceptions and the ErrorEnvelope
- dispatcher: lookup -> validate -> invoke -> normalize cycle
"""

from .errors import (
    ErrorKind,
    ErrorEnvelope,
    PostmanMCPError,
    ConfigurationError,
    InvalidArgumentsError,
    UpstreamError,
)
from .dispatcher import Dispatcher

__all__ = [
    'ErrorKind',
    'ErrorEnvelope',
    'PostmanMCPError',
    'ConfigurationError',
    'InvalidArgumentsError',
    'UpstreamError',
    'Dispatcher',
]
