"""
Error handling module for the BridgeYou forum API.

Provides the exception hierarchy and the HTTP error mapping used by routes.
"""

from .exceptions import (
    BridgeYouError,
    CompletionError,
    ConfigurationError,
    DatabaseError,
    DatabaseQueryError,
    NotFoundError,
)
from .error_handler import GENERIC_ERROR_DETAIL, ErrorHandler, error_handler

__all__ = [
    'BridgeYouError',
    'CompletionError',
    'ConfigurationError',
    'DatabaseError',
    'DatabaseQueryError',
    'NotFoundError',
    'ErrorHandler',
    'GENERIC_ERROR_DETAIL',
    'error_handler',
]
