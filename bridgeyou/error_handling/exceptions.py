"""
Exception hierarchy for the BridgeYou forum API.

Enhancement failures (language model interpretation) never leave the
services that own them; data store failures are raised to the routers.
"""

from typing import Optional


class BridgeYouError(Exception):
    """Base class for all BridgeYou errors."""
    pass


class ConfigurationError(BridgeYouError):
    """Error related to application configuration."""
    pass


class DatabaseError(BridgeYouError):
    """Error related to database operations."""
    pass


class DatabaseQueryError(DatabaseError):
    """Error during the execution of a database query."""

    def __init__(self, message: str, operation: Optional[str] = None):
        self.operation = operation
        full_message = message
        if operation:
            full_message = f"{operation}: {message}"
        super().__init__(full_message)


class NotFoundError(BridgeYouError):
    """A requested record does not exist or is not visible to the caller."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class CompletionError(BridgeYouError):
    """The completion service failed or returned an unusable response."""
    pass
