"""Custom exceptions for Hasura Cloud deployment."""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional


NOTHING_CHANGED_MESSAGE = "nothing changed in config"


class GraphQLErrorKind(str, Enum):
    """Recognized categories of errors reported by the control-plane API."""

    GENERIC = "generic"
    NOTHING_CHANGED = "nothing_changed"

    @classmethod
    def from_message(cls, message: str) -> "GraphQLErrorKind":
        if message.strip() == NOTHING_CHANGED_MESSAGE:
            return cls.NOTHING_CHANGED
        return cls.GENERIC


class HasuraDeployError(Exception):
    """Base exception for all deployment errors."""

    pass


class ConfigurationError(HasuraDeployError):
    """Raised when configuration or action inputs are invalid or missing."""

    pass


class MissingCredentialError(ConfigurationError):
    """Raised when the Hasura Cloud access token is not available."""

    def __init__(self, variable: str):
        self.variable = variable
        super().__init__(f"{variable} is not set")


class TransportError(HasuraDeployError):
    """Raised when the HTTP request itself fails or returns garbage."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class GraphQLRequestError(HasuraDeployError):
    """Raised when the API responds with a non-empty ``errors`` list.

    Carries the first reported error object as ``detail``.
    """

    kind = GraphQLErrorKind.GENERIC

    def __init__(self, message: str, detail: Optional[dict[str, Any]] = None):
        self.message = message
        self.detail = detail or {"message": message}
        super().__init__(message)

    @classmethod
    def from_error(cls, error: Any) -> "GraphQLRequestError":
        """Build the matching exception class for a raw GraphQL error."""
        if isinstance(error, dict):
            message = str(error.get("message", "")) or "Unknown GraphQL error"
            detail = error
        else:
            message = str(error)
            detail = {"message": message}

        if GraphQLErrorKind.from_message(message) is GraphQLErrorKind.NOTHING_CHANGED:
            return NothingChangedError(message, detail)
        return cls(message, detail)


class NothingChangedError(GraphQLRequestError):
    """Raised when an env update submits exactly the current configuration."""

    kind = GraphQLErrorKind.NOTHING_CHANGED
