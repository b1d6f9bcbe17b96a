"""
Service error taxonomy.

Feature code raises these; `main.py` turns them into `{"error": message}`
JSON responses with the matching status code.
"""

from __future__ import annotations

from fastapi import status


class ServiceError(RuntimeError):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ConfigurationError(ServiceError):
    """A secret or credential the route depends on is not configured."""

    default_message = "Server configuration error"


class AuthorizationError(ServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class UpstreamError(ServiceError):
    """
    A third-party call failed.

    The message is what the caller sees; put the upstream detail in the log,
    not in the message.
    """

    default_message = "Upstream request failed"


class BadRequestError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Bad request"


class DatabaseError(ServiceError):
    """A statement that must return a row returned none."""

    default_message = "Database request failed"
