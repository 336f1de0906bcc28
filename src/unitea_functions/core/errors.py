"""Error taxonomy shared by every function.

Each error carries the HTTP status it maps to and a message that is safe to
show to the end user. Services raise these; the HTTP layer renders them as
``{"error": message}`` exactly once.
"""

from __future__ import annotations

from fastapi import status


class FunctionError(Exception):
    """Base class for errors that terminate a request."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class AuthenticationError(FunctionError):
    """Missing, invalid or expired bearer credential."""

    status_code = status.HTTP_401_UNAUTHORIZED


class AuthorizationError(FunctionError):
    """Authenticated caller lacks the role the function requires."""

    status_code = status.HTTP_403_FORBIDDEN


class ValidationError(FunctionError):
    """A required field is missing or malformed."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(FunctionError):
    """The referenced row does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class ModerationRejection(FunctionError):
    """A moderation stage flagged the submitted content."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, *, stage: str) -> None:
        super().__init__(message)
        self.stage = stage


class UpstreamFailure(FunctionError):
    """A classifier or storage call failed, as opposed to returning a verdict."""

    status_code = status.HTTP_400_BAD_REQUEST


class PersistenceError(FunctionError):
    """The primary row could not be written."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
