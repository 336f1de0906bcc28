"""Shared Pydantic schemas for common API elements."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error document returned by every function on failure."""

    error: str = Field(..., description="User-displayable error message.")


# Documented on every function route; the body is produced by the error handlers.
ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "Invalid request or rejected content"},
    401: {"model": ErrorResponse, "description": "Missing or invalid credentials"},
    403: {"model": ErrorResponse, "description": "Caller lacks the required role"},
    404: {"model": ErrorResponse, "description": "Target row does not exist"},
    500: {"model": ErrorResponse, "description": "Database or unexpected failure"},
}
