"""
Pydantic schemas for function request/response bodies.

These schemas define the structure of API data for serialization and validation.
"""

from .admin import (
    BanRequest,
    BanResponse,
    DeleteCommentRequest,
    DeletePostRequest,
    SuccessResponse,
    UnbanRequest,
)
from .comment import CommentCreate, CommentResponse
from .common import ERROR_RESPONSES, ErrorResponse
from .post import PostCreate, PostResponse

__all__ = [
    "BanRequest", "BanResponse",
    "DeleteCommentRequest", "DeletePostRequest",
    "SuccessResponse", "UnbanRequest",
    "CommentCreate", "CommentResponse",
    "ERROR_RESPONSES",
    "ErrorResponse",
    "PostCreate", "PostResponse",
]
