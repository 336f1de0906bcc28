"""Schemas for the admin and owner-only functions."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class DeletePostRequest(BaseModel):
    """Body of delete-post."""

    post_id: str | None = None


class DeleteCommentRequest(BaseModel):
    """Body of delete-comment."""

    comment_id: str | None = None


class BanRequest(BaseModel):
    """Body of ban-user. Duration is validated by the service for a readable error."""

    user_id: str | None = None
    duration: str | None = None


class UnbanRequest(BaseModel):
    """Body of unban-user."""

    user_id: str | None = None


class SuccessResponse(BaseModel):
    """Plain acknowledgement."""

    success: bool = True


class BanResponse(SuccessResponse):
    """Result of a ban."""

    banned_until: datetime | None = None
    is_permanently_banned: bool = False
