"""Comment-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class CommentCreate(BaseModel):
    """Body of the create-comment function."""

    content: str | None = None
    post_id: str | None = None
    parent_comment_id: str | None = None
    is_anonymous: bool | None = None


class CommentResponse(BaseModel):
    """Created comment row as returned to the client."""

    id: str
    post_id: str
    user_id: str
    parent_comment_id: str | None
    content: str
    is_anonymous: bool
    post_specific_anon_id: int | None
    is_deleted: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
