"""Post-related Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class PostCreate(BaseModel):
    """Body of the create-post function."""

    content: str | None = Field(None, description="Post text; optional when an image is attached")
    image_url: str | None = Field(None, description="Object key inside the post-images bucket")
    post_type: Literal["feed", "lost_found"] = Field("feed", description="Feed or lost & found")
    is_anonymous: bool | None = Field(None, description="Hide the author's identity")
    location: str | None = Field(None, description="Where the item was lost or found")
    category: Literal["lost", "found"] | None = Field(None, description="Lost & found category")
    reposted_from_post_id: str | None = Field(None, description="Original post of a repost")
    poll_options: list[str] | None = Field(None, description="Raw poll option strings")
    poll_expires_at: datetime | None = Field(None, description="When voting closes")
    poll_allow_multiple: bool | None = Field(None, description="Allow picking several options")


class PostResponse(BaseModel):
    """Created post row as returned to the client."""

    id: str
    user_id: str
    content: str
    post_type: str
    image_url: str | None
    is_anonymous: bool
    location: str | None
    category: str | None
    reposted_from_post_id: str | None
    is_deleted: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
