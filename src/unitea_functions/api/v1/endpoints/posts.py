# src/unitea_functions/api/v1/endpoints/posts.py
"""Post functions: moderated creation and owner/admin deletion."""

import logging

from fastapi import APIRouter

from unitea_functions.api.v1.dependencies import (
    BearerTokenDep,
    CurrentUserDep,
    PipelineDep,
    SessionDep,
)
from unitea_functions.schemas.admin import DeletePostRequest, SuccessResponse
from unitea_functions.schemas.common import ERROR_RESPONSES
from unitea_functions.schemas.post import PostCreate, PostResponse
from unitea_functions.services import admin_service, post_service
from unitea_functions.services.moderation import ContentTarget, ModerationRequest

logger = logging.getLogger(__name__)

router = APIRouter(tags=["posts"], responses=ERROR_RESPONSES)


@router.post("/create-post", response_model=PostResponse)
async def create_post(
    post_data: PostCreate,
    current_user: CurrentUserDep,
    token: BearerTokenDep,
    db: SessionDep,
    pipeline: PipelineDep,
) -> PostResponse:
    """Moderate and store a new post.

    Args:
        post_data: Post fields, optional image key and poll options
        current_user: Caller resolved by the identity gate
        token: Caller's bearer token, forwarded to object storage
        db: Database session
        pipeline: Moderation pipeline

    Returns:
        The created post row

    Raises:
        FunctionError: Any stage failure, rendered by the error handlers
    """
    post_service.validate_post_request(post_data)

    content = await pipeline.review(
        ModerationRequest(
            target=ContentTarget.POST,
            content=post_data.content,
            image_key=post_data.image_url,
            access_token=token,
        )
    )

    post = post_service.create_post(
        db,
        user_id=current_user.id,
        payload=post_data,
        content=content,
    )
    logger.info("Post %s created by %s", post.id, current_user.id)
    return PostResponse.model_validate(post)


@router.post("/delete-post", response_model=SuccessResponse)
async def delete_post(
    body: DeletePostRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> SuccessResponse:
    """Delete a post; allowed for its author and for admins."""
    admin_service.delete_post(db, user_id=current_user.id, post_id=body.post_id)
    return SuccessResponse()
