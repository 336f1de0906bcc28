# src/unitea_functions/api/v1/endpoints/comments.py
"""Comment functions: moderated creation and owner/admin deletion."""

from fastapi import APIRouter

from unitea_functions.api.v1.dependencies import CurrentUserDep, PipelineDep, SessionDep
from unitea_functions.schemas.admin import DeleteCommentRequest, SuccessResponse
from unitea_functions.schemas.comment import CommentCreate, CommentResponse
from unitea_functions.schemas.common import ERROR_RESPONSES
from unitea_functions.services import admin_service, comment_service
from unitea_functions.services.moderation import ContentTarget

router = APIRouter(tags=["comments"], responses=ERROR_RESPONSES)


@router.post("/create-comment", response_model=CommentResponse)
async def create_comment(
    comment_data: CommentCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
    pipeline: PipelineDep,
) -> CommentResponse:
    """Moderate and store a comment, assigning an anonymous number if requested."""
    comment_service.validate_comment_request(comment_data)

    content = await pipeline.check_text(comment_data.content, target=ContentTarget.COMMENT)

    comment = comment_service.create_comment(
        db,
        user_id=current_user.id,
        payload=comment_data,
        content=content,
    )
    return CommentResponse.model_validate(comment)


@router.post("/delete-comment", response_model=SuccessResponse)
async def delete_comment(
    body: DeleteCommentRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> SuccessResponse:
    """Delete a comment; allowed for its author and for admins."""
    admin_service.delete_comment(db, user_id=current_user.id, comment_id=body.comment_id)
    return SuccessResponse()
