# src/unitea_functions/api/v1/endpoints/users.py
"""Admin-only user moderation functions."""

from fastapi import APIRouter

from unitea_functions.api.v1.dependencies import CurrentUserDep, SessionDep
from unitea_functions.schemas.admin import (
    BanRequest,
    BanResponse,
    SuccessResponse,
    UnbanRequest,
)
from unitea_functions.schemas.common import ERROR_RESPONSES
from unitea_functions.services import admin_service

router = APIRouter(tags=["users"], responses=ERROR_RESPONSES)


@router.post("/ban-user", response_model=BanResponse)
async def ban_user(
    body: BanRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> BanResponse:
    """Ban a user for 10 days, 1 month, 1 year or permanently."""
    admin_service.require_admin(db, current_user.id, "Forbidden: only admins can ban users")
    profile = admin_service.ban_user(
        db,
        admin_id=current_user.id,
        target_user_id=body.user_id,
        duration=body.duration,
    )
    return BanResponse(
        banned_until=profile.banned_until,
        is_permanently_banned=profile.is_permanently_banned,
    )


@router.post("/unban-user", response_model=SuccessResponse)
async def unban_user(
    body: UnbanRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> SuccessResponse:
    """Lift any ban on a user."""
    admin_service.require_admin(db, current_user.id, "Forbidden: only admins can unban users")
    admin_service.unban_user(db, admin_id=current_user.id, target_user_id=body.user_id)
    return SuccessResponse()
