# src/unitea_functions/services/admin_service.py
"""Owner and admin actions: removals, bans and unbans."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from unitea_functions.core.errors import (
    AuthorizationError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from unitea_functions.db.time import utcnow
from unitea_functions.models import Comment, Post, Profile
from unitea_functions.models.audit import (
    ADMIN_ACTION_BAN,
    ADMIN_ACTION_DELETE_POST,
    ADMIN_ACTION_UNBAN,
)
from unitea_functions.services.audit import log_admin_action

logger = logging.getLogger(__name__)

BAN_DURATIONS: dict[str, timedelta | None] = {
    "10_days": timedelta(days=10),
    "1_month": timedelta(days=30),
    "1_year": timedelta(days=365),
    "permanent": None,
}


def is_admin(db: Session, user_id: str) -> bool:
    """Return True when the user's profile carries the admin flag."""
    profile = db.get(Profile, user_id)
    return bool(profile and profile.is_admin)


def require_admin(db: Session, user_id: str, message: str) -> None:
    """Raise ``AuthorizationError`` with ``message`` unless the user is an admin."""
    if not is_admin(db, user_id):
        raise AuthorizationError(message)


def _commit(db: Session, action: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("%s failed: %s", action, exc)
        raise PersistenceError(str(getattr(exc, "orig", None) or exc)) from exc


def delete_post(db: Session, *, user_id: str, post_id: str | None) -> None:
    """Remove a post on behalf of its author or an admin.

    Raises:
        ValidationError: If no post id was given
        NotFoundError: If the post does not exist
        AuthorizationError: If the caller is neither author nor admin
    """
    if not post_id:
        raise ValidationError("post_id is required")

    post = db.get(Post, post_id)
    if post is None:
        raise NotFoundError("Post not found")

    owner = post.user_id == user_id
    admin = is_admin(db, user_id)
    if not owner and not admin:
        raise AuthorizationError(
            "Forbidden: only the post author or an admin can delete this post"
        )

    author_id = post.user_id
    db.delete(post)
    _commit(db, "delete-post")

    # Authors deleting their own posts are not moderation events.
    if admin:
        log_admin_action(
            db,
            admin_id=user_id,
            action=ADMIN_ACTION_DELETE_POST,
            target_user_id=author_id,
            target_post_id=post_id,
            metadata={"deleted_by_owner": owner},
        )


def delete_comment(db: Session, *, user_id: str, comment_id: str | None) -> None:
    """Remove a comment on behalf of its author or an admin."""
    if not comment_id:
        raise ValidationError("comment_id is required")

    comment = db.get(Comment, comment_id)
    if comment is None:
        raise NotFoundError("Comment not found")

    if comment.user_id != user_id and not is_admin(db, user_id):
        raise AuthorizationError(
            "Forbidden: only the comment author or an admin can delete this comment"
        )

    db.delete(comment)
    _commit(db, "delete-comment")


def ban_user(
    db: Session,
    *,
    admin_id: str,
    target_user_id: str | None,
    duration: str | None,
    now: datetime | None = None,
) -> Profile:
    """Ban a user for one of the fixed durations.

    Args:
        db: Database session
        admin_id: Caller, already verified as admin
        target_user_id: Profile to ban
        duration: One of ``BAN_DURATIONS``
        now: Clock override for tests

    Returns:
        The updated profile
    """
    if not target_user_id:
        raise ValidationError("user_id is required")
    if target_user_id == admin_id:
        raise ValidationError("You cannot ban yourself")
    if duration not in BAN_DURATIONS:
        raise ValidationError(
            "duration must be one of: " + ", ".join(BAN_DURATIONS)
        )

    profile = db.get(Profile, target_user_id)
    if profile is None:
        raise NotFoundError("User not found")

    now = now or utcnow()
    length = BAN_DURATIONS[duration]
    profile.is_banned = True
    profile.is_permanently_banned = length is None
    profile.banned_until = None if length is None else now + length
    profile.updated_at = now
    _commit(db, "ban-user")
    db.refresh(profile)

    log_admin_action(
        db,
        admin_id=admin_id,
        action=ADMIN_ACTION_BAN,
        target_user_id=target_user_id,
        metadata={"duration": duration},
    )
    return profile


def unban_user(db: Session, *, admin_id: str, target_user_id: str | None) -> None:
    """Clear every ban column of a user."""
    if not target_user_id:
        raise ValidationError("user_id is required")

    profile = db.get(Profile, target_user_id)
    if profile is None:
        raise NotFoundError("User not found")

    profile.is_banned = False
    profile.is_permanently_banned = False
    profile.banned_until = None
    profile.updated_at = utcnow()
    _commit(db, "unban-user")

    log_admin_action(
        db,
        admin_id=admin_id,
        action=ADMIN_ACTION_UNBAN,
        target_user_id=target_user_id,
    )
