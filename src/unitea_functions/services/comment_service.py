# src/unitea_functions/services/comment_service.py
"""Persistence of moderated comments and anonymous identity assignment."""

from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from unitea_functions.core.errors import PersistenceError, ValidationError
from unitea_functions.models import Comment, PostAnonIdentity
from unitea_functions.schemas.comment import CommentCreate

logger = logging.getLogger(__name__)

# A lost race re-reads the winner; more attempts only help under heavy contention.
ANON_ASSIGN_ATTEMPTS = 5
ANON_CONSTRAINT_PREFIX = "uq_post_anon_identities"


def validate_comment_request(payload: CommentCreate) -> None:
    """Check required fields before any classifier runs.

    Raises:
        ValidationError: If content or post id is missing
    """
    if not payload.content or not payload.content.strip():
        raise ValidationError("Comment content is required")
    if not payload.post_id:
        raise ValidationError("Post ID is required")


def _is_identity_conflict(exc: IntegrityError) -> bool:
    """True when the violated constraint is one of the anonymous-number uniques."""
    orig = getattr(exc, "orig", None)
    constraint = getattr(getattr(orig, "diag", None), "constraint_name", None)
    if constraint:
        return constraint.startswith(ANON_CONSTRAINT_PREFIX)
    # SQLite names the columns instead of the constraint.
    detail = str(orig or exc)
    return ANON_CONSTRAINT_PREFIX in detail or "UNIQUE constraint failed: post_anon_identities." in detail


def reserve_anonymous_identity(db: Session, *, post_id: str, user_id: str) -> int:
    """Return the user's anonymous number within a post, staging a new one if needed.

    The first anonymous comment of a user on a post gets ``max + 1`` for that
    post; later ones reuse it. A new number is only added to the session, so it
    is committed together with the comment or not at all.
    """
    existing = db.scalar(
        select(PostAnonIdentity.anon_id).where(
            PostAnonIdentity.post_id == post_id,
            PostAnonIdentity.user_id == user_id,
        )
    )
    if existing is not None:
        return existing

    current_max = db.scalar(
        select(func.coalesce(func.max(PostAnonIdentity.anon_id), 0)).where(
            PostAnonIdentity.post_id == post_id
        )
    )
    anon_id = int(current_max or 0) + 1
    db.add(PostAnonIdentity(post_id=post_id, user_id=user_id, anon_id=anon_id))
    return anon_id


def _build_comment(db: Session, *, user_id: str, payload: CommentCreate, content: str) -> Comment:
    comment = Comment(
        user_id=user_id,
        post_id=payload.post_id,
        content=content,
        is_anonymous=bool(payload.is_anonymous),
        is_deleted=False,
    )
    if payload.parent_comment_id:
        comment.parent_comment_id = payload.parent_comment_id
    if comment.is_anonymous:
        comment.post_specific_anon_id = reserve_anonymous_identity(
            db, post_id=payload.post_id, user_id=user_id
        )
    return comment


def create_comment(db: Session, *, user_id: str, payload: CommentCreate, content: str) -> Comment:
    """Insert a comment that passed moderation.

    A newly assigned anonymous number shares the comment's transaction. The
    unique constraints on ``post_anon_identities`` decide concurrent first
    assignments: the loser's commit fails and the next attempt re-reads what
    the winner stored.

    Raises:
        PersistenceError: If the comment row cannot be written
    """
    anonymous = bool(payload.is_anonymous)
    for attempt in range(1, ANON_ASSIGN_ATTEMPTS + 1):
        comment = _build_comment(db, user_id=user_id, payload=payload, content=content)
        anon_id = comment.post_specific_anon_id
        db.add(comment)
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            if anonymous and _is_identity_conflict(exc):
                logger.info(
                    "Anonymous id %s for post %s was taken (attempt %d); retrying",
                    anon_id,
                    payload.post_id,
                    attempt,
                )
                continue
            logger.error("Database error creating comment on post %s: %s", payload.post_id, exc)
            raise PersistenceError(str(getattr(exc, "orig", None) or exc)) from exc
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error("Database error creating comment on post %s: %s", payload.post_id, exc)
            raise PersistenceError(str(getattr(exc, "orig", None) or exc)) from exc
        db.refresh(comment)
        return comment

    logger.error("Gave up assigning anonymous id on post %s", payload.post_id)
    raise PersistenceError("Could not assign anonymous identity")
