# src/unitea_functions/services/post_service.py
"""Persistence of moderated posts and their optional polls."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from unitea_functions.core.errors import PersistenceError, ValidationError
from unitea_functions.models import Poll, PollOption, Post
from unitea_functions.models.post import POST_TYPE_FEED, POST_TYPE_LOST_FOUND
from unitea_functions.schemas.post import PostCreate
from unitea_functions.services.audit import record_secondary_failure

logger = logging.getLogger(__name__)

MIN_POLL_OPTIONS = 2


def normalize_poll_options(options: Iterable[str] | None) -> list[str]:
    """Trim, drop blanks and de-duplicate, keeping first-seen order."""
    normalized: list[str] = []
    for option in options or ():
        text = option.strip() if isinstance(option, str) else ""
        if text and text not in normalized:
            normalized.append(text)
    return normalized


def validate_post_request(payload: PostCreate) -> None:
    """Reject structurally incomplete posts before any classifier runs.

    Raises:
        ValidationError: If the post has nothing to show or lacks lost & found fields
    """
    has_text = bool(payload.content and payload.content.strip())
    if not (has_text or payload.image_url or payload.reposted_from_post_id):
        raise ValidationError("Post content is required")

    if payload.post_type == POST_TYPE_LOST_FOUND:
        if not (payload.location and payload.location.strip()):
            raise ValidationError("Location is required for lost & found posts")
        if payload.category is None:
            raise ValidationError("Category is required for lost & found posts")


def create_post(db: Session, *, user_id: str, payload: PostCreate, content: str) -> Post:
    """Insert the post row, then try to attach its poll.

    Args:
        db: Database session
        user_id: Author id from the identity gate
        payload: Original request body
        content: Text that passed moderation (already trimmed)

    Returns:
        The committed post

    Raises:
        PersistenceError: If the post row cannot be written
    """
    is_lost_found = payload.post_type == POST_TYPE_LOST_FOUND
    post = Post(
        user_id=user_id,
        content=content,
        post_type=payload.post_type or POST_TYPE_FEED,
        image_url=payload.image_url or None,
        # Lost & found listings always show who to contact.
        is_anonymous=False if is_lost_found else bool(payload.is_anonymous),
    )
    if payload.location and payload.location.strip():
        post.location = payload.location.strip()
    if payload.category:
        post.category = payload.category
    if payload.reposted_from_post_id:
        post.reposted_from_post_id = payload.reposted_from_post_id

    db.add(post)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Database error creating post for %s: %s", user_id, exc)
        raise PersistenceError(str(getattr(exc, "orig", None) or exc)) from exc
    db.refresh(post)

    options = normalize_poll_options(payload.poll_options)
    if post.post_type == POST_TYPE_FEED and len(options) >= MIN_POLL_OPTIONS:
        attach_poll(
            db,
            post,
            options,
            expires_at=payload.poll_expires_at,
            allow_multiple=bool(payload.poll_allow_multiple),
        )

    return post


def attach_poll(db: Session, post: Post, options: list[str], **poll_fields) -> Poll | None:
    """Best-effort poll creation for an already committed post.

    A failure here is logged and recorded in ``secondary_write_failures``;
    the post stays as it is.
    """
    try:
        poll = _insert_poll(db, post.id, options, **poll_fields)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Failed to create poll for post %s", post.id, exc_info=True)
        record_secondary_failure(
            db,
            entity="poll",
            error=exc,
            post_id=post.id,
            user_id=post.user_id,
            payload={"options": options},
        )
        return None
    return poll


def _insert_poll(db: Session, post_id: str, options: list[str], **poll_fields) -> Poll:
    poll = Poll(post_id=post_id, **poll_fields)
    db.add(poll)
    db.flush()
    db.add_all(
        PollOption(poll_id=poll.id, option_text=text, position=position)
        for position, text in enumerate(options)
    )
    db.commit()
    return poll
