"""Best-effort writes that must never fail the request that triggered them."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from unitea_functions.models import AdminActionLog, SecondaryWriteFailure

logger = logging.getLogger(__name__)


def record_secondary_failure(
    db: Session,
    *,
    entity: str,
    error: BaseException,
    post_id: str | None = None,
    user_id: str | None = None,
    payload: dict[str, Any] | None = None,
) -> SecondaryWriteFailure | None:
    """Persist a reconcilable record of a swallowed write failure.

    The session is expected to be clean (rolled back) when this is called.
    Returns None if even the record could not be written; that case is
    logged only.
    """
    failure = SecondaryWriteFailure(
        entity=entity,
        post_id=post_id,
        user_id=user_id,
        error=str(error)[:2000],
        payload=payload or {},
    )
    db.add(failure)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.error(
            "Could not record %s write failure for post %s", entity, post_id, exc_info=True
        )
        return None
    return failure


def log_admin_action(
    db: Session,
    *,
    admin_id: str,
    action: str,
    target_user_id: str | None = None,
    target_post_id: str | None = None,
    metadata: dict[str, Any] | None = None,
) -> None:
    """Append to the admin audit trail; failures are recorded, not raised."""
    entry = AdminActionLog(
        admin_id=admin_id,
        action=action,
        target_user_id=target_user_id,
        target_post_id=target_post_id,
        metadata_=metadata or {},
    )
    db.add(entry)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Failed to insert audit log for %s by %s", action, admin_id, exc_info=True)
        record_secondary_failure(
            db,
            entity="admin_action_log",
            error=exc,
            post_id=target_post_id,
            user_id=target_user_id,
            payload={"admin_id": admin_id, "action": action},
        )
