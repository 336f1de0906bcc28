# src/unitea_functions/models/audit.py
"""Operator-facing records: admin actions and swallowed secondary writes."""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from unitea_functions.db.session import Base
from unitea_functions.db.time import new_uuid, utcnow

ADMIN_ACTION_BAN = "ban"
ADMIN_ACTION_UNBAN = "unban"
ADMIN_ACTION_DELETE_POST = "delete_post"


class AdminActionLog(Base):
    """Audit trail of moderation actions taken by admins."""

    __tablename__ = "admin_action_logs"
    __table_args__ = (
        Index("ix_admin_action_logs_admin_id", "admin_id"),
        Index("ix_admin_action_logs_action", "action"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    admin_id: Mapped[str] = mapped_column(String(36), nullable=False)
    action: Mapped[str] = mapped_column(Text, nullable=False)
    target_user_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    # No FK: the post is usually gone by the time the log is read.
    target_post_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    metadata_: Mapped[dict[str, Any]] = mapped_column(
        "metadata", JSON, nullable=False, default=dict
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )


class SecondaryWriteFailure(Base):
    """A best-effort write that failed after the primary row was committed.

    Operators query this table to reconcile e.g. posts that lost their poll.
    """

    __tablename__ = "secondary_write_failures"
    __table_args__ = (Index("ix_secondary_write_failures_entity", "entity"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # "poll" | "admin_action_log"
    entity: Mapped[str] = mapped_column(Text, nullable=False)
    post_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    user_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    error: Mapped[str] = mapped_column(Text, nullable=False)
    payload: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
