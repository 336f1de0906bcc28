# src/unitea_functions/models/comment.py
"""SQLAlchemy models for comments and per-post anonymous identities."""

from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from unitea_functions.db.session import Base
from unitea_functions.db.time import new_uuid, utcnow


class Comment(Base):
    """Comment or reply on a post."""

    __tablename__ = "comments"
    __table_args__ = (Index("ix_comments_post_id", "post_id"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    post_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    parent_comment_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("comments.id", ondelete="CASCADE"),
        nullable=True,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    is_anonymous: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    # Copied from post_anon_identities so readers need no join.
    post_specific_anon_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )


class PostAnonIdentity(Base):
    """Stable anonymous number of one user within one post's thread.

    Both unique constraints are what make assignment first-writer-wins: a
    second insert for the same user loses to the first, and two users can
    never be handed the same number.
    """

    __tablename__ = "post_anon_identities"
    __table_args__ = (
        UniqueConstraint("post_id", "user_id", name="uq_post_anon_identities_user"),
        UniqueConstraint("post_id", "anon_id", name="uq_post_anon_identities_number"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[str] = mapped_column(String(36), nullable=False)
    anon_id: Mapped[int] = mapped_column(Integer, nullable=False)
