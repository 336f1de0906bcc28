# src/unitea_functions/models/profile.py
"""SQLAlchemy model for user profiles."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from unitea_functions.db.session import Base
from unitea_functions.db.time import utcnow


class Profile(Base):
    """Public profile row keyed by the auth service's user id."""

    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    username: Mapped[str | None] = mapped_column(Text, nullable=True, unique=True)
    is_admin: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Ban state; banned_until is null for permanent bans and for unbanned users.
    is_banned: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_permanently_banned: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    banned_until: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
