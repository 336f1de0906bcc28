# src/unitea_functions/models/__init__.py
"""SQLAlchemy models for the UniTea functions service."""

from .audit import AdminActionLog, SecondaryWriteFailure
from .comment import Comment, PostAnonIdentity
from .post import Poll, PollOption, Post
from .profile import Profile

__all__ = [
    "AdminActionLog", "SecondaryWriteFailure",
    "Comment", "PostAnonIdentity",
    "Poll", "PollOption", "Post",
    "Profile",
]
