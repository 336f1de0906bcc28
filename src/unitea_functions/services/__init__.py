# src/unitea_functions/services/__init__.py
"""Business logic services for the UniTea functions."""

from .container import ServiceContainer, build_services
from .identity import AuthenticatedUser, IdentityProvider
from .moderation import ContentTarget, ModerationPipeline, ModerationRequest

__all__ = [
    "AuthenticatedUser",
    "ContentTarget",
    "IdentityProvider",
    "ModerationPipeline",
    "ModerationRequest",
    "ServiceContainer",
    "build_services",
]
