"""Shared API dependencies: identity gate, database session, injected services."""

from typing import Annotated

from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from unitea_functions.db.session import get_db
from unitea_functions.services.container import ServiceContainer
from unitea_functions.services.identity import AuthenticatedUser, extract_bearer_token
from unitea_functions.services.moderation import ModerationPipeline

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_services(request: Request) -> ServiceContainer:
    """Return the container built at startup."""
    return request.app.state.services


ServicesDep = Annotated[ServiceContainer, Depends(get_services)]


def get_bearer_token(
    authorization: Annotated[str | None, Header()] = None,
) -> str:
    """Extract the bearer token; no remote call is made when it is missing.

    Raises:
        AuthenticationError: If the header is absent or empty
    """
    return extract_bearer_token(authorization)


BearerTokenDep = Annotated[str, Depends(get_bearer_token)]


async def get_current_user(token: BearerTokenDep, services: ServicesDep) -> AuthenticatedUser:
    """Exchange the bearer token for the caller's identity.

    Raises:
        AuthenticationError: If the identity provider rejects the token
    """
    return await services.identity.get_user(token)


def get_moderation_pipeline(services: ServicesDep) -> ModerationPipeline:
    """Return the shared moderation pipeline."""
    return services.pipeline


# Type aliases for handler signatures
CurrentUserDep = Annotated[AuthenticatedUser, Depends(get_current_user)]
PipelineDep = Annotated[ModerationPipeline, Depends(get_moderation_pipeline)]
