"""Identity gate: turn a bearer credential into a user id.

Two providers are available. ``SupabaseAuthClient`` asks the platform's auth
service, which also catches revoked sessions. ``JwtIdentityProvider`` checks
the platform-issued JWT locally and needs no network round trip.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

import httpx
from jose import JWTError, jwt

from unitea_functions.core.errors import AuthenticationError
from unitea_functions.core.settings import Settings

logger = logging.getLogger(__name__)

HTTP_OK = 200
BEARER_SCHEME = "bearer"


@dataclass(frozen=True)
class AuthenticatedUser:
    """Caller identity exposed to the rest of the request."""

    id: str
    email: str | None = None
    role: str | None = None


class IdentityProvider(Protocol):
    """Anything that can verify a bearer token."""

    async def get_user(self, token: str) -> AuthenticatedUser:
        """Return the caller's identity or raise ``AuthenticationError``."""
        ...


def extract_bearer_token(authorization: str | None) -> str:
    """Pull the token out of an ``Authorization`` header value.

    Args:
        authorization: Raw header value, or None when the header is absent

    Returns:
        The bare token

    Raises:
        AuthenticationError: If the header is absent or carries no token
    """
    if not authorization:
        raise AuthenticationError("Missing authorization header")
    value = authorization.strip()
    parts = value.split(None, 1)
    # A bare "Bearer" (trailing space already stripped by the HTTP stack) carries no token.
    if parts and parts[0].lower() == BEARER_SCHEME:
        value = parts[1].strip() if len(parts) > 1 else ""
    if not value:
        raise AuthenticationError("Missing authorization header")
    return value


class SupabaseAuthClient:
    """Verify tokens with the platform auth service (``GET /auth/v1/user``)."""

    def __init__(self, http: httpx.AsyncClient, *, anon_key: str) -> None:
        self._http = http
        self._anon_key = anon_key

    async def get_user(self, token: str) -> AuthenticatedUser:
        try:
            response = await self._http.get(
                "/auth/v1/user",
                headers={"apikey": self._anon_key, "Authorization": f"Bearer {token}"},
            )
        except httpx.HTTPError as exc:
            logger.warning("Auth service request failed: %s", exc)
            raise AuthenticationError("Unauthorized") from exc

        if response.status_code != HTTP_OK:
            logger.info("Auth service rejected token with status %d", response.status_code)
            raise AuthenticationError("Unauthorized")

        try:
            payload = response.json()
        except ValueError as exc:
            raise AuthenticationError("Unauthorized") from exc

        user_id = payload.get("id") if isinstance(payload, dict) else None
        if not user_id:
            raise AuthenticationError("Unauthorized")
        return AuthenticatedUser(
            id=str(user_id),
            email=payload.get("email"),
            role=payload.get("role"),
        )


class JwtIdentityProvider:
    """Verify platform-issued JWTs with the project's signing secret."""

    def __init__(self, secret: str, *, algorithm: str = "HS256", audience: str | None = None) -> None:
        self._secret = secret
        self._algorithm = algorithm
        self._audience = audience

    async def get_user(self, token: str) -> AuthenticatedUser:
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                audience=self._audience,
            )
        except JWTError as err:
            raise AuthenticationError("Unauthorized") from err

        subject = payload.get("sub")
        if not subject:
            raise AuthenticationError("Unauthorized")
        return AuthenticatedUser(
            id=str(subject),
            email=payload.get("email"),
            role=payload.get("role"),
        )


def build_identity_provider(config: Settings, http: httpx.AsyncClient) -> IdentityProvider:
    """Choose the identity provider named by ``AUTH_MODE``."""
    if config.auth_mode == "jwt":
        if not config.supabase_jwt_secret:
            raise RuntimeError("AUTH_MODE=jwt requires SUPABASE_JWT_SECRET")
        return JwtIdentityProvider(
            config.supabase_jwt_secret,
            algorithm=config.jwt_algorithm,
            audience=config.jwt_audience,
        )
    return SupabaseAuthClient(http, anon_key=config.supabase_anon_key)
