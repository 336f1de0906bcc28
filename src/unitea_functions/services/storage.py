"""Object storage client used to hand images to the vision classifier."""

from __future__ import annotations

import logging
from typing import Protocol
from urllib.parse import quote

import httpx

logger = logging.getLogger(__name__)

HTTP_OK = 200


class StorageError(RuntimeError):
    """Raised when a signed URL cannot be produced."""


class ObjectStorage(Protocol):
    """Minimal storage surface the moderation pipeline depends on."""

    async def create_signed_url(
        self,
        bucket: str,
        key: str,
        expires_in: int,
        *,
        access_token: str | None = None,
    ) -> str:
        """Return a time-bounded URL granting read access to ``bucket/key``."""
        ...


class SupabaseStorage:
    """Signed URLs from the platform storage API.

    The caller's token is forwarded so bucket policies apply to the caller,
    not to this service.
    """

    def __init__(self, http: httpx.AsyncClient, *, anon_key: str) -> None:
        self._http = http
        self._anon_key = anon_key

    async def create_signed_url(
        self,
        bucket: str,
        key: str,
        expires_in: int,
        *,
        access_token: str | None = None,
    ) -> str:
        headers = {"apikey": self._anon_key}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"

        path = f"/storage/v1/object/sign/{bucket}/{quote(key.lstrip('/'))}"
        try:
            response = await self._http.post(path, json={"expiresIn": expires_in}, headers=headers)
        except httpx.HTTPError as exc:
            raise StorageError(f"Signed URL request failed: {exc}") from exc

        if response.status_code != HTTP_OK:
            raise StorageError(f"Storage responded with {response.status_code}")

        try:
            signed = response.json().get("signedURL")
        except (ValueError, AttributeError) as exc:
            raise StorageError("Storage returned an unreadable body") from exc
        if not signed:
            raise StorageError("Storage returned no signed URL")

        # The API answers with a path relative to /storage/v1.
        if signed.startswith("http"):
            return signed
        return f"{str(self._http.base_url).rstrip('/')}/storage/v1{signed}"
