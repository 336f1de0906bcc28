"""Per-function CORS handling.

Each function has its own origin allow-list. A request ``Origin`` found in the
list is echoed back; anything else gets the wildcard. Preflight requests are
answered here without reaching the routers.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from fastapi import Request, status
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)

ALLOWED_HEADERS = "authorization, x-client-info, apikey, content-type"
WILDCARD = "*"


def cors_headers(origin: str | None, allowed_origins: Sequence[str]) -> dict[str, str]:
    """Build the CORS headers for a single response.

    Args:
        origin: Value of the request's ``Origin`` header, if any
        allowed_origins: Origins that may be echoed back

    Returns:
        Header mapping to merge into the response
    """
    allow_origin = origin if origin and origin in allowed_origins else WILDCARD
    return {
        "Access-Control-Allow-Origin": allow_origin,
        "Access-Control-Allow-Headers": ALLOWED_HEADERS,
    }


class FunctionCorsMiddleware(BaseHTTPMiddleware):
    """Apply function-specific CORS headers and the last-resort error handler."""

    def __init__(
        self,
        app: ASGIApp,
        *,
        policies: Mapping[str, Sequence[str]],
        default_origins: Sequence[str] = (),
    ) -> None:
        super().__init__(app)
        self.policies = dict(policies)
        self.default_origins = tuple(default_origins)

    def _allowed_for(self, path: str) -> Sequence[str]:
        return self.policies.get(path.rstrip("/"), self.default_origins)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        headers = cors_headers(request.headers.get("origin"), self._allowed_for(request.url.path))

        if request.method == "OPTIONS":
            return PlainTextResponse("ok", headers=headers)

        try:
            response = await call_next(request)
        except Exception:
            logger.exception("Unhandled error in %s %s", request.method, request.url.path)
            response = JSONResponse(
                {"error": "Internal server error"},
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        response.headers.update(headers)
        return response
