# src/unitea_functions/main.py
"""Main entry point for the UniTea functions service."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from unitea_functions.api.v1 import API_PREFIX, comments_router, posts_router, users_router
from unitea_functions.core.cors import FunctionCorsMiddleware
from unitea_functions.core.errors import FunctionError
from unitea_functions.core.settings import settings
from unitea_functions.services.container import ServiceContainer, build_services

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="UniTea Functions",
    description="Moderated content creation and admin actions for the UniTea app",
    version=settings.app_version,
)

# Post and comment functions only echo production origins; the admin
# dashboard also runs on localhost.
_admin_paths = ("ban-user", "unban-user")
_public_paths = ("create-post", "create-comment", "delete-post", "delete-comment")
app.add_middleware(
    FunctionCorsMiddleware,
    policies={
        **{f"{API_PREFIX}/{name}": settings.cors_allowed_origins for name in _public_paths},
        **{f"{API_PREFIX}/{name}": settings.admin_cors_origins for name in _admin_paths},
    },
)

# Include API routers
app.include_router(posts_router, prefix=API_PREFIX)
app.include_router(comments_router, prefix=API_PREFIX)
app.include_router(users_router, prefix=API_PREFIX)


@app.exception_handler(FunctionError)
async def function_error_handler(request: Request, exc: FunctionError) -> JSONResponse:
    """Render a terminal function error as ``{"error": message}``."""
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed bodies with the same error shape as every other failure."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = first.get("msg", "Invalid request")
        detail = f"{location}: {message}" if location else message
    else:
        detail = "Invalid request"
    return JSONResponse({"error": detail}, status_code=status.HTTP_400_BAD_REQUEST)


@app.on_event("startup")
async def on_startup() -> None:
    app.state.services = build_services(settings)


@app.on_event("shutdown")
async def on_shutdown() -> None:
    services: ServiceContainer | None = getattr(app.state, "services", None)
    if services:
        await services.aclose()


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("unitea_functions.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
