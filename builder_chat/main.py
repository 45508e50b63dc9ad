# builder_chat/main.py
# -*- coding: utf-8 -*-
"""
Builder Chat Server — FastAPI application entrypoint
----------------------------------------------------
Wires everything together:

- Sets up central logging.
- Creates the FastAPI app.
- Adds CORS outside production.
- Mounts routers:
    * /api/chat   (HTTP) → one chat turn
    * /api/clear  (HTTP) → drop a session's history
- Exposes meta endpoints (/, /health, /favicon.ico).
- Exposes an ASGI `app` object for uvicorn.

Typical run command (dev):

    uvicorn builder_chat.main:app --host 0.0.0.0 --port 8000 --reload
"""

from __future__ import annotations

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from builder_chat import __version__
from builder_chat.core.config import settings
from builder_chat.routers.chat import error_response, router as chat_router
from builder_chat.utils import setup_logging, get_logger


setup_logging(debug=settings.debug)
logger = get_logger(__name__)
logger.info(
    "Builder chat server starting (env=%s, session_backend=%s, tier1_enabled=%s, tier2_enabled=%s)",
    settings.environment,
    settings.session_backend,
    settings.tier1_enabled,
    settings.tier2_enabled,
)

# Error text for a body field with the wrong type, keyed by (path, field).
_FIELD_ERRORS = {
    ("/api/chat", "message"): "Message is required",
    ("/api/clear", "sessionId"): "Session ID is required",
}

# Error text for bodies that are not JSON at all.
_BODY_ERRORS = {
    "/api/chat": "Message is required",
    "/api/clear": "Session ID is required",
}

_GENERIC_ERROR = "Invalid request body"


def validation_error_text(path: str, errors) -> str:
    """Pick the client-facing message for a rejected request body."""
    for error in errors:
        loc = error.get("loc") or ()
        if len(loc) >= 2 and loc[0] == "body" and isinstance(loc[1], str):
            return _FIELD_ERRORS.get((path, loc[1]), _GENERIC_ERROR)
    return _BODY_ERRORS.get(path, _GENERIC_ERROR)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    logger.warning("Invalid request body for %s: %s", request.url.path, errors)
    return error_response(400, validation_error_text(request.url.path, errors))


def create_app() -> FastAPI:
    """
    Application factory.

    Returns a configured FastAPI instance ready for uvicorn.
    """
    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    if settings.environment != "production":
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=False,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.add_exception_handler(RequestValidationError, request_validation_handler)

    app.include_router(chat_router)

    # ------------------------------------------------------------------
    # Meta / health endpoints
    # ------------------------------------------------------------------

    @app.get("/", tags=["meta"])
    async def root():
        return {
            "name": settings.app_name,
            "environment": settings.environment,
            "message": "Builder chat server is running.",
        }

    @app.get("/health", tags=["meta"])
    async def health_check():
        """Lightweight health check for monitoring scripts."""
        return {
            "status": "ok",
            "environment": settings.environment,
            "debug": settings.debug,
            "session_backend": settings.session_backend,
            "tier1_enabled": settings.tier1_enabled,
            "tier2_enabled": settings.tier2_enabled,
        }

    # Browsers request this automatically; answer without a body.
    @app.get("/favicon.ico", include_in_schema=False)
    async def favicon():
        return Response(status_code=204)

    logger.info("FastAPI app created (env=%s)", settings.environment)
    return app


# ASGI app for uvicorn / gunicorn
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "builder_chat.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=(settings.environment != "production"),
    )
