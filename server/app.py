"""FastAPI application exposing the WhatsApp gateway to internal callers."""

from __future__ import annotations

import json

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from gateway.config import get_settings as get_gateway_settings

from .config import get_settings
from .logging_config import configure_logging, logger
from .routes import api_router


def _error(message: str, status_code: int, **extra: object) -> JSONResponse:
    return JSONResponse({"ok": False, "error": message, **extra}, status_code=status_code)


def register_exception_handlers(app: FastAPI) -> None:
    """Map validation, HTTP and unexpected errors to `{"ok": false, "error": ...}`."""

    @app.exception_handler(RequestValidationError)
    async def _invalid_send_request(request: Request, exc: RequestValidationError):
        logger.debug("Rejected request body on %s: %s", request.url.path, exc.errors())
        return _error(
            "Invalid request",
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=exc.errors(),
        )

    @app.exception_handler(HTTPException)
    async def _http_error(request: Request, exc: HTTPException):
        if exc.status_code == status.HTTP_401_UNAUTHORIZED:
            logger.warning("Unauthorized call to %s", request.url.path)
        detail = exc.detail if isinstance(exc.detail, str) else json.dumps(exc.detail)
        return _error(detail, exc.status_code)

    @app.exception_handler(RuntimeError)
    async def _gateway_unavailable(request: Request, exc: RuntimeError):
        # raised when the Supabase-backed gateway cannot be built
        logger.error("Gateway unavailable on %s: %s", request.url.path, exc)
        return _error("WhatsApp gateway unavailable", status.HTTP_503_SERVICE_UNAVAILABLE)

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s", request.url.path)
        return _error("Internal server error", status.HTTP_500_INTERNAL_SERVER_ERROR)


configure_logging()
_settings = get_settings()

app = FastAPI(
    title=_settings.app_name,
    version=_settings.app_version,
    docs_url=_settings.resolved_docs_url,
    redoc_url=None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.cors_allow_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(api_router)


@app.on_event("startup")
async def _startup() -> None:
    gateway_settings = get_gateway_settings()
    logger.info(
        "Starting WhatsApp gateway %s (provider=%s, env=%s)",
        _settings.app_version,
        gateway_settings.provider,
        _settings.env,
    )
    if not gateway_settings.supabase_url or not gateway_settings.supabase_service_role_key:
        logger.warning("SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY not set; sends will fail with 503")
    if not _settings.internal_api_token:
        logger.warning("INTERNAL_API_TOKEN not set; /messages/send accepts unauthenticated calls")
    if not _settings.operator_api_token:
        logger.warning("OPERATOR_API_TOKEN not set; diagnostics endpoints are disabled")


@app.on_event("shutdown")
async def _shutdown() -> None:
    logger.info("WhatsApp gateway shutdown complete")


__all__ = ["app"]
