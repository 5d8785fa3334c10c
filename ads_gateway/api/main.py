"""
FastAPI Application
==================

Application factory wiring settings, logging, the ads backend, the tool
dispatcher and the SSE connection manager into a FastAPI app, plus the uvicorn
entrypoint.
"""

from contextlib import asynccontextmanager
from http import HTTPStatus
import sys
import uuid
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.datastructures import MutableHeaders
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.types import ASGIApp, Message, Receive, Scope, Send
import uvicorn

from ads_gateway import __version__
from ads_gateway.api.routes import health, sse, tools
from ads_gateway.api.sse.connection_manager import SSEConnectionManager
from ads_gateway.config.logging import get_logger, setup_logging
from ads_gateway.config.settings import ConfigurationError, Settings, load_settings
from ads_gateway.core.backends import AdsBackend, create_backend
from ads_gateway.core.errors import GatewayError
from ads_gateway.core.tools.dispatcher import ToolDispatcher

logger = get_logger(__name__)


def error_body(message: str, code: str) -> dict:
    return {"error": {"message": message, "code": code}}


class RequestIDMiddleware:
    """Add request ID to all requests."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = str(uuid.uuid4())
        scope.setdefault("state", {})["request_id"] = request_id

        async def send_with_request_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                MutableHeaders(scope=message).append("X-Request-ID", request_id)
            await send(message)

        await self.app(scope, receive, send_with_request_id)


class OptionsMiddleware:
    """Answer OPTIONS requests that are not CORS preflights with 200."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and scope["method"] == "OPTIONS":
            response = Response(status_code=200, headers={"Allow": "GET, POST, OPTIONS"})
            await response(scope, receive, send)
            return

        await self.app(scope, receive, send)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings: Settings = app.state.settings
    logger.info(
        "Starting application",
        app_name=settings.app_name,
        environment=settings.environment,
        backend=app.state.backend.name,
    )

    try:
        yield
    finally:
        logger.info("Shutting down application")

        await app.state.sse_manager.close_all()

        try:
            await app.state.backend.close()
            logger.info("Ads backend closed")
        except Exception as e:
            logger.error("Error closing ads backend", error=str(e))


def register_exception_handlers(app: FastAPI) -> None:
    """Render every failure as ``{"error": {"message", "code"}}``."""

    @app.exception_handler(GatewayError)
    async def gateway_exception_handler(request: Request, exc: GatewayError) -> JSONResponse:
        logger.error(
            "Request failed",
            path=request.url.path,
            status_code=exc.status_code,
            error_code=exc.code,
            error=exc.message,
            request_id=getattr(request.state, "request_id", None),
        )
        return JSONResponse(status_code=exc.status_code, content={"error": exc.to_dict()})

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        message = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        logger.warning(
            "Invalid request",
            path=request.url.path,
            error=message,
            request_id=getattr(request.state, "request_id", None),
        )
        return JSONResponse(
            status_code=400, content=error_body(f"Invalid request: {message}", "INVALID_REQUEST")
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        try:
            code = HTTPStatus(exc.status_code).name
        except ValueError:
            code = str(exc.status_code)
        logger.error(
            "HTTP exception",
            status_code=exc.status_code,
            detail=exc.detail,
            request_id=getattr(request.state, "request_id", None),
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(str(exc.detail), code),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """General exception handler for unexpected errors."""
        logger.error(
            "Unhandled exception",
            exception=str(exc),
            request_id=getattr(request.state, "request_id", None),
            exc_info=True,
        )
        return JSONResponse(
            status_code=500, content=error_body("Internal server error", "INTERNAL_ERROR")
        )


def create_app(
    settings: Optional[Settings] = None, backend: Optional[AdsBackend] = None
) -> FastAPI:
    """
    Application factory.

    Args:
        settings: Settings to run with; loaded from the environment when omitted
        backend: Ads backend override; otherwise selected by ``settings.ads_backend``

    Returns:
        FastAPI application instance

    Raises:
        ConfigurationError: If settings are loaded here and are incomplete
    """
    if settings is None:
        settings = load_settings()
    setup_logging(settings)

    if backend is None:
        backend = create_backend(settings)

    app = FastAPI(
        title=settings.app_name,
        description="Health check, SSE heartbeat streams and ads tool execution",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    app.state.settings = settings
    app.state.backend = backend
    app.state.dispatcher = ToolDispatcher(backend)
    app.state.sse_manager = SSEConnectionManager(max_connections=settings.sse_max_connections)

    # Innermost: CORSMiddleware answers preflights before this sees them
    app.add_middleware(OptionsMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Connection-ID"],
    )
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(sse.router)
    app.include_router(tools.router)

    return app


def run_server() -> None:
    """Load configuration, then serve until interrupted. Exits with status 1 on bad config."""
    try:
        settings = load_settings()
    except ConfigurationError as e:
        logger.error("Invalid configuration, refusing to start", error=str(e))
        sys.exit(1)

    app = create_app(settings)
    logger.info("Server starting", host=settings.host, port=settings.port)
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        access_log=True,
        log_config=None,
        timeout_graceful_shutdown=5,
    )


if __name__ == "__main__":
    run_server()
