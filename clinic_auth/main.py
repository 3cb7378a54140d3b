import logging
from contextlib import asynccontextmanager
from typing import Awaitable, Callable, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from clinic_auth.config import settings
from clinic_auth.core.dependencies import build_supabase_session_context
from clinic_auth.modules.session import routes as session_routes
from clinic_auth.modules.session.context import SessionContext

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

ContextFactory = Callable[[], Awaitable[SessionContext]]


class SecurityHeadersMiddleware:
    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message):
            if message["type"] == "http.response.start":
                message.setdefault("headers", [])
                message["headers"].extend([
                    (b"X-Content-Type-Options", b"nosniff"),
                    (b"X-Frame-Options", b"DENY"),
                    (b"Cache-Control", b"no-store"),
                ])
            await send(message)

        await self.app(scope, receive, send_with_headers)


def create_app(context_factory: Optional[ContextFactory] = None) -> FastAPI:
    factory = context_factory or build_supabase_session_context

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Application startup")
        context = await factory()
        await context.initialize()
        app.state.session_context = context
        try:
            yield
        finally:
            await context.aclose()
            app.state.session_context = None
            logger.info("Application shutdown")

    app = FastAPI(
        title=settings.app_name,
        debug=settings.debug,
        redirect_slashes=False,
        lifespan=lifespan,
    )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception: %s", exc)
        if settings.is_production:
            return JSONResponse(status_code=500, content={"detail": "Internal server error"})
        return JSONResponse(status_code=500, content={"detail": str(exc)})

    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins_list(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(session_routes.router, prefix="/api/v1")

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    @app.get("/ready")
    async def ready(request: Request):
        """Ready once the persisted session has been resolved"""
        context = getattr(request.app.state, "session_context", None)
        if context is None or not context.bootstrapped:
            return JSONResponse(status_code=503, content={"status": "starting"})
        return {"status": "ready"}

    return app
