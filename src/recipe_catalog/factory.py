"""Application factory for creating FastAPI instances.

The factory configures the FastAPI application with its settings, sets up
the middleware stack, registers exception handlers, mounts the API routers,
and serves the landing page and (optionally) the local image directory.
"""

from __future__ import annotations

from pathlib import Path
from typing import Final

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from recipe_catalog.api.v1.router import router as v1_router
from recipe_catalog.core.config import Settings, get_settings
from recipe_catalog.core.events import lifespan
from recipe_catalog.core.exceptions import setup_exception_handlers
from recipe_catalog.core.middleware import LoggingMiddleware, RequestIDMiddleware
from recipe_catalog.observability.logging import get_logger


logger = get_logger(__name__)

STATIC_DIR: Final[Path] = Path(__file__).parent / "static"


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure a FastAPI application instance.

    Args:
        settings: Optional settings override. If not provided, uses get_settings().

    Returns:
        Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title=settings.app.name,
        version=settings.app.version,
        description="Recipe catalog with user accounts and saved-recipe lists",
        lifespan=lifespan,
        docs_url="/docs" if settings.is_non_production else None,
        redoc_url="/redoc" if settings.is_non_production else None,
        openapi_url="/openapi.json" if settings.is_non_production else None,
        debug=settings.app.debug,
    )

    app.state.settings = settings

    setup_exception_handlers(app)
    _setup_middleware(app, settings)
    _setup_routers(app, settings)
    _setup_static(app, settings)

    return app


def _setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Configure middleware stack.

    Middleware is executed in reverse order of addition, so the request id
    is bound before the logging middleware writes its first line.
    """
    if settings.api.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.api.cors_origins,
            allow_credentials=False,
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=["X-Request-ID"],
        )

    app.add_middleware(
        LoggingMiddleware,
        quiet_prefixes=(
            f"{settings.api.v1_prefix}/health",
            f"{settings.api.v1_prefix}/ready",
            "/images/",
            "/favicon.ico",
        ),
    )
    app.add_middleware(RequestIDMiddleware)


def _setup_routers(app: FastAPI, settings: Settings) -> None:
    app.include_router(v1_router, prefix=settings.api.v1_prefix)

    @app.get("/", include_in_schema=False)
    async def landing_page() -> FileResponse:
        """Landing page with the login and register forms."""
        return FileResponse(STATIC_DIR / "index.html", media_type="text/html")


def _setup_static(app: FastAPI, settings: Settings) -> None:
    """Serve downloaded images under ``/images`` when configured and present."""
    image_dir = Path(settings.content.image_dir)
    if not settings.content.serve_images:
        return
    if not image_dir.is_dir():
        logger.info("Image directory not found - not serving images", path=str(image_dir))
        return
    app.mount("/images", StaticFiles(directory=image_dir), name="images")
