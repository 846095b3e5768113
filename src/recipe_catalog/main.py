"""Application entry point.

Usage:
    # Development with auto-reload
    uvicorn recipe_catalog.main:app --reload

    # Console script
    recipe-catalog-serve
"""

from __future__ import annotations

import uvicorn

from recipe_catalog.core.config import get_settings
from recipe_catalog.factory import create_app


app = create_app()


def serve() -> None:
    """Run the server with the configured host and port."""
    settings = get_settings()
    uvicorn.run(
        "recipe_catalog.main:app",
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.is_development,
        log_level=settings.logging.level.lower(),
    )


if __name__ == "__main__":
    serve()
