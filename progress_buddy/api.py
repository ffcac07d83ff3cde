"""
FastAPI app entry point aggregating per-domain routers under progress_buddy/routes.
Keep as `uvicorn progress_buddy.api:app`.
"""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .config import load_settings
from .db import Store
from .errors import StoreError
from .logs import configure_logging

logger = logging.getLogger(__name__)


def create_app(store: Store | None = None, settings: dict | None = None) -> FastAPI:
    settings = settings or load_settings()
    configure_logging(settings["log_level"])

    app = FastAPI(title="progress-buddy-api", version=__version__)
    app.state.settings = settings
    app.state.store = store or Store(settings["db_path"])

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings["cors_origins"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.on_event("startup")
    def on_startup():
        # InitializationError propagates and aborts startup
        if not app.state.store.is_open:
            app.state.store.init()
        logger.info("database initialized at %s", app.state.store.db_path)

    @app.on_event("shutdown")
    def on_shutdown():
        try:
            app.state.store.close()
        except StoreError:
            logger.exception("error during shutdown")

    @app.exception_handler(Exception)
    async def on_unhandled(request: Request, exc: Exception):
        logger.error("server error on %s %s", request.method, request.url.path, exc_info=exc)
        message = str(exc) if settings["env"] == "development" else "Internal server error"
        return JSONResponse(status_code=500, content={"error": "Something went wrong!", "message": message})

    # Include routers (split by entity)
    from .routes import base as base_routes
    from .routes import activities as activities_routes
    from .routes import logs as logs_routes
    from .routes import notifications as notifications_routes

    app.include_router(base_routes.router)
    app.include_router(activities_routes.router)
    app.include_router(logs_routes.router)
    app.include_router(notifications_routes.router)

    # registered last: only unmatched paths reach it
    @app.api_route("/{path:path}", methods=["GET", "POST", "PUT", "PATCH", "DELETE"], include_in_schema=False)
    def route_not_found(path: str, request: Request):
        return JSONResponse(status_code=404, content={"error": "Route not found", "path": request.url.path})

    return app


app = create_app()
