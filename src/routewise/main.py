"""FastAPI application entry point."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.routes import health, locations, session
from .config import settings
from .data.locations_repository import LocationCatalog, load_catalog_or_empty
from .services.routing.base import RouteProvider
from .services.routing.osrm_client import OSRMClient
from .services.session import RouteSession


def create_app(
    catalog: LocationCatalog | None = None,
    provider: RouteProvider | None = None,
) -> FastAPI:
    app = FastAPI(
        title=settings.app_name,
        root_path="",
    )
    if settings.frontend_allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.frontend_allowed_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    notice = None
    if catalog is None:
        catalog, notice = load_catalog_or_empty()
    app.state.catalog = catalog
    app.state.catalog_notice = notice
    app.state.session = RouteSession(provider or OSRMClient())

    @app.get("/")
    def root():
        bounds = app.state.catalog.bounds
        return {
            "service": settings.app_name,
            "status": "running",
            "api_prefix": settings.api_prefix,
            "health": f"{settings.api_prefix}/health",
            "docs": "/docs",
            "map": {
                "center": [bounds.center.lat, bounds.center.lng],
                "bounds": [bounds.south, bounds.west, bounds.north, bounds.east],
            },
        }

    app.include_router(health.router, prefix=settings.api_prefix)
    app.include_router(locations.router, prefix=settings.api_prefix)
    app.include_router(session.router, prefix=settings.api_prefix)
    return app


app = create_app()
