"""FastAPI application factory."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from label_admin.api.auth import router as auth_router
from label_admin.api.collections import build_collection_router
from label_admin.api.ui import router as ui_router
from label_admin.app_logging import configure_logging
from label_admin.containers import AppContainer
from label_admin.domain.collections import COLLECTIONS
from label_admin.errors import DashboardError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(DashboardError)
    async def dashboard_error_handler(
        request: Request, exc: DashboardError
    ) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    app.include_router(auth_router)
    for schema in COLLECTIONS:
        app.include_router(build_collection_router(schema))
    app.include_router(ui_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
