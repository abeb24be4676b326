# type: ignore
# pyright: reportGeneralTypeIssues=false
# pyright: reportOptionalMemberAccess=false
"""
Church Registry Service
=======================
Members, contributions and expenses behind the church dashboard, with
token login. Ministry and department member counts are recomputed from the
member table after every member write.

Port: 4000
"""
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.engine import Engine

from church_registry.controllers import (
    auth_controller, category_controller, finance_controller, member_controller, system_controller,
)
from church_registry.core import database
from church_registry.core.config import settings
from church_registry.core.dependencies import init_services
from church_registry.core.errors import StorageError
from church_registry.core.logging import get_logger
from church_registry.middleware import MetricsMiddleware, RequestIDMiddleware

logger = get_logger(settings.SERVICE_NAME)


def _request_id(request: Request) -> Optional[str]:
    return getattr(request.state, "request_id", None)


def create_app(engine: Optional[Engine] = None) -> FastAPI:
    """Assemble the application around ``engine`` (the configured database by default)."""
    engine = engine or database.engine
    init_services(engine)

    @asynccontextmanager
    async def lifespan(application: FastAPI):
        database.init_schema(engine)
        logger.info("Schema ready, serving %s", settings.SERVICE_NAME)
        yield
        engine.dispose()
        logger.info("Shutting down, connection pool disposed")

    app = FastAPI(
        title="Church Registry Service",
        description="Members, ministry/department counts, contributions and expenses.",
        version=settings.SERVICE_VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization"],
    )
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        logger.error("Storage error: %s", exc, exc_info=exc, extra={"request_id": _request_id(request)})
        return JSONResponse(status_code=500, content={"detail": "Database error"})

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error("Unhandled exception", exc_info=exc, extra={"request_id": _request_id(request)})
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    app.include_router(system_controller.router)
    app.include_router(auth_controller.router)
    app.include_router(member_controller.router)
    app.include_router(category_controller.router)
    app.include_router(finance_controller.router)

    if settings.CLIENT_DIR and Path(settings.CLIENT_DIR).is_dir():
        app.mount("/", StaticFiles(directory=settings.CLIENT_DIR, html=True), name="client")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.SERVICE_PORT, log_level="info")
