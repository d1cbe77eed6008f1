import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.config import Settings, settings as default_settings
from core.logging_config import setup_logging
from core.metrics import HttpMetrics
from db.database import build_engine, build_session_maker, create_db_and_tables
from db.errors import StoreError
from db.store import EntryStore
from routers.entries import router as entries_router
from routers.health import router as health_router
from routers.stats import router as stats_router

logger = logging.getLogger("entrylog")

UNMATCHED_ROUTE = "unmatched"


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the API. Engine, store and metrics registry live on ``app.state``."""
    settings = settings or default_settings
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        engine = build_engine(settings)
        app.state.store = EntryStore(build_session_maker(engine))
        try:
            await create_db_and_tables(engine, settings.db_app_role)
            await app.state.store.ping()
            logger.info("Database connected successfully")
        except (StoreError, SQLAlchemyError, OSError) as exc:
            # Keep serving; store calls will answer 500 until the database is back.
            logger.error("Failed to connect to database: %s", exc)
        yield
        logger.info("Shutting down, closing database pool")
        await engine.dispose()

    app = FastAPI(
        title="Entry Log API",
        description="Record entries and read them back with simple statistics",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.metrics = HttpMetrics()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def record_request(request: Request, call_next):
        start = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            duration = time.perf_counter() - start
            route = request.scope.get("route")
            # one series per route template; every unmatched path shares a label
            route_path = getattr(route, "path", None) or UNMATCHED_ROUTE
            app.state.metrics.observe(request.method, route_path, status_code, duration)
            logger.info("%s %s %s %.3fs", request.method, request.url.path, status_code, duration)

    # Every failure body is {"error": "..."}
    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        logger.debug("Rejected request body: %s", exc.errors())
        return JSONResponse({"error": "Invalid request body"}, status_code=400)

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse({"error": "Internal server error"}, status_code=500)

    app.include_router(health_router, tags=["health"])
    app.include_router(entries_router, tags=["entries"])
    app.include_router(stats_router, tags=["stats"])

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run("main:app", host=default_settings.host, port=default_settings.port)
