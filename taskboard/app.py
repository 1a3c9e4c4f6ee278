#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Task Board - FastAPI Application
JSON API for task records plus the static frontend

Version: 1.0.0
"""

import argparse
import asyncio
import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from taskboard.api import tasks
from taskboard.config import Settings, get_settings
from taskboard.core.exceptions import StoreError
from taskboard.core.schema import apply_schema
from taskboard.core.store import RowStore
from taskboard.dependencies import get_app_settings, get_client_ip, get_store
from taskboard.models import HealthCheck

logger = logging.getLogger(__name__)


# ===== LIFESPAN =====

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the row store on startup, close it on shutdown"""
    settings: Settings = app.state.settings
    store: RowStore = app.state.store

    # Startup
    logger.info(f"🚀 Starting {settings.APP_NAME} v{settings.VERSION}...")
    try:
        await store.connect()
        if settings.AUTO_CREATE_SCHEMA:
            await apply_schema(store)
        logger.info(f"🌐 API available at {settings.get_full_url('api/tasks')}")
    except StoreError as e:
        # Keep serving; every task endpoint answers 500 until the database is back
        logger.error(f"❌ Error connecting to database: {e}")

    yield

    # Shutdown
    logger.info("🛑 Shutting down...")
    try:
        await store.close()
    except Exception as e:
        logger.error(f"❌ Error closing database: {e}")


# ===== ERROR HANDLERS =====

async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render HTTP errors as {"error": message}"""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are client errors"""
    logger.debug(f"Invalid request to {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


async def internal_error_handler(request: Request, exc: Exception):
    """Last resort for anything a handler did not map"""
    logger.exception(f"Internal server error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


# ===== MIDDLEWARE =====

async def logging_middleware(request: Request, call_next):
    """Log every request with its status and processing time"""
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time

    logger.info(
        f"{request.method} {request.url.path} "
        f"- {response.status_code} "
        f"- {process_time:.3f}s "
        f"- {get_client_ip(request)}"
    )
    response.headers["X-Process-Time"] = f"{process_time:.6f}"
    return response


# ===== SERVICE ROUTES =====

async def index(settings: Settings = Depends(get_app_settings)):
    """Frontend entry document"""
    index_path = settings.index_path
    if not index_path.is_file():
        return JSONResponse(status_code=404, content={"error": "Frontend not found"})
    return FileResponse(index_path)


async def health_check(
    store: RowStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
):
    """Health check for monitoring"""
    if not await store.ping():
        return JSONResponse(status_code=503, content={"error": "Database unavailable"})

    return HealthCheck(
        status="healthy",
        service=settings.APP_NAME,
        version=settings.VERSION,
        timestamp=time.time(),
    )


# ===== APPLICATION FACTORY =====

def create_app(settings: Optional[Settings] = None, store: Optional[RowStore] = None) -> FastAPI:
    """Build the application; a pre-built store may be injected"""
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.APP_NAME,
        description="Task tracking API",
        version=settings.VERSION,
        docs_url=settings.DOCS_URL,
        redoc_url=None,
        openapi_url=settings.OPENAPI_URL,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store or RowStore(settings.DATABASE_URL, echo=settings.DB_ECHO)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )
    app.middleware("http")(logging_middleware)

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, internal_error_handler)

    app.include_router(tasks.router)
    app.add_api_route("/", index, methods=["GET"], include_in_schema=False)
    app.add_api_route("/health", health_check, methods=["GET"], response_model=HealthCheck)

    # Remaining frontend assets; mounted last so API routes win
    if settings.STATIC_DIR.is_dir():
        app.mount("/", StaticFiles(directory=str(settings.STATIC_DIR)), name="static")
    else:
        logger.warning(f"⚠️ Static directory not found: {settings.STATIC_DIR}")

    return app


# ===== RUN =====

async def init_database(settings: Settings) -> None:
    """Apply the task schema and exit"""
    store = RowStore(settings.DATABASE_URL, echo=settings.DB_ECHO)
    await store.connect()
    try:
        await apply_schema(store)
    finally:
        await store.close()


def run_server(
    host: Optional[str] = None,
    port: Optional[int] = None,
    dev: Optional[bool] = None,
    reload: Optional[bool] = None,
) -> None:
    """Run the API under uvicorn"""
    settings = get_settings()

    host = host or settings.HOST
    port = port or settings.PORT
    dev = dev if dev is not None else settings.DEBUG
    reload = reload if reload is not None else False

    logger.info(f"🌐 Starting server on http://{host}:{port}")
    logger.info(f"📊 Database: {settings.DATABASE_URL}")
    logger.info(f"🔧 Debug mode: {dev}")

    # uvicorn handles SIGINT/SIGTERM and runs the lifespan shutdown, which closes the store
    uvicorn.run(
        "taskboard.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level="debug" if dev else "info",
        access_log=dev,
        server_header=False,
    )


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="Run the Task Board API")
    parser.add_argument("--host", default=None, help="Host to bind")
    parser.add_argument("--port", type=int, default=None, help="Port to bind")
    parser.add_argument("--dev", action="store_true", default=None, help="Development mode")
    parser.add_argument("--reload", action="store_true", default=None, help="Auto-reload on code changes")
    parser.add_argument("--init-db", action="store_true", help="Create the tasks table and exit")

    args = parser.parse_args(argv)

    settings = get_settings()
    settings.setup_logging()

    if args.init_db:
        asyncio.run(init_database(settings))
        logger.info("✅ Database initialized")
        return

    try:
        run_server(host=args.host, port=args.port, dev=args.dev, reload=args.reload)
    except KeyboardInterrupt:
        logger.info("👋 Server stopped")


if __name__ == "__main__":
    main()
