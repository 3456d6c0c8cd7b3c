import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from . import config
from .database import Database
from .logging_setup import setup_logging
from .result import INTERNAL_ERROR_MESSAGE
from .routers import attachments, auth, categories, sharing, tasks
from .storage import FileStorage

logger = logging.getLogger(__name__)


def _describe_validation_error(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(p) for p in error.get("loc", ()) if p != "body")
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "; ".join(parts) or "Invalid request"


def create_app(
    database_url: Optional[str] = None,
    upload_dir: Optional[str] = None,
    configure_logging: bool = True,
) -> FastAPI:
    """Build an app bound to its own database handle and upload directory."""
    if configure_logging:
        setup_logging(config.LOG_LEVEL)

    app = FastAPI(
        title="Taskshare API",
        description="Multi-user task manager with categories, attachments and sharing",
        version="1.0.0",
    )

    app.state.database = Database(database_url or config.DATABASE_URL)
    app.state.storage = FileStorage(
        upload_dir or config.UPLOAD_DIR,
        url_prefix=config.UPLOAD_URL_PREFIX,
        max_size=config.MAX_UPLOAD_SIZE,
    )
    # StaticFiles checks the directory exists when mounted
    app.state.storage.ensure_dir()

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(auth.router, prefix="/auth", tags=["auth"])
    app.include_router(tasks.router, prefix="/tasks", tags=["tasks"])
    app.include_router(categories.router, prefix="/categories", tags=["categories"])
    app.include_router(attachments.router, prefix="/attachments", tags=["attachments"])
    app.include_router(sharing.router, prefix="/sharing", tags=["sharing"])

    app.mount(
        config.UPLOAD_URL_PREFIX,
        StaticFiles(directory=str(app.state.storage.upload_dir)),
        name="uploads",
    )

    @app.on_event("startup")
    def on_startup():
        app.state.database.connect()
        app.state.database.create_tables()

    @app.on_event("shutdown")
    def on_shutdown():
        app.state.database.disconnect()

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"detail": _describe_validation_error(exc)})

    # Generic error handler to return JSON errors for unexpected exceptions
    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"detail": INTERNAL_ERROR_MESSAGE})

    @app.get("/")
    def read_root():
        return {"message": "Taskshare API"}

    @app.get("/health")
    def health_check():
        return {"status": "healthy"}

    return app
