"""FastAPI application for the event importer.

Run with:
    uvicorn eventimport.api.main:app --reload --port 8000
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from eventimport import __version__
from eventimport.api.routes import imports
from eventimport.config import get_settings
from eventimport.core.exceptions import EventImportError
from eventimport.logging import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format, settings.log_file)
    logger.info("api_startup", environment=settings.environment)
    yield


app = FastAPI(
    title="Event Importer API",
    description="Preview events from URLs or pasted text and commit them as drafts",
    version=__version__,
    lifespan=lifespan,
)

# CORS for the admin frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(imports.router, prefix="/import", tags=["Import"])


@app.exception_handler(EventImportError)
async def event_import_error_handler(request: Request, exc: EventImportError) -> JSONResponse:
    """Map importer errors to their HTTP status and {"error": ...} body."""
    if exc.http_status >= 500:
        logger.error("request_failed", path=request.url.path, error=str(exc))
    else:
        logger.info("request_rejected", path=request.url.path, status=exc.http_status, error=str(exc))
    return JSONResponse(status_code=exc.http_status, content=exc.to_payload())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies are answered like other client errors."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    return JSONResponse(
        status_code=400,
        content={"error": f"{location}: {message}" if location else message},
    )


@app.get("/", tags=["Health"])
async def root():
    """Health check endpoint."""
    return {
        "status": "ok",
        "service": "Event Importer API",
        "version": __version__,
    }


@app.get("/health", tags=["Health"])
async def health():
    """Detailed health check."""
    from eventimport.core.supabase_client import get_supabase_client

    try:
        event_count = await get_supabase_client().ping()
        db_status = "connected"
    except EventImportError as e:
        db_status = f"error: {e.message}"
        event_count = 0

    return {
        "status": "ok",
        "database": db_status,
        "events_in_db": event_count,
    }
