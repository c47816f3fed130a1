"""
EcoLearn Progression Service

FastAPI application entry point.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ecolearn.api.deps import get_catalog
from ecolearn.api.middleware.request_id import RequestIdMiddleware
from ecolearn.api.v1 import router as api_v1_router
from ecolearn.config import get_settings
from ecolearn.database import check_db, close_db, init_db
from ecolearn.engines.progression.errors import (
    InvalidOutcome,
    LedgerConflict,
    NotFound,
    NotUnlocked,
    ProgressionError,
)
from ecolearn.logging_config import configure_logging, get_logger
from ecolearn.schemas.common import HealthResponse

settings = get_settings()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan handler.

    Runs startup and shutdown tasks.
    """
    configure_logging(
        log_level=settings.log_level,
        environment=settings.environment,
        debug=settings.debug,
    )

    # Startup
    logger.info("Starting %s v%s", settings.project_name, settings.version)
    catalog = get_catalog()
    logger.info(
        "Catalog ready",
        extra={"unit_count": len(catalog.units), "group_count": len(catalog.groups)},
    )
    if settings.developer_mode_enabled:
        logger.warning("Developer mode enabled: unlock checks can be bypassed")
    await init_db()
    logger.info("Database initialized")

    yield

    # Shutdown
    logger.info("Shutting down...")
    await close_db()
    logger.info("Database connections closed")


app = FastAPI(
    title=settings.project_name,
    description="""
    EcoLearn Progression Service

    Gamified environmental learning: prerequisite-gated lessons, quizzes,
    challenges, mini-games and boss battles that grow a virtual tree.

    ## Features

    - **Catalog**: Lessons, quizzes, challenges, games and bosses in nested groups
    - **Unlocks**: Prerequisite-gated access with level and item gates
    - **Rewards**: Points plus growth items (seed, water, sunlight, nutrients, fertilizer, love)
    - **Growth**: Tree stages from pot to forest driven by cumulative inventory
    - **Rollups**: Per-group completion percentages

    ## Invariants

    1. Acyclic prerequisites: validated when the catalog loads
    2. Idempotent completion: a unit grants its reward once per profile
    3. Monotonic progress: points, inventory and growth stage never go down
    """,
    version=settings.version,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)


# Middleware order: add_middleware stacks innermost-first, so LAST added = OUTERMOST.
app.add_middleware(RequestIdMiddleware)

# CORS last = outermost = wraps everything; every response gets CORS headers
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _cors_headers(request: Request) -> dict:
    """Return CORS headers for error responses so browser receives them (500s often bypass CORS middleware)."""
    origin = request.headers.get("origin") or ""
    allowed = settings.cors_origins
    allow_origin = origin if origin in allowed else (allowed[0] if allowed else "*")
    return {
        "Access-Control-Allow-Origin": allow_origin,
        "Access-Control-Allow-Credentials": "true",
        "Access-Control-Allow-Methods": "*",
        "Access-Control-Allow-Headers": "*",
    }


def _error_response(request: Request, status_code: int, content: dict) -> JSONResponse:
    headers = _cors_headers(request)
    req_id = getattr(request.state, "request_id", None)
    if req_id:
        headers["X-Request-ID"] = req_id
        if status_code >= 500:
            content["request_id"] = req_id
    return JSONResponse(status_code=status_code, content=content, headers=headers)


_PROGRESSION_STATUS = {
    NotFound: status.HTTP_404_NOT_FOUND,
    NotUnlocked: status.HTTP_403_FORBIDDEN,
    InvalidOutcome: status.HTTP_422_UNPROCESSABLE_ENTITY,
    LedgerConflict: status.HTTP_409_CONFLICT,
}


@app.exception_handler(ProgressionError)
async def progression_exception_handler(request: Request, exc: ProgressionError):
    """Map engine errors to HTTP status codes."""
    status_code = status.HTTP_400_BAD_REQUEST
    for error_type, code in _PROGRESSION_STATUS.items():
        if isinstance(exc, error_type):
            status_code = code
            break
    content = {"detail": str(exc), "code": exc.code}
    if isinstance(exc, NotUnlocked):
        content["unmet"] = exc.unmet
    logger.info("Progression request rejected: %s", exc.code, extra={"status_code": status_code})
    return _error_response(request, status_code, content)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Ensure 403/404 etc. responses have CORS headers."""
    return _error_response(request, exc.status_code, {"detail": exc.detail})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
):
    """Handle request validation errors."""
    errors = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error["loc"])
        errors.append({
            "field": field,
            "message": error["msg"],
            "type": error["type"],
        })
    return _error_response(
        request,
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        {"detail": "Validation error", "errors": errors},
    )


@app.exception_handler(Exception)
async def general_exception_handler(
    request: Request,
    exc: Exception,
):
    """Handle unexpected exceptions. CORS headers added so browser does not hide 500 behind CORS error."""
    logger.exception("Unhandled exception: %s", exc)
    if settings.debug:
        content = {"detail": str(exc), "type": type(exc).__name__}
    else:
        content = {"detail": "Internal server error"}
    return _error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, content)


# Health check endpoint
@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """Check application health, including a live database round-trip."""
    database_ok = await check_db()
    return HealthResponse(
        status="ok" if database_ok else "degraded",
        version=settings.version,
        database="connected" if database_ok else "unavailable",
        catalog_units=len(get_catalog().units),
    )


# Root endpoint
@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information."""
    return {
        "name": settings.project_name,
        "version": settings.version,
        "docs": "/docs" if settings.debug else "disabled",
        "api": {
            "v1": "/api/v1",
        },
    }


# Mount API v1 routes
app.include_router(
    api_v1_router,
    prefix=settings.api_v1_prefix,
)


# Main entry point for development
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "ecolearn.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )
