"""FastAPI application setup."""

import time
import uuid
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from book_catalog import __version__
from book_catalog.api.http.app_data import ApplicationDependencies
from book_catalog.api.http.routers.health import router as health_router
from book_catalog.api.http.routers.service.book import router as book_router
from book_catalog.api.utils.app_startup import configure_logging
from book_catalog.core.errors import CatalogError
from book_catalog.core.services import DbManageService, DbSessionService
from book_catalog.runtime.config.config_data import ConfigData
from book_catalog.runtime.context import get_config

# Load configuration
main_config = get_config()


# Initialize logging
configure_logging()


# --- Security middleware ---
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault(
            "Referrer-Policy", "strict-origin-when-cross-origin"
        )
        # HSTS only in prod
        if main_config.app.environment == "production":
            response.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )
        return response


# --- FastAPI app setup ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    owns_dependencies = await startup()
    try:
        yield
    finally:
        await shutdown(owns_dependencies)


app = FastAPI(
    title="Book Catalog API",
    version=__version__,
    lifespan=lifespan,
    docs_url=None if main_config.app.environment == "production" else "/docs",
    redoc_url=None if main_config.app.environment == "production" else "/redoc",
)
app.state.app_dependencies = None

app.add_middleware(SecurityHeadersMiddleware)

# expose startup for tests
__all__ = ["app", "startup", "shutdown"]


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or request.headers.get(
        "X-Request-ID", "-"
    )


def _error_response(status_code: int, code: str, detail, request: Request) -> JSONResponse:
    request_id = _request_id(request)
    return JSONResponse(
        status_code=status_code,
        content={"code": code, "detail": detail, "request_id": request_id},
        headers={"X-Request-ID": request_id},
    )


# --- Request logging middleware ---
@app.middleware("http")
async def log_requests(request: Request, call_next):
    # Correlation / tracing
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = request_id

    xff = request.headers.get("x-forwarded-for")
    client_ip = (
        xff.split(",")[0].strip()
        if xff
        else request.client.host
        if request.client
        else "unknown"
    )

    base_ctx = {
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        "client_ip": client_ip,
    }

    start = time.perf_counter()

    # Everything that logs within this block inherits base_ctx
    with logger.contextualize(**base_ctx):
        try:
            logger.info("request.start")
            response = await call_next(request)

            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=response.status_code,
                duration_ms=round(duration_ms, 1),
            ).info("request.end")

            response.headers.setdefault("X-Request-ID", request_id)
            return response

        except Exception as exc:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=500,
                duration_ms=round(duration_ms, 1),
                error_type=type(exc).__name__,
            ).exception("request.error")
            return _error_response(500, "internal_error", "Internal Server Error", request)


# --- CORS configuration ---
# Outermost layer: wraps log_requests, including its 500 fallback
app.add_middleware(
    CORSMiddleware,
    allow_origins=main_config.app.cors.origins,
    allow_credentials=main_config.app.cors.allow_credentials,
    allow_methods=main_config.app.cors.allow_methods,
    allow_headers=main_config.app.cors.allow_headers,
)


# --- Error mapping ---
@app.exception_handler(CatalogError)
async def handle_catalog_error(request: Request, exc: CatalogError) -> JSONResponse:
    operation = getattr(request.scope.get("route"), "name", None)
    log = logger.bind(
        operation=operation,
        code=exc.code,
        status_code=exc.status_code,
        book_id=getattr(exc, "book_id", None),
    )
    if exc.status_code >= 500:
        log.opt(exception=exc).error("{} failed: {}", operation, exc.message)
    else:
        log.warning("{} failed: {}", operation, exc.message)
    return _error_response(exc.status_code, exc.code, exc.message, request)


@app.exception_handler(RequestValidationError)
async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    operation = getattr(request.scope.get("route"), "name", None)
    logger.bind(operation=operation, code="validation_error").warning(
        "{} rejected a malformed request", operation
    )
    return _error_response(400, "validation_error", "Invalid book data", request)


# --- Router registration ---
app.include_router(health_router)
app.include_router(book_router, prefix=main_config.catalog.api_prefix)


# --- Static cover images ---
def mount_cover_files(target: FastAPI, config: ConfigData) -> None:
    """Serve the covers directory. The directory is only checked on the first request."""
    target.mount(
        config.catalog.covers_url_prefix,
        StaticFiles(directory=Path(config.catalog.covers_dir), check_dir=False),
        name="covers",
    )


mount_cover_files(app, main_config)


# --- Lifecycle hooks ---
async def startup() -> bool:
    """Build application-wide dependencies unless they were provided up front.

    Returns True when the dependencies were created here and should be
    disposed of on shutdown.
    """
    config = get_config()
    logger.info("Starting up application in {} environment", config.app.environment)

    if app.state.app_dependencies is not None:
        return False

    database_service = DbSessionService(config)
    DbManageService(database_service.engine).create_all()
    app.state.app_dependencies = ApplicationDependencies(
        config=config,
        database_service=database_service,
    )
    return True


async def shutdown(owns_dependencies: bool = True) -> None:
    logger.info("Shutting down application")
    if not owns_dependencies:
        return
    app_dependencies: ApplicationDependencies | None = app.state.app_dependencies
    if app_dependencies is not None:
        app_dependencies.database_service.dispose()
    app.state.app_dependencies = None


# --- Route handlers ---


@app.get("/")
async def root() -> dict[str, str]:
    """Plain liveness banner."""
    return {"message": "API is running..."}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=main_config.app.host,
        port=main_config.app.port,
        access_log=False,  # We handle access logging in middleware
    )
