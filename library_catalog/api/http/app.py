"""FastAPI application setup."""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import RedirectResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from library_catalog.api.http.app_data import ApplicationDependencies
from library_catalog.api.http.routers.books import router as books_router
from library_catalog.api.http.routers.health import router as health_router
from library_catalog.api.http.templating import render_error_page
from library_catalog.api.utils.app_startup import configure_logging
from library_catalog.core.errors import CatalogError, ErrorKind
from library_catalog.core.services import DbManageService, DbSessionService
from library_catalog.runtime.context import get_config

main_config = get_config()

configure_logging()


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault(
            "Referrer-Policy", "strict-origin-when-cross-origin"
        )
        if get_config().app.environment == "production":
            response.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains",
            )
        return response


# --- Lifecycle hooks ---
async def startup() -> None:
    config = get_config()
    logger.info("Starting up application in {} environment", config.app.environment)

    database_service = DbSessionService(config)
    DbManageService(database_service.engine).create_all()
    app.state.app_dependencies = ApplicationDependencies(database_service=database_service)


async def shutdown() -> None:
    logger.info("Shutting down application")
    app_dependencies: ApplicationDependencies | None = getattr(
        app.state, "app_dependencies", None
    )
    if app_dependencies is not None:
        app_dependencies.database_service.dispose()


@asynccontextmanager
async def lifespan(app: FastAPI):
    await startup()
    try:
        yield
    finally:
        await shutdown()


app = FastAPI(
    title=main_config.app.title,
    lifespan=lifespan,
    docs_url=None if main_config.app.environment == "production" else "/docs",
    redoc_url=None,
)

__all__ = ["app", "startup", "shutdown"]


# --- Request logging middleware and last-resort guard ---
@app.middleware("http")
async def log_requests(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    base_ctx = {
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        "client_ip": request.client.host if request.client else "unknown",
    }

    start = time.perf_counter()
    with logger.contextualize(**base_ctx):
        try:
            logger.info("request.start")
            response = await call_next(request)
        except Exception as exc:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=404,
                duration_ms=round(duration_ms, 1),
                error_type=type(exc).__name__,
                error_kind=ErrorKind.UNEXPECTED,
            ).exception("request.error")
            response = render_error_page(request, exc)
        else:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=response.status_code,
                duration_ms=round(duration_ms, 1),
            ).info("request.end")

        response.headers.setdefault("X-Request-ID", request_id)
        return response


app.add_middleware(SecurityHeadersMiddleware)


# --- Error pages ---
@app.exception_handler(CatalogError)
async def catalog_error_handler(request: Request, exc: CatalogError):
    logger.bind(error_kind=exc.kind).info("catalog.{}: {}", exc.kind, exc.message)
    return render_error_page(request, exc)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.bind(error_kind=ErrorKind.NOT_FOUND).info("request.invalid_path: {}", exc.errors())
    return render_error_page(request, exc, kind=ErrorKind.NOT_FOUND)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    kind = ErrorKind.NOT_FOUND if exc.status_code == status.HTTP_404_NOT_FOUND else None
    return render_error_page(request, exc, status_code=exc.status_code, kind=kind)


# --- Router registration ---
app.include_router(health_router)
app.include_router(books_router)


@app.get("/", include_in_schema=False)
def index() -> RedirectResponse:
    return RedirectResponse("/books", status_code=status.HTTP_302_FOUND)
