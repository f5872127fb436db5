"""
Campus Recruitment Portal - Main Application

FastAPI backend with:
- PostgreSQL for users, jobs and applications
- MongoDB for shared rate-limit counters
- JWT authentication with role-based access

Run: uvicorn campus_recruit.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from campus_recruit import __version__
from campus_recruit.api.routes import api_router
from campus_recruit.core.config import get_settings
from campus_recruit.core.errors import PortalError, RateLimited
from campus_recruit.core.logging_config import configure_logging
from campus_recruit.core.rate_limit import RateLimiter, build_rate_limiter
from campus_recruit.db.init import init_database
from campus_recruit.db.postgres import ping_database
from campus_recruit.schemas.schemas import ErrorResponse, UserRole

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


def _error_body(message: str, error: str = None, errors: list = None) -> dict:
    return ErrorResponse(message=message, error=error, errors=errors).model_dump(exclude_none=True)


def check_secret(settings) -> None:
    """Refuse to start in production with the built-in JWT secret."""
    if not settings.uses_default_secret:
        return
    if settings.app_env == "production":
        raise RuntimeError("JWT_SECRET_KEY must be set in production")
    logger.warning("JWT_SECRET_KEY is not set; using the insecure built-in default")


def register_exception_handlers(app: FastAPI, settings) -> None:

    @app.exception_handler(PortalError)
    async def portal_error_handler(request: Request, exc: PortalError):
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc.message, errors=exc.errors))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = []
        for error in exc.errors():
            loc = [str(part) for part in error["loc"] if part not in ("body", "query", "path")]
            errors.append({"field": ".".join(loc), "message": error["msg"]})
        return JSONResponse(status_code=400, content=_error_body("Validation failed", errors=errors))

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError):
        logger.warning("Integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
        return JSONResponse(status_code=409, content=_error_body("Resource already exists"))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        message = str(exc.detail)
        if exc.status_code == 404 and exc.detail == "Not Found":
            message = f"Route {request.url.path} not found"
        return JSONResponse(status_code=exc.status_code, content=_error_body(message), headers=exc.headers)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        error = str(exc) if settings.is_development else None
        return JSONResponse(status_code=500, content=_error_body("Internal server error", error=error))


def register_rate_limit(app: FastAPI, limiter: RateLimiter) -> None:

    @app.middleware("http")
    async def rate_limit(request: Request, call_next):
        if not request.url.path.startswith("/api"):
            return await call_next(request)

        client_id = request.client.host if request.client else "unknown"
        if not await run_in_threadpool(limiter.hit, client_id):
            return JSONResponse(
                status_code=RateLimited.status_code,
                content=_error_body(RateLimited.default_message),
                headers={"Retry-After": str(limiter.retry_after())},
            )
        return await call_next(request)


def create_app(rate_limiter: RateLimiter = None) -> FastAPI:
    configure_logging()
    settings = get_settings()
    check_secret(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        init_database()
        yield

    app = FastAPI(
        title=settings.app_name,
        description="Students apply to jobs posted by recruiters; admins oversee users and postings.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # registered before CORS so that CORS stays the outermost middleware
    if rate_limiter is None and settings.rate_limit_enabled:
        rate_limiter = build_rate_limiter(settings)
    if rate_limiter is not None:
        register_rate_limit(app, rate_limiter)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app, settings)

    @app.get("/health", tags=["Health"])
    async def health_check():
        database_ok = ping_database()
        return {
            "success": True,
            "message": "Campus Recruitment Portal API is running",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": __version__,
            "database": "connected" if database_ok else "disconnected",
        }

    @app.get("/api", tags=["Health"])
    async def api_index():
        return {
            "success": True,
            "message": "Campus Recruitment Portal API",
            "version": __version__,
            "endpoints": {
                name: f"{API_PREFIX}/{name}"
                for name in ("auth", "users", "jobs", "applications", "dashboard")
            },
            "documentation": {
                "authentication": "JWT bearer token required for most endpoints",
                "roles": [role.value for role in UserRole],
                "pagination": "Use ?page=1&limit=10 for paginated results",
            },
        }

    app.include_router(api_router, prefix=API_PREFIX)
    return app


app = create_app()
