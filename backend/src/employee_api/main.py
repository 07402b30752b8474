"""FastAPI application entry point."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from employee_api import __version__
from employee_api.config import get_settings
from employee_api.exceptions import BusinessRuleError, NotFoundError
from employee_api.middleware.error_handler import (
    business_rule_exception_handler,
    generic_exception_handler,
    http_exception_handler,
    not_found_exception_handler,
    sqlalchemy_exception_handler,
    validation_exception_handler,
)
from employee_api.routers import auth, employees
from employee_api.security.rate_limit import limiter

logger = logging.getLogger(__name__)


async def _prepare_database() -> None:
    """Create missing tables and the default director account."""
    from employee_api.database import async_session_maker, create_schema
    from employee_api.repositories.employee_repository import EmployeeRepository
    from employee_api.repositories.unit_of_work import SqlAlchemyUnitOfWork
    from employee_api.services.employee_directory import EmployeeDirectory

    config = get_settings()

    if config.database_auto_create:
        await create_schema()
        logger.info("Database schema verified")

    if not config.seed_admin_enabled:
        return

    try:
        async with async_session_maker() as session:
            directory = EmployeeDirectory(EmployeeRepository(session), SqlAlchemyUnitOfWork(session))
            await directory.seed_default_director(
                email=config.seed_admin_email,
                password=config.seed_admin_password,
                document_number=config.seed_admin_document,
            )
    except (SQLAlchemyError, BusinessRuleError) as e:
        logger.warning(f"Failed to seed default director: {type(e).__name__}")


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to add security headers to all responses."""

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        if "Cache-Control" not in response.headers:
            response.headers["Cache-Control"] = "no-store, max-age=0"
        response.headers.setdefault("Vary", "Accept, Authorization, Origin")
        if not get_settings().debug:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    await _prepare_database()
    yield
    from employee_api.database import engine

    await engine.dispose()


async def _rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Rate limit handler returning RFC 7807 Problem Details.

    Includes Retry-After header per RFC 6585 Section 4.
    """
    return JSONResponse(
        status_code=429,
        content={
            "type": "https://datatracker.ietf.org/doc/html/rfc6585#section-4",
            "title": "Too many requests",
            "status": 429,
            "detail": "Rate limit exceeded",
            "instance": request.url.path,
        },
        headers={
            "Content-Type": "application/problem+json",
            "Retry-After": "60",
        },
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    config = get_settings()

    app = FastAPI(
        title=config.app_name,
        version=__version__,
        description="Employee Management API",
        lifespan=lifespan,
        docs_url="/docs" if config.debug else None,
        redoc_url="/redoc" if config.debug else None,
    )

    # Rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Domain failures
    app.add_exception_handler(NotFoundError, not_found_exception_handler)
    app.add_exception_handler(BusinessRuleError, business_rule_exception_handler)

    # Sanitized error handlers to prevent information disclosure
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    allowed_origins = []
    for origin in config.cors_origins_list:
        if origin == "*":
            raise ValueError(
                "CORS_ORIGINS cannot contain '*' wildcard when allow_credentials=True. "
                "Specify explicit origins."
            )
        if origin.startswith(("http://", "https://")):
            allowed_origins.append(origin)

    # Middleware runs in reverse order of addition: CORS first on requests
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Requested-With"],
    )

    app.include_router(auth.router, prefix="/api/v1/auth", tags=["Authentication"])
    app.include_router(employees.router, prefix="/api/v1/employees", tags=["Employees"])

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


app = create_app()
