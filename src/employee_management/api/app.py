"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from employee_management import __version__, messages
from employee_management.api.routes import (
    audit_logs_router,
    health_router,
    material_usage_router,
    payroll_cycles_router,
    payroll_details_router,
    payroll_stats_router,
    reports_router,
    sales_reports_router,
    time_entries_router,
)
from employee_management.config import Settings, get_settings
from employee_management.database import dispose_db, init_db
from employee_management.errors import AppError, InternalError, RateLimitError
from employee_management.services.rate_limiter import build_limiters

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    init_db(app.state.settings.database_url)
    yield
    await dispose_db()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()

    app = FastAPI(
        title="Employee Management API",
        description="Attendance, sales, materials and payroll cycles for multi-branch staff",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.rate_limiters = build_limiters()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        """Translate service errors to their HTTP status."""
        headers = None
        if isinstance(exc, RateLimitError):
            headers = {"Retry-After": str(exc.retry_after)}
        return JSONResponse(
            status_code=exc.status_code,
            content=jsonable_encoder(exc.to_dict()),
            headers=headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Malformed bodies and query parameters are 400s, not 422s."""
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=jsonable_encoder(
                {
                    "detail": messages.VALIDATION_FAILED,
                    "code": "VALIDATION_ERROR",
                    "errors": exc.errors(),
                }
            ),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        error = InternalError()
        return JSONResponse(status_code=error.status_code, content=error.to_dict())

    # Include routers
    app.include_router(health_router)
    app.include_router(payroll_cycles_router, prefix="/api/admin")
    app.include_router(payroll_details_router, prefix="/api/admin")
    app.include_router(payroll_stats_router, prefix="/api/admin")
    app.include_router(reports_router, prefix="/api/admin")
    app.include_router(audit_logs_router, prefix="/api/admin")
    app.include_router(time_entries_router, prefix="/api/employee")
    app.include_router(sales_reports_router, prefix="/api/employee")
    app.include_router(material_usage_router, prefix="/api/employee")

    return app


# Default app instance for uvicorn
app = create_app()
