# ==============================================================================
# MAIN APPLICATION - Fireworks Back-Office API
# ==============================================================================
# Catalog, enquiry orders, quotations, vendor ledger, expenses and analytics
# ==============================================================================

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging

from backoffice.core.settings import settings, Environment
from backoffice.core.constants import OrderStatus
from backoffice.core.exceptions import AppException, ValidationError
from backoffice.core.logging import setup_logging
from backoffice.database.factory import DatabaseFactory
from backoffice.api.router import api_router
from backoffice.middleware.request_logger import RequestLoggerMiddleware
from backoffice.schemas.base import HealthResponse

setup_logging()
logger = logging.getLogger(__name__)

OPENAPI_TAGS: List[Dict[str, str]] = [
    {"name": "Catalog", "description": "Products, categories and storefront listing"},
    {"name": "Orders", "description": "Enquiry orders, status changes and admin edits"},
    {"name": "Quotations", "description": "Admin price quotations; never touch stock"},
    {"name": "Vendors", "description": "Vendors and their purchase/payment ledger"},
    {"name": "Expenses", "description": "Shop expenses by category"},
    {"name": "Analytics", "description": "Sales, stock and season reports"},
    {"name": "Health", "description": "Liveness and database status"},
]


# ==============================================================================
# LIFESPAN MANAGEMENT
# ==============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Connect the store on startup and close it on shutdown."""
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION} ({settings.ENVIRONMENT})")
    logger.info(
        f"Store: {settings.DATABASE_TYPE}; order ids {settings.ORDER_SHORT_ID_PREFIX}-*, "
        f"quotation ids {settings.QUOTATION_SHORT_ID_PREFIX}-*; "
        f"low stock below {settings.LOW_STOCK_THRESHOLD}"
    )

    try:
        await DatabaseFactory.initialize()
    except Exception as e:
        logger.error(f"Store unavailable at startup: {e}")
        if settings.ENVIRONMENT == Environment.PRODUCTION:
            raise

    yield

    await DatabaseFactory.shutdown()
    logger.info(f"{settings.APP_NAME} stopped")


# ==============================================================================
# APPLICATION FACTORY
# ==============================================================================

def create_app() -> FastAPI:
    """Build the back-office API with its routers and error rendering."""
    app = FastAPI(
        title=settings.API_TITLE,
        description=settings.API_DESCRIPTION,
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
        openapi_tags=OPENAPI_TAGS,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        openapi_url="/openapi.json" if settings.DEBUG else None,
    )

    app.add_middleware(RequestLoggerMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(api_router)
    register_health_endpoints(app)

    return app


# ==============================================================================
# EXCEPTION HANDLERS
# ==============================================================================

def register_exception_handlers(app: FastAPI) -> None:
    """Render every failure in the {"success": false, "error": {...}} envelope."""

    @app.exception_handler(AppException)
    async def app_exception_handler(
        request: Request,
        exc: AppException,
    ) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path}: {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.to_dict(),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Malformed bodies and query parameters answer 422 per field."""
        errors: Dict[str, Any] = {
            ".".join(str(part) for part in error["loc"]): error["msg"]
            for error in exc.errors()
        }
        error = ValidationError(message="Request validation failed", errors=errors)
        return JSONResponse(status_code=error.status_code, content=error.to_dict())

    @app.exception_handler(Exception)
    async def generic_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        logger.exception(f"Unexpected error on {request.method} {request.url.path}: {exc}")

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "success": False,
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": str(exc) if settings.DEBUG else "An unexpected error occurred",
                }
            },
        )


# ==============================================================================
# HEALTH ENDPOINTS
# ==============================================================================

def register_health_endpoints(app: FastAPI) -> None:

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["Health"],
        summary="Health check",
        description="Application version and whether the store answers.",
    )
    async def health_check() -> HealthResponse:
        db_healthy = await DatabaseFactory.health_check()

        return HealthResponse(
            status="healthy" if db_healthy else "degraded",
            version=settings.APP_VERSION,
            database="connected" if db_healthy else "disconnected",
        )

    @app.get("/", tags=["Health"], summary="Service index")
    async def root() -> dict:
        return {
            "name": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "api": settings.API_V1_PREFIX,
            "order_statuses": list(OrderStatus.ALL),
            "health": "/health",
        }


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "backoffice.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )
