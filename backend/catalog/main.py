"""
Product Catalog - Main FastAPI Application

- Store and cache adapters selected from settings at startup
- Cache-aside reads with invalidate-on-write
- Structured logging with per-request correlation IDs
- Prometheus metrics on /metrics
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import structlog

from .api.endpoints.health import router as health_router
from .api.endpoints.products import router as products_router
from .bootstrap import build_resources
from .constants import APP_NAME
from .core.config import Settings, get_settings
from .core.correlation import CorrelationIdMiddleware
from .core.logging import configure_logging
from .domain.products.exceptions import (
    ProductNotFound,
    ProductValidationError,
    RepositoryFailure,
    RepositoryTimeout,
)

logger = structlog.get_logger()


def _error_body(exc, message: Optional[str] = None) -> dict:
    return {
        "detail": message or exc.message,
        "error_code": exc.error_code,
    }


async def product_not_found_handler(request: Request, exc: ProductNotFound):
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND, content=_error_body(exc)
    )


async def product_validation_handler(request: Request, exc: ProductValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST, content=_error_body(exc)
    )


async def repository_failure_handler(request: Request, exc: RepositoryFailure):
    """Store failures surface as an opaque error; the cause is only logged."""
    logger.error(
        "Repository failure",
        path=request.url.path,
        **exc.to_dict(),
    )
    if isinstance(exc, RepositoryTimeout):
        return JSONResponse(
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            content=_error_body(exc, "Request timed out"),
        )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(exc, "Internal server error"),
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Application factory."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.LOG_LEVEL, settings.LOG_JSON)
        logger.info(
            "Starting Product Catalog API",
            version=settings.SERVICE_VERSION,
            environment=settings.ENVIRONMENT,
        )

        try:
            app.state.resources = await build_resources(settings)
        except Exception:
            logger.exception("Failed to initialize application")
            raise

        yield

        logger.info("Shutting down Product Catalog API")
        await app.state.resources.close()
        logger.info("Application shutdown completed")

    app = FastAPI(
        title=APP_NAME,
        description="Product catalog with cache-aside reads",
        version=settings.SERVICE_VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(CorrelationIdMiddleware)

    app.add_exception_handler(ProductNotFound, product_not_found_handler)
    app.add_exception_handler(ProductValidationError, product_validation_handler)
    app.add_exception_handler(RepositoryFailure, repository_failure_handler)

    app.include_router(health_router)
    app.include_router(products_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "catalog.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.is_development,
        log_level=settings.LOG_LEVEL.lower(),
    )
