"""Crew Leave — FastAPI Application Factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from crewleave import __version__
from crewleave.common.exceptions import register_exception_handlers
from crewleave.config import settings
from crewleave.holidays.router import router as bank_holidays_router
from crewleave.leave.router import router as leave_router

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    """Root logging at ``settings.LOG_LEVEL``."""
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown events."""
    logger.info(
        "Crew Leave starting (env=%s, tz=%s, bank holidays=%s)",
        settings.ENVIRONMENT, settings.TIMEZONE, settings.BANK_HOLIDAY_REGION,
    )
    yield
    logger.info("Crew Leave shutting down")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    configure_logging()

    app = FastAPI(
        title="Crew Leave",
        description="Holiday allowance, business-day accrual and UK bank holidays",
        version=__version__,
        docs_url="/api/docs" if settings.ENVIRONMENT != "production" else None,
        redoc_url="/api/redoc" if settings.ENVIRONMENT != "production" else None,
        lifespan=lifespan,
    )

    # Exception handlers (RFC 7807)
    register_exception_handlers(app)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/api/v1/health", tags=["system"])
    async def health_check():
        return {
            "status": "healthy",
            "version": __version__,
            "environment": settings.ENVIRONMENT,
        }

    # Register routers
    app.include_router(leave_router, prefix="/api/v1/leave", tags=["leave"])
    app.include_router(
        bank_holidays_router, prefix="/api/v1/bank-holidays", tags=["bank-holidays"],
    )

    return app


app = create_app()
