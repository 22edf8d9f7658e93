"""
FastAPI application entry point for the Prettifier API.
"""

from contextlib import asynccontextmanager
from typing import Callable, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from prettify import __version__
from prettify.api.errors import setup_error_handlers
from prettify.api.routes import router as prettify_router
from prettify.api.schemas import HealthResponse
from prettify.application.prettify_service import PrettifyService
from prettify.infra.config.dependencies import build_prettify_service
from prettify.infra.config.logging_config import get_logger, setup_logging
from prettify.infra.config.settings import Settings, get_settings
from prettify.infra.middleware.request_context import RequestContextMiddleware

ServiceFactory = Callable[[Settings], PrettifyService]


def create_app(
    settings: Optional[Settings] = None,
    service_factory: ServiceFactory = build_prettify_service,
) -> FastAPI:
    """Create and configure the FastAPI application.

    ``service_factory`` builds the shared PrettifyService at startup; it is
    closed again on shutdown.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.log_level, settings.log_format)
        logger = get_logger("app")
        logger.info(
            "app.startup",
            app_name=settings.app_name,
            environment=settings.environment,
            model=settings.gemini_model,
        )

        try:
            service = service_factory(settings)
        except Exception as exc:
            logger.error("app.startup.failed", error=str(exc))
            raise

        app.state.prettify_service = service
        async with service:
            yield

        logger.info("app.shutdown", app_name=settings.app_name)

    app = FastAPI(
        title=settings.app_name,
        description="Prettifies text or code through the Gemini API",
        version=__version__,
        debug=settings.debug,
        docs_url=None if settings.is_production() else "/docs",
        redoc_url=None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestContextMiddleware)

    setup_error_handlers(app)
    app.include_router(prettify_router)

    @app.get("/health", response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """Detailed health check endpoint."""
        service = getattr(app.state, "prettify_service", None)
        return HealthResponse(
            status="healthy" if service is not None else "starting",
            service=settings.app_name,
            version=__version__,
            model=service.model if service is not None else None,
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "prettify.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
