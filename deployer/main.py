"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from deployer import __version__
from deployer.api.middleware import RequestLoggingMiddleware
from deployer.api.router import router
from deployer.config import Settings, get_settings
from deployer.core.exceptions import DeployerError
from deployer.core.orchestrator import DeployOrchestrator
from deployer.services.circle import CircleClient
from deployer.services.credentials import ServiceAccountKeyBroker
from deployer.services.google_auth import GoogleIdentity
from deployer.services.pricing import PricePublisher
from deployer.services.storage import ConfigStore
from deployer.utils.logging import configure_logging, get_logger, obfuscate

logger = get_logger(__name__)


def build_orchestrator(settings: Settings) -> DeployOrchestrator:
    """Wire the production orchestrator from settings."""
    identity = GoogleIdentity(settings)
    return DeployOrchestrator(
        settings=settings,
        circle=CircleClient(settings),
        broker=ServiceAccountKeyBroker(identity),
        config_store=ConfigStore(settings),
        identity=identity,
    )


def create_app(
    settings: Settings | None = None,
    orchestrator: DeployOrchestrator | None = None,
    price_publisher: PricePublisher | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan handler."""
        # Startup
        configure_logging(settings)
        logger.info(
            "application.starting",
            version=__version__,
            environment=settings.app_env,
            port=settings.api_port,
            circle_api_token=obfuscate(settings.circle_api_token),
        )

        yield

        # Shutdown
        await app.state.orchestrator.circle.aclose()
        logger.info("application.shutdown")

    app = FastAPI(
        title="Saturn Deployer",
        description="Deploys the latest dev builds of Saturn to production",
        version=__version__,
        docs_url="/docs" if settings.app_debug else None,
        redoc_url="/redoc" if settings.app_debug else None,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.orchestrator = orchestrator or build_orchestrator(settings)
    app.state.price_publisher = price_publisher or PricePublisher(settings)

    # Add middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    # Register exception handlers
    @app.exception_handler(DeployerError)
    async def deployer_error_handler(
        request: Request, exc: DeployerError
    ) -> JSONResponse:
        """Render deployer errors with their own status code."""
        if exc.status_code >= 500:
            logger.error(
                "request.failed",
                error=exc.message,
                error_type=type(exc).__name__,
                path=request.url.path,
                exc_info=exc,
            )
        else:
            logger.warning(
                "request.rejected",
                error=exc.message,
                status_code=exc.status_code,
                path=request.url.path,
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": {"message": exc.message, **exc.details}},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected errors."""
        logger.error(
            "unhandled_exception",
            error=str(exc),
            path=request.url.path,
            exc_info=exc,
        )

        message = str(exc) if settings.is_development else "An unexpected error occurred"
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": {"message": message, "type": type(exc).__name__}},
        )

    app.include_router(router)

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "deployer.main:create_app",
        factory=True,
        host=get_settings().api_host,
        port=get_settings().api_port,
    )
