"""
FireGuard FastAPI Application Entry Point
Main application factory that configures FastAPI with all dependencies.
"""
import asyncio
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder

from fireguard.config import settings
from fireguard.core.engine import build_engine
from fireguard.services.nasa_firms import NASAFIRMSService
from fireguard.services.open_meteo import OpenMeteoService
from fireguard.utils.logger import setup_logging, get_logger
from fireguard.utils.exceptions import FireGuardError, fireguard_exception_handler
from fireguard.api.v1.api import api_router

# Setup logging first
logger = get_logger(__name__)
setup_logging(settings.ENVIRONMENT, settings.LOG_DIR)


async def load_engine(app: FastAPI) -> None:
    """Build the risk engine off the event loop and publish it when complete."""
    try:
        engine = await asyncio.to_thread(build_engine, settings)
    except Exception as e:
        # Engine stays None; risk routes keep answering 503.
        logger.error("❌ Risk engine failed to build", error=str(e))
        return
    app.state.engine = engine
    logger.info("✅ Risk engine published", trained=engine.trained)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Lifespan context manager for FastAPI application.

    Startup opens the external service clients and starts building the risk
    engine in a worker thread; the API serves requests meanwhile and risk
    routes answer 503 until the engine is published on app.state.
    """
    logger.info("🚀 Starting FireGuard API Server", version=settings.APP_VERSION)

    app.state.engine = None
    app.state.weather_service = OpenMeteoService()
    app.state.firms_service = NASAFIRMSService(api_key=settings.NASA_FIRMS_API_KEY)
    engine_task = asyncio.create_task(load_engine(app))
    logger.info("✅ Services initialized, risk engine loading")

    yield

    logger.info("🛑 Shutting down FireGuard API Server")

    if not engine_task.done():
        engine_task.cancel()

    try:
        await app.state.weather_service.close()
        await app.state.firms_service.close()
        logger.info("✅ All resources cleaned up")
    except Exception as e:
        logger.error("❌ Shutdown error", error=str(e))


def create_application() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        FastAPI: Configured application instance
    """
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="""
        🔥 FireGuard API - Wildfire risk for Canada

        Scores fire risk from live weather and a classifier trained on
        historical NASA FIRMS detections.

        ## Key Features
        - Point risk from current Open-Meteo conditions
        - Risk grid over a bounding box
        - What-if scoring with custom weather
        - Current-day satellite fire detections
        """,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(FireGuardError, fireguard_exception_handler)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Structured response for missing or ill-typed query parameters."""
        logger.warning(
            "Request validation failed",
            path=request.url.path,
            errors=exc.errors(),
        )

        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "error": {
                    "code": "VALIDATION_ERROR",
                    "message": "Request validation failed",
                    "details": jsonable_encoder(exc.errors())
                }
            }
        )

    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.get("/health")
    async def health_check():
        """Liveness check."""
        return {
            "status": "healthy",
            "service": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "environment": settings.ENVIRONMENT
        }

    @app.get("/")
    async def root():
        """Root endpoint with API information."""
        return {
            "message": "Welcome to FireGuard API",
            "service": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "docs": "/docs",
            "health": "/health"
        }

    logger.info(
        "FastAPI application configured",
        environment=settings.ENVIRONMENT,
        debug=settings.DEBUG,
        cors_origins=settings.BACKEND_CORS_ORIGINS
    )

    return app


app = create_application()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "fireguard.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="info"
    )
